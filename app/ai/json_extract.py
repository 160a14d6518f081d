from __future__ import annotations

from dataclasses import dataclass

FENCE = "```"


@dataclass(frozen=True)
class FencedBlock:
    label: str
    body: str


def iter_fenced_blocks(text: str):
    """Yield markdown code fences in order of appearance.

    The label is whatever follows the opening fence on the same line. An
    opening fence without a matching close is ignored.
    """
    pos = 0
    while True:
        start = text.find(FENCE, pos)
        if start < 0:
            return
        label_start = start + len(FENCE)
        newline = text.find("\n", label_start)
        close = text.find(FENCE, label_start)
        if close < 0:
            return

        if 0 <= newline < close:
            label = text[label_start:newline].strip()
            body_start = newline + 1
        else:
            # Single-line fence such as ```json {"a": 1}```
            label = ""
            body_start = label_start
            head = text[label_start:close]
            if head.lower().startswith("json"):
                label = "json"
                body_start = label_start + len("json")

        yield FencedBlock(label=label, body=text[body_start:close])
        pos = close + len(FENCE)


def extract_json_text(text: str) -> str:
    """Pick the JSON candidate out of a model response.

    Preference order: the first block labelled ``json``, then the first fenced
    block of any label, then the whole response. The result is stripped.
    """
    blocks = list(iter_fenced_blocks(text))
    for block in blocks:
        if block.label.lower() == "json":
            return block.body.strip()
    if blocks:
        return blocks[0].body.strip()
    return text.strip()
