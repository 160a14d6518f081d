from __future__ import annotations

import json
import logging
import time
from typing import Any

from app.ai.json_extract import extract_json_text
from app.ai.types import TextGenerator

logger = logging.getLogger(__name__)


class AIContentError(RuntimeError):
    def __init__(self, message: str, *, code: str):
        super().__init__(message)
        self.code = code


class ContentGenerationError(AIContentError):
    def __init__(self) -> None:
        super().__init__("Failed to generate AI content", code="content_generation_failed")


class JSONGenerationError(AIContentError):
    def __init__(self) -> None:
        super().__init__("Failed to generate AI JSON content", code="json_generation_failed")


async def generate_content(client: TextGenerator, prompt: str) -> str:
    started = time.perf_counter()
    try:
        text = await client.generate(prompt)
    except Exception as exc:  # noqa: BLE001 - upstream detail must not reach callers
        logger.exception(
            "ai_generate_content_failed prompt_len=%s latency_ms=%s: %s",
            len(prompt),
            int((time.perf_counter() - started) * 1000),
            exc,
        )
        raise ContentGenerationError() from exc
    logger.debug(
        "ai_generate_content_ok prompt_len=%s response_len=%s latency_ms=%s",
        len(prompt),
        len(text),
        int((time.perf_counter() - started) * 1000),
    )
    return text


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {token!r}")


async def generate_json(client: TextGenerator, prompt: str) -> Any:
    started = time.perf_counter()
    try:
        text = await client.generate(prompt)
        return json.loads(extract_json_text(text), parse_constant=_reject_constant)
    except Exception as exc:  # noqa: BLE001 - unreachable model and bad JSON are one error kind
        logger.exception(
            "ai_generate_json_failed prompt_len=%s latency_ms=%s: %s",
            len(prompt),
            int((time.perf_counter() - started) * 1000),
            exc,
        )
        raise JSONGenerationError() from exc
