from __future__ import annotations

from typing import Any

import google.generativeai as genai

from app.core.config import ConfigIssue, ConfigurationError, Settings


class GeminiProvider:
    """Text generation backed by a Gemini ``GenerativeModel``.

    The model object is injected so callers (and tests) decide how it is
    built. ``from_settings`` is the production path.
    """

    def __init__(self, model: Any):
        self._model = model

    @classmethod
    def from_settings(cls, cfg: Settings) -> "GeminiProvider":
        api_key = (cfg.gemini_api_key or "").strip()
        if not api_key:
            raise ConfigurationError(
                [ConfigIssue("GEMINI_API_KEY", "is not defined in environment variables")]
            )
        genai.configure(api_key=api_key)
        return cls(genai.GenerativeModel(cfg.gemini_model))

    async def generate(self, prompt: str) -> str:
        response = await self._model.generate_content_async(prompt)
        return response.text
