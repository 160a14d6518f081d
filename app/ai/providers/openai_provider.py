from __future__ import annotations

from typing import Optional

from openai import AsyncOpenAI

from app.core.config import ConfigIssue, ConfigurationError, Settings


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.2,
        client: Optional[AsyncOpenAI] = None,
    ):
        self._model = model
        self._temperature = temperature
        if client is not None:
            self._client = client
            return

        key = (api_key or "").strip()
        if not key:
            raise ConfigurationError(
                [ConfigIssue("OPENAI_API_KEY", "is not defined in environment variables")]
            )
        # Failures surface to the caller on the first attempt.
        self._client = AsyncOpenAI(api_key=key, base_url=base_url or None, max_retries=0)

    @classmethod
    def from_settings(cls, cfg: Settings) -> "OpenAIProvider":
        return cls(model=cfg.openai_model, api_key=cfg.openai_api_key, base_url=cfg.openai_base_url)

    async def generate(self, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self._temperature,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
