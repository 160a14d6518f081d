from app.ai.types import TextGenerator
from app.core.config import ConfigIssue, ConfigurationError, Settings

from app.ai.providers.openai_provider import OpenAIProvider
from app.ai.providers.gemini_provider import GeminiProvider


def get_ai_client(cfg: Settings) -> TextGenerator:
    if cfg.ai_provider == "gemini":
        return GeminiProvider.from_settings(cfg)

    if cfg.ai_provider == "openai":
        return OpenAIProvider.from_settings(cfg)

    raise ConfigurationError(
        [ConfigIssue("AI_PROVIDER", f"Unsupported AI_PROVIDER='{cfg.ai_provider}'")]
    )
