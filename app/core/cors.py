from __future__ import annotations

from app.core.config import Settings


def cors_allowed_origins(cfg: Settings) -> list[str]:
    return list(cfg.cors_allowed_origins)
