from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PUBLIC_ROUTES = [
    "/",
    "/sign-in(.*)",
    "/sign-up(.*)",
    "/api/webhooks(.*)",
    "/api/cron(.*)",
    "/v1/health",
]
DEFAULT_ONBOARDING_ROUTES = ["/onboarding", "/onboarding/(.*)"]
SUPPORTED_AI_PROVIDERS = ("gemini", "openai")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    ai_provider: str
    gemini_api_key: str | None
    gemini_model: str
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    users_db_path: str
    auth_user_header: str
    auth_proxy_secret: str | None
    public_routes: tuple[str, ...]
    onboarding_routes: tuple[str, ...]
    sign_in_url: str
    onboarding_url: str
    post_onboarding_redirect: str
    route_gate_fail_closed: bool


@dataclass(frozen=True)
class ConfigIssue:
    field: str
    message: str


class ConfigurationError(RuntimeError):
    def __init__(self, issues: list[ConfigIssue]):
        self.issues = list(issues)
        summary = "; ".join(f"{issue.field}: {issue.message}" for issue in self.issues)
        super().__init__(f"Invalid configuration ({summary})")


def load_settings() -> Settings:
    return Settings(
        ai_provider=(_get_env("AI_PROVIDER", "gemini") or "gemini").strip().lower(),
        gemini_api_key=_get_env("GEMINI_API_KEY"),
        gemini_model=(_get_env("GEMINI_MODEL", "gemini-1.5-flash") or "gemini-1.5-flash").strip(),
        openai_api_key=_get_env("OPENAI_API_KEY"),
        openai_model=(_get_env("OPENAI_MODEL", "gpt-4o-mini") or "gpt-4o-mini").strip(),
        openai_base_url=_get_env("OPENAI_BASE_URL"),
        rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=(_get_env("LOG_LEVEL", "INFO") or "INFO").strip().upper(),
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
            ],
        ),
        users_db_path=_get_env("USERS_DB_PATH", "data/users.db") or "data/users.db",
        auth_user_header=_get_env("AUTH_USER_HEADER", "X-User-Id") or "X-User-Id",
        auth_proxy_secret=_get_env("AUTH_PROXY_SECRET"),
        public_routes=_get_env_list("PUBLIC_ROUTES", DEFAULT_PUBLIC_ROUTES),
        onboarding_routes=_get_env_list("ONBOARDING_ROUTES", DEFAULT_ONBOARDING_ROUTES),
        sign_in_url=_get_env("SIGN_IN_URL", "/sign-in") or "/sign-in",
        onboarding_url=_get_env("ONBOARDING_URL", "/onboarding") or "/onboarding",
        post_onboarding_redirect=_get_env("POST_ONBOARDING_REDIRECT", "/dashboard") or "/dashboard",
        route_gate_fail_closed=_get_env_bool("ROUTE_GATE_FAIL_CLOSED", False),
    )


def collect_config_issues(cfg: Settings, *, require_ai_credentials: bool = True) -> list[ConfigIssue]:
    issues: list[ConfigIssue] = []

    if cfg.ai_provider not in SUPPORTED_AI_PROVIDERS:
        issues.append(
            ConfigIssue("AI_PROVIDER", f"must be one of {', '.join(SUPPORTED_AI_PROVIDERS)}")
        )
    elif require_ai_credentials:
        if cfg.ai_provider == "gemini" and not cfg.gemini_api_key:
            issues.append(ConfigIssue("GEMINI_API_KEY", "is not defined in environment variables"))
        if cfg.ai_provider == "openai" and not cfg.openai_api_key:
            issues.append(ConfigIssue("OPENAI_API_KEY", "is not defined in environment variables"))

    if cfg.log_level not in LOG_LEVELS:
        issues.append(ConfigIssue("LOG_LEVEL", f"must be one of {', '.join(LOG_LEVELS)}"))

    if not cfg.onboarding_url.startswith(("/", "http://", "https://")):
        issues.append(ConfigIssue("ONBOARDING_URL", "must be a path or an absolute URL"))

    if not cfg.auth_user_header.strip():
        issues.append(ConfigIssue("AUTH_USER_HEADER", "must not be blank"))

    return issues


def ensure_valid_settings(cfg: Settings, *, require_ai_credentials: bool = True) -> None:
    issues = collect_config_issues(cfg, require_ai_credentials=require_ai_credentials)
    if issues:
        raise ConfigurationError(issues)


settings = load_settings()
