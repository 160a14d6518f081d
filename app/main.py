import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from app.ai.types import TextGenerator
from app.api.home import router as home_router
from app.api.onboarding import router as onboarding_router
from app.api.v1.ai import router as ai_router
from app.api.v1.health import router as health_router
from app.api.v1.profile import router as profile_router
from app.core.config import LOG_LEVELS, Settings, settings
from app.core.cors import cors_allowed_origins
from app.core.lifespan import lifespan
from app.core.rate_limit import limiter
from app.core.route_gate import RouteGate, RouteGateMiddleware
from app.core.security import HeaderIdentityProvider, IdentityProvider
from app.users.store import UserStore

logging.basicConfig(
    level=settings.log_level if settings.log_level in LOG_LEVELS else "INFO",
    format="%(message)s",
)
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)


def create_app(
    *,
    app_settings: Settings | None = None,
    user_store: UserStore | None = None,
    identity_provider: IdentityProvider | None = None,
    ai_client: TextGenerator | None = None,
) -> FastAPI:
    cfg = app_settings or settings
    store = user_store or UserStore(cfg.users_db_path)
    identity = identity_provider or HeaderIdentityProvider(
        header_name=cfg.auth_user_header,
        proxy_secret=cfg.auth_proxy_secret,
    )

    application = FastAPI(title="Sensei API", version="0.1.0", lifespan=lifespan)
    application.state.settings = cfg
    application.state.user_store = store
    application.state.ai_client = ai_client

    gate = RouteGate(
        identity_provider=identity,
        onboarding_lookup=store.get_onboarded,
        public_routes=cfg.public_routes,
        onboarding_routes=cfg.onboarding_routes,
        sign_in_url=cfg.sign_in_url,
        onboarding_url=cfg.onboarding_url,
        fail_closed=cfg.route_gate_fail_closed,
    )

    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    application.add_middleware(SlowAPIMiddleware)
    application.add_middleware(RouteGateMiddleware, gate=gate)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allowed_origins(cfg),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(home_router, tags=["Home"])
    application.include_router(onboarding_router, tags=["Onboarding"])
    application.include_router(health_router, prefix="/v1", tags=["Health"])
    application.include_router(profile_router, prefix="/v1", tags=["Profile"])
    application.include_router(ai_router, prefix="/v1", tags=["AI"])
    return application


app = create_app()
