from contextlib import asynccontextmanager
import logging

from app.ai.factory import get_ai_client
from app.core.config import ensure_valid_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    cfg = app.state.settings
    ensure_valid_settings(cfg, require_ai_credentials=app.state.ai_client is None)

    app.state.user_store.init_db()
    if app.state.ai_client is None:
        app.state.ai_client = get_ai_client(cfg)

    logger.info(
        "startup_complete ai_provider=%s users_db=%s fail_closed=%s",
        cfg.ai_provider,
        app.state.user_store.db_path,
        cfg.route_gate_fail_closed,
    )
    yield
