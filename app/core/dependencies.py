from __future__ import annotations

from fastapi import Request

from app.ai.factory import get_ai_client
from app.ai.types import TextGenerator
from app.users.store import UserStore


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_text_generator(request: Request) -> TextGenerator:
    state = request.app.state
    if state.ai_client is None:
        state.ai_client = get_ai_client(state.settings)
    return state.ai_client
