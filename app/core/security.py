from __future__ import annotations

import hmac
from typing import Protocol

from fastapi import HTTPException, Request, status

PROXY_SECRET_HEADER = "X-Auth-Proxy-Secret"


class IdentityProvider(Protocol):
    async def resolve(self, request: Request) -> str | None:
        """Return the caller's external user id, or None when unauthenticated."""


class HeaderIdentityProvider:
    """Trusts the user id forwarded by the auth proxy sitting in front of the app.

    Session tokens are verified upstream; this only reads the result. When a
    proxy secret is configured, requests that did not come through the proxy
    are treated as anonymous.
    """

    def __init__(self, header_name: str = "X-User-Id", proxy_secret: str | None = None):
        self._header_name = header_name
        self._proxy_secret = proxy_secret

    def _from_proxy(self, request: Request) -> bool:
        if not self._proxy_secret:
            return True
        presented = request.headers.get(PROXY_SECRET_HEADER) or ""
        return hmac.compare_digest(presented.encode("utf-8"), self._proxy_secret.encode("utf-8"))

    async def resolve(self, request: Request) -> str | None:
        if not self._from_proxy(request):
            return None
        user_id = (request.headers.get(self._header_name) or "").strip()
        return user_id or None


def require_user_id(request: Request) -> str:
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please sign in to continue.",
        )
    return user_id
