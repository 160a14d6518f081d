from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional
from urllib.parse import urlencode, urljoin

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import RedirectResponse, Response

from app.core.security import IdentityProvider

logger = logging.getLogger(__name__)

REDIRECT_PARAM = "redirect_url"
WILDCARD = "(.*)"

# Paths the gate runs on: everything except framework internals and static
# files, plus api/trpc routes unconditionally.
_GATED_PATH_PATTERNS = (
    re.compile(
        r"^/(?!_next|static/|docs(?:/|$)|redoc(?:/|$)|openapi\.json$"
        r"|[^?]*\.(?:html?|css|js(?!on)|jpe?g|webp|png|gif|svg|ttf|woff2?|ico|csv|docx?|xlsx?|zip|webmanifest))"
        r".*$"
    ),
    re.compile(r"^/(api|trpc)(.*)$"),
)


def is_gated_path(path: str) -> bool:
    return any(pattern.match(path) for pattern in _GATED_PATH_PATTERNS)


def _compile_route(pattern: str) -> re.Pattern[str]:
    pieces = [re.escape(piece) for piece in pattern.split(WILDCARD)]
    body = "(.*)".join(pieces)
    if body != "/" and body.endswith("/"):
        body = body[:-1]
    return re.compile(f"^{body}/?$")


class RouteMatcher:
    """Matches request paths against ``/literal`` and ``/prefix(.*)`` patterns."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = tuple(patterns)
        self._compiled = tuple(_compile_route(pattern) for pattern in self.patterns)

    def __call__(self, path: str) -> bool:
        return any(regex.match(path) for regex in self._compiled)


class GateOutcome(str, enum.Enum):
    PASS = "pass"
    SIGN_IN = "sign_in"
    ONBOARDING = "onboarding"


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    user_id: str | None = None
    location: str | None = None


OnboardingLookup = Callable[[str], Optional[bool]]


def _absolute(target: str, request: Request) -> str:
    if target.startswith(("http://", "https://")):
        return target
    return urljoin(str(request.base_url), target)


def _with_query(url: str, **params: str) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(params)}"


class RouteGate:
    def __init__(
        self,
        *,
        identity_provider: IdentityProvider,
        onboarding_lookup: OnboardingLookup,
        public_routes: Iterable[str],
        onboarding_routes: Iterable[str],
        sign_in_url: str = "/sign-in",
        onboarding_url: str = "/onboarding",
        fail_closed: bool = False,
    ):
        self._identity_provider = identity_provider
        self._onboarding_lookup = onboarding_lookup
        self.is_public_route = RouteMatcher(public_routes)
        self.is_onboarding_route = RouteMatcher(onboarding_routes)
        self._sign_in_url = sign_in_url
        self._onboarding_url = onboarding_url
        self._fail_closed = fail_closed

    def _sign_in(self, request: Request) -> GateDecision:
        location = _with_query(_absolute(self._sign_in_url, request), **{REDIRECT_PARAM: str(request.url)})
        return GateDecision(GateOutcome.SIGN_IN, location=location)

    def _onboarding(self, request: Request, user_id: str) -> GateDecision:
        return GateDecision(
            GateOutcome.ONBOARDING,
            user_id=user_id,
            location=_absolute(self._onboarding_url, request),
        )

    async def decide(self, request: Request) -> GateDecision:
        path = request.url.path
        if self.is_public_route(path):
            return GateDecision(GateOutcome.PASS)

        user_id = await self._identity_provider.resolve(request)
        if not user_id:
            return self._sign_in(request)

        if self.is_onboarding_route(path):
            return GateDecision(GateOutcome.PASS, user_id=user_id)

        try:
            onboarded = await run_in_threadpool(self._onboarding_lookup, user_id)
        except Exception as exc:  # noqa: BLE001 - policy decides below
            logger.exception("route_gate_onboarding_lookup_failed user_id=%s path=%s: %s", user_id, path, exc)
            if self._fail_closed:
                return self._onboarding(request, user_id)
            return GateDecision(GateOutcome.PASS, user_id=user_id)

        if not onboarded:
            return self._onboarding(request, user_id)
        return GateDecision(GateOutcome.PASS, user_id=user_id)


class RouteGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, gate: RouteGate):
        super().__init__(app)
        self.gate = gate

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not is_gated_path(request.url.path):
            return await call_next(request)

        decision = await self.gate.decide(request)
        if decision.user_id:
            request.state.user_id = decision.user_id

        if decision.outcome is GateOutcome.PASS:
            return await call_next(request)

        logger.info(
            "route_gate_redirect outcome=%s path=%s user_id=%s",
            decision.outcome.value,
            request.url.path,
            decision.user_id,
        )
        return RedirectResponse(url=decision.location or "/", status_code=307)
