"""Per-client request throttling for the Scribe API."""

import time
from collections import deque
from typing import Callable, NamedTuple, Optional, Sequence

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

WINDOW_SECONDS = 60.0
EXEMPT_PATHS = ("/api/health",)


class RateRule(NamedTuple):
    """A named bucket for every path under ``prefixes``, limited per minute."""

    bucket: str
    prefixes: tuple[str, ...]
    limit: int
    detail: str


def default_rules(ai_limit: int, auth_limit: int) -> list[RateRule]:
    return [
        RateRule(
            "auth",
            ("/api/auth/signup", "/api/auth/login", "/api/auth/admin"),
            auth_limit,
            "Too many sign-in attempts. Please wait before trying again.",
        ),
        RateRule(
            "ai",
            ("/api/conversations", "/api/prompts/optimize"),
            ai_limit,
            "Too many writing requests. Please wait before trying again.",
        ),
    ]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window counters keyed by (client, bucket), kept in memory.

    Every request counts against the ``global`` bucket; a request whose path
    matches a rule also counts against that rule's bucket.
    """

    def __init__(
        self,
        app,
        requests_per_minute: int = 60,
        rules: Optional[Sequence[RateRule]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.rules = list(rules or [])
        self._clock = clock
        self._hits: dict[tuple[str, str], deque] = {}
        self._next_sweep = clock() + WINDOW_SECONDS

    @staticmethod
    def client_key(request: Request) -> str:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def rule_for(self, path: str) -> Optional[RateRule]:
        return next((r for r in self.rules if path.startswith(r.prefixes)), None)

    def _admit(self, key: tuple[str, str], limit: int, now: float) -> bool:
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= now - WINDOW_SECONDS:
            hits.popleft()
        if len(hits) >= limit:
            return False
        hits.append(now)
        return True

    def _sweep(self, now: float) -> None:
        if now < self._next_sweep:
            return
        self._next_sweep = now + WINDOW_SECONDS
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] <= now - WINDOW_SECONDS]:
            del self._hits[key]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path in EXEMPT_PATHS:
            return await call_next(request)

        now = self._clock()
        self._sweep(now)
        client = self.client_key(request)

        rule = self.rule_for(path)
        if rule and not self._admit((client, rule.bucket), rule.limit, now):
            return JSONResponse(status_code=429, content={"detail": rule.detail})
        if not self._admit((client, "global"), self.requests_per_minute, now):
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Please wait before trying again."},
            )

        return await call_next(request)
