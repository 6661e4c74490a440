"""Fixed-window rate limiting per client.

Clients are identified by X-API-Key when sent, otherwise by IP. Public
routes and /v1/admin routes are counted in separate windows with separate
budgets (settings.rate_limit_public / settings.rate_limit_admin per
minute), each with a per-second burst cap.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

from bestof_shared.config import settings

from bestof_api.responses import error_response

WINDOW_SECONDS = 60
BURST_PER_SECOND = {"public": 10, "admin": 50}

ADMIN_PREFIX = "/v1/admin"
EXEMPT_PATHS = frozenset({"/health", "/ready"})

# Windows idle this long are dropped on the next sweep
STALE_AFTER_SECONDS = 10 * WINDOW_SECONDS


@dataclass
class Window:
    started: float
    count: int = 0
    burst_started: float = 0.0
    burst_count: int = 0


@dataclass
class Decision:
    allowed: bool
    limit: int
    remaining: int = 0
    code: str | None = None
    message: str | None = None
    retry_after: int = 0


class RateLimiter:
    """In-memory window counters keyed by (client, scope)."""

    def __init__(self) -> None:
        self._windows: dict[str, Window] = {}
        self._lock = threading.Lock()
        self._last_sweep = time.monotonic()

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < WINDOW_SECONDS:
            return
        self._last_sweep = now
        stale = [k for k, w in self._windows.items() if now - w.started >= STALE_AFTER_SECONDS]
        for key in stale:
            del self._windows[key]

    def hit(self, client: str, scope: str, limit: int, now: float | None = None) -> Decision:
        now = time.monotonic() if now is None else now
        burst_limit = BURST_PER_SECOND[scope]

        with self._lock:
            self._sweep(now)
            window = self._windows.setdefault(
                f"{client}:{scope}", Window(started=now, burst_started=now)
            )
            if now - window.started >= WINDOW_SECONDS:
                window.started, window.count = now, 0
            if now - window.burst_started >= 1.0:
                window.burst_started, window.burst_count = now, 0

            if window.count >= limit:
                return Decision(
                    allowed=False,
                    limit=limit,
                    code="RATE_LIMIT_EXCEEDED",
                    message=f"Rate limit exceeded. Limit: {limit} per minute.",
                    retry_after=max(1, int(window.started + WINDOW_SECONDS - now)),
                )
            if window.burst_count >= burst_limit:
                return Decision(
                    allowed=False,
                    limit=limit,
                    remaining=limit - window.count,
                    code="BURST_LIMIT_EXCEEDED",
                    message=f"Burst limit exceeded. Max {burst_limit} requests/second.",
                    retry_after=1,
                )

            window.count += 1
            window.burst_count += 1
            return Decision(allowed=True, limit=limit, remaining=limit - window.count)


def client_key(request: Request) -> str:
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"key:{api_key}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app) -> None:
        super().__init__(app)
        self.limiter = RateLimiter()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        if request.url.path.startswith(ADMIN_PREFIX):
            scope, limit = "admin", settings.rate_limit_admin
        else:
            scope, limit = "public", settings.rate_limit_public

        decision = self.limiter.hit(client_key(request), scope, limit)
        headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
        }
        if not decision.allowed:
            return JSONResponse(
                status_code=429,
                content=error_response(decision.code or "RATE_LIMIT_EXCEEDED", decision.message or ""),
                headers={**headers, "Retry-After": str(decision.retry_after)},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
