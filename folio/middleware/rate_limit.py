"""
Rate limit по IP: фиксированное окно на клиента.

Лимит по умолчанию — из config (RATE_LIMIT, например "100/minute").
При превышении — 429, заголовок Retry-After и структурированный ErrorResponse.
"""
import math
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from folio.core.config import parse_rate_limit, settings
from folio.schemas.common import ErrorResponse

# Чистим просроченные окна, когда клиентов накопилось больше этого
_SWEEP_THRESHOLD = 10_000


def _get_client_ip(request: Request) -> str:
    """IP клиента: X-Forwarded-For (первый) или request.client.host."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Счётчик запросов по ключу (IP), при превышении лимита — 429."""

    def __init__(
        self,
        app,
        limit: str | None = None,
        key_func: Callable[[Request], str] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.key_func = key_func or _get_client_ip
        self.clock = clock
        self.max_requests, self.window_seconds = parse_rate_limit(limit or settings.RATE_LIMIT)
        # ключ -> (count, window_start)
        self._windows: dict[str, tuple[int, float]] = {}

    def _sweep(self, now: float) -> None:
        expired = [k for k, (_, start) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str) -> float | None:
        """Засчитать запрос. None — пропускаем, иначе секунды до конца окна."""
        now = self.clock()
        if len(self._windows) > _SWEEP_THRESHOLD:
            self._sweep(now)
        count, start = self._windows.get(key, (0, now))
        if now - start >= self.window_seconds:
            count, start = 0, now
        count += 1
        self._windows[key] = (count, start)
        if count > self.max_requests:
            return self.window_seconds - (now - start)
        return None

    async def dispatch(self, request: Request, call_next):
        retry_after = self.hit(self.key_func(request))
        if retry_after is not None:
            body = ErrorResponse(
                error="rate_limit_exceeded",
                message=f"Too many requests. Limit: {self.max_requests} per {self.window_seconds}s.",
            )
            return JSONResponse(
                status_code=429,
                content=body.model_dump(),
                headers={"Retry-After": str(max(1, math.ceil(retry_after)))},
            )
        return await call_next(request)
