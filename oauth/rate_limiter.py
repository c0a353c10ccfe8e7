"""Fixed-window request limits for the callback server routes"""

import logging
import math
import time
from typing import Callable, Dict, NamedTuple, Tuple

from aiohttp import web

logger = logging.getLogger(__name__)


class RateLimitResult(NamedTuple):
    allowed: bool
    limit: int
    remaining: int
    reset_after: float


class RateLimiter:
    """Counts hits per client within fixed windows

    Args:
        max_requests: Hits allowed per window
        window: Window length in seconds
        message: Body returned once the limit is exceeded
        clock: Monotonic time source
    """

    def __init__(
        self,
        max_requests: int,
        window: float,
        message: str = "Too many requests, please try again later",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window = window
        self.message = message
        self._clock = clock
        # client key -> (window start, hits)
        self._hits: Dict[str, Tuple[float, int]] = {}

    def hit(self, key: str) -> RateLimitResult:
        now = self._clock()
        started, count = self._hits.get(key, (now, 0))
        if now - started >= self.window:
            started, count = now, 0
        count += 1
        self._hits[key] = (started, count)

        return RateLimitResult(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(self.max_requests - count, 0),
            reset_after=max(self.window - (now - started), 0.0),
        )

    def reset(self) -> None:
        self._hits.clear()


def _rate_limit_headers(result: RateLimitResult) -> Dict[str, str]:
    return {
        "RateLimit-Limit": str(result.limit),
        "RateLimit-Remaining": str(result.remaining),
        "RateLimit-Reset": str(math.ceil(result.reset_after)),
    }


def rate_limit_middleware(limiters: Dict[str, RateLimiter]):
    """Build aiohttp middleware enforcing a limiter per route path

    Paths without a limiter pass through untouched.
    """

    @web.middleware
    async def middleware(request: web.Request, handler):
        limiter = limiters.get(request.path)
        if limiter is None:
            return await handler(request)

        result = limiter.hit(f"{request.path}:{request.remote}")
        headers = _rate_limit_headers(result)
        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {request.method} {request.path} from {request.remote}")
            headers["Retry-After"] = headers["RateLimit-Reset"]
            return web.Response(status=429, text=limiter.message, headers=headers)

        response = await handler(request)
        response.headers.update(headers)
        return response

    return middleware
