# naturenest/core/throttle.py
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from naturenest.core.config import settings
from naturenest.observability.logging import get_logger

logger = get_logger(__name__)


def rate_limit(limit: int, window_seconds: int) -> str:
    """limits notation, e.g. "100/60 seconds"."""
    return f"{limit}/{window_seconds} seconds"


def build_limiter(
    limit: Optional[int] = None,
    window_seconds: Optional[int] = None,
) -> Limiter:
    """
    Per client address, applied to every route by SlowAPIMiddleware.
    Moving window: at most `limit` requests in any `window_seconds` span.
    """
    return Limiter(
        key_func=get_remote_address,
        default_limits=[
            rate_limit(
                limit or settings.THROTTLE_LIMIT,
                window_seconds or settings.THROTTLE_TTL_SECONDS,
            )
        ],
        strategy="moving-window",
    )


limiter = build_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # sync: SlowAPIMiddleware calls the registered handler without awaiting it
    logger.warning(
        "rate limit exceeded",
        extra={
            "extra_fields": {
                "client": get_remote_address(request),
                "path": request.url.path,
                "limit": str(exc.detail),
            }
        },
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Too Many Requests"},
    )
