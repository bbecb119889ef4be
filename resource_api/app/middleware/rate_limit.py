"""Per‑client rate limiting backed by slowapi."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # Must stay synchronous: SlowAPIMiddleware calls the handler directly.
    return JSONResponse(
        status_code=429,
        content={"error": "Too Many Requests", "message": f"Rate limit exceeded: {exc.detail}"},
    )


def setup_rate_limit(app: FastAPI, limit: str, enabled: bool = True) -> Limiter:
    """Attach a limiter applying ``limit`` to every route of ``app``.

    Each application gets its own limiter (and in‑memory counters).
    """
    limiter = Limiter(key_func=get_remote_address, default_limits=[limit], enabled=enabled)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    return limiter
