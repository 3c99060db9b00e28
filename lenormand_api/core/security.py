# lenormand_api/core/security.py
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)

RATE_LIMIT_WINDOW_SECONDS = 60
RATE_LIMIT_MESSAGE = "Por favor, aguarde 1 minuto antes de fazer uma nova leitura."

LOCAL_ORIGIN_REGEX = r"http://(localhost|127\.0\.0\.1)(:\d+)?"


def build_limiter() -> Limiter:
    """
    Per-client limiter keyed on the remote address.

    The in-memory storage from `limits` is lock-protected, so concurrent
    requests update the per-client counters safely.
    """
    return Limiter(
        key_func=get_remote_address,
        strategy="moving-window",
        storage_uri="memory://",
    )


def interpretation_rate_limit(settings) -> str:
    return f"{settings.MAX_REQUESTS_PER_MINUTE}/minute"


def cors_options(settings) -> dict:
    options = {
        "allow_methods": ["GET", "POST"],
        "allow_headers": ["Content-Type"],
        "allow_credentials": True,
    }
    if settings.is_production:
        options["allow_origins"] = [settings.PRODUCTION_ORIGIN]
    else:
        options["allow_origin_regex"] = LOCAL_ORIGIN_REGEX
    return options


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    logger.warning(f"[{request_id}] Rate limit excedido para {get_remote_address(request)}: {exc.detail}")
    return JSONResponse(
        status_code=429,
        content={"error": RATE_LIMIT_MESSAGE, "retryAfter": RATE_LIMIT_WINDOW_SECONDS},
        headers={"Retry-After": str(RATE_LIMIT_WINDOW_SECONDS)},
    )
