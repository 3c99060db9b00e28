# lenormand_api/core/middleware.py
import logging
import secrets
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from lenormand_api.core.errors import unhandled_exception_handler, utc_timestamp

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 10 * 1024

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; frame-ancestors 'self'; object-src 'none'",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
}


def new_request_id() -> str:
    return secrets.token_hex(4)


def apply_security_headers(response):
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a correlation id and logs its arrival and outcome.

    Exceptions escaping the routes are turned into the generic 500 here, so
    that response still carries the correlation id and the security headers.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = new_request_id()
        request.state.request_id = request_id
        request.state.received_at = utc_timestamp()

        logger.info(f"[{request.state.received_at}] [{request_id}] {request.method} {request.url.path}")
        logger.info(f"[{request_id}] Headers: {dict(request.headers)}")

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            response = apply_security_headers(await unhandled_exception_handler(request, exc))
        duration_ms = int((time.perf_counter() - start) * 1000)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            f"[{request.state.received_at}] [{request_id}] {request.method} {request.url.path} "
            f"- {response.status_code} ({duration_ms}ms)"
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        return apply_security_headers(await call_next(request))


class BodySizeLimitMiddleware:
    """
    Refuse request bodies larger than `max_body_bytes` with a 413.

    The bytes are counted as they arrive, so chunked uploads without a
    Content-Length are limited too. The buffered body is replayed to the app.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int = MAX_BODY_BYTES):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_bytes:
            await self._refuse(scope, receive, send, content_length)
            return

        messages = []
        received = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_body_bytes:
                await self._refuse(scope, receive, send, received)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _refuse(self, scope: Scope, receive: Receive, send: Send, size):
        request_id = getattr(Request(scope).state, "request_id", "unknown")
        logger.warning(f"[{request_id}] Corpo da requisição muito grande: {size} bytes")
        response = JSONResponse(
            status_code=413,
            content={"error": "Corpo da requisição muito grande", "requestId": request_id},
        )
        await response(scope, receive, send)
