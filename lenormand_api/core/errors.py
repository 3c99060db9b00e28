# lenormand_api/core/errors.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class InputValidationError(ValueError):
    """The request fields fall outside their closed vocabularies."""

    def __init__(self, messages: List[str]):
        super().__init__("; ".join(messages))
        self.messages = messages


class UpstreamError(RuntimeError):
    """Gemini answered with an error status or with a body we cannot use."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


async def input_validation_error_handler(request: Request, exc: InputValidationError) -> JSONResponse:
    request_id = _request_id(request)
    logger.error(f"[{request_id}] Erro de validação: {exc.messages}")
    return JSONResponse(
        status_code=400,
        content={"error": "Dados inválidos", "detalhes": exc.messages, "requestId": request_id},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or non-string fields get the same 400 shape as vocabulary errors."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location or 'body'}: {error.get('msg')}")
    return await input_validation_error_handler(request, InputValidationError(messages))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)
    logger.error(
        f"[{request_id}] Erro não tratado: {exc} | "
        f"method={request.method} path={request.url.path} "
        f"body={getattr(request.state, 'body', None)} headers={dict(request.headers)}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Erro interno do servidor",
            "message": str(exc),
            "requestId": request_id,
            "timestamp": utc_timestamp(),
        },
    )
