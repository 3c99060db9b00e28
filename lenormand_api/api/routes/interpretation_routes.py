# lenormand_api/api/routes/interpretation_routes.py
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from lenormand_api.core.context import AppContext
from lenormand_api.core.errors import InputValidationError, UpstreamError, utc_timestamp
from lenormand_api.core.security import interpretation_rate_limit
from lenormand_api.models.interpretation_models import InterpretationRequest, InterpretationResponse
from lenormand_api.services.interpretation_services import interpret_cards

logger = logging.getLogger(__name__)


def _failure_response(request_id: str, error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": f"Erro ao gerar interpretação: {error}",
            "requestId": request_id,
            "timestamp": utc_timestamp(),
        },
    )


def build_router(context: AppContext) -> APIRouter:
    """
    The interpretation route is built per app so that it is bound to that
    app's limiter and settings.
    """
    router = APIRouter()

    @router.post("/interpretacao", response_model=InterpretationResponse)
    @context.limiter.limit(interpretation_rate_limit(context.settings))
    async def interpret(request: Request, payload: InterpretationRequest):
        """
        Interpret a pair of Lenormand cards for a theme and a time-frame.
        """
        request_id = request.state.request_id
        request.state.body = payload.model_dump()
        logger.info(f"[{request_id}] Iniciando interpretação para: {request.state.body}")

        try:
            interpretation = await interpret_cards(context, payload, request_id)
        except InputValidationError:
            raise
        except UpstreamError as e:
            logger.error(
                f"[{request_id}] Erro ao gerar interpretação: {e} (status upstream: {e.status_code or '-'})",
                exc_info=True,
            )
            return _failure_response(request_id, e)
        except Exception as e:
            logger.error(f"[{request_id}] Erro ao gerar interpretação: {e}", exc_info=True)
            return _failure_response(request_id, e)

        return InterpretationResponse(
            interpretacao=interpretation,
            requestId=request_id,
            timestamp=utc_timestamp(),
        )

    return router
