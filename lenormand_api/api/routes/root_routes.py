# lenormand_api/api/routes/root_routes.py
from fastapi import APIRouter, Depends

from lenormand_api.core.context import AppContext, get_context
from lenormand_api.core.errors import utc_timestamp

router = APIRouter()


@router.get("/status")
async def status(context: AppContext = Depends(get_context)):
    """Server status; configuration knobs are echoed outside production only."""
    settings = context.settings
    response = {
        "status": "online",
        "timestamp": utc_timestamp(),
        "port": context.port,
        "environment": settings.ENVIRONMENT,
    }
    if not settings.is_production:
        response["config"] = {
            "rateLimit": settings.MAX_REQUESTS_PER_MINUTE,
            "requestDelay": settings.REQUEST_DELAY,
            "maxTokens": settings.MAX_TOKENS,
            "temperature": settings.TEMPERATURE,
        }
    return response


@router.get("/test")
async def health_check(context: AppContext = Depends(get_context)):
    return {
        "message": "Backend está funcionando!",
        "timestamp": utc_timestamp(),
        "port": context.port,
    }
