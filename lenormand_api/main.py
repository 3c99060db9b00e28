# lenormand_api/main.py
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from lenormand_api.api.routes import interpretation_routes, root_routes
from lenormand_api.core.config import load_settings
from lenormand_api.core.context import AppContext, build_context
from lenormand_api.core.errors import (
    InputValidationError,
    input_validation_error_handler,
    request_validation_error_handler,
    unhandled_exception_handler,
)
from lenormand_api.core.middleware import (
    BodySizeLimitMiddleware,
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
)
from lenormand_api.core.security import cors_options, rate_limit_exceeded_handler


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the API around an explicitly constructed AppContext.

    Without a context the settings are read from the environment and a real
    Gemini client is created.
    """
    if context is None:
        context = build_context(load_settings())

    app = FastAPI(title="Lenormand Interpretation API")
    app.state.context = context
    app.state.limiter = context.limiter

    # Added last runs first: request id -> CORS -> security headers -> body limit -> routes.
    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(CORSMiddleware, **cors_options(context.settings))
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(InputValidationError, input_validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(root_routes.router, prefix="/api", tags=["Status"])
    app.include_router(interpretation_routes.build_router(context), prefix="/api", tags=["Interpretação"])

    return app
