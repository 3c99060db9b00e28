# lenormand_api/core/context.py
from dataclasses import dataclass, field
from typing import Any, Optional

from fastapi import Request
from google import genai
from slowapi import Limiter

from lenormand_api.core.config import Settings
from lenormand_api.core.security import build_limiter

# The client refuses to start without a key; calls made with this one fail upstream.
PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"


@dataclass
class AppContext:
    """
    Everything a running app needs, built once and handed to create_app().

    Holds the read-only settings, the Gemini client and the rate limiter.
    `bound_port` is filled in by the startup code once a listening socket
    exists; until then the configured port is reported.
    """
    settings: Settings
    llm_client: Any
    limiter: Limiter
    bound_port: Optional[int] = field(default=None)

    @property
    def port(self) -> int:
        return self.bound_port or self.settings.PORT


def build_context(settings: Settings, llm_client: Any = None) -> AppContext:
    if llm_client is None:
        llm_client = genai.Client(api_key=settings.GEMINI_API_KEY or PLACEHOLDER_API_KEY)
    return AppContext(settings=settings, llm_client=llm_client, limiter=build_limiter())


def get_context(request: Request) -> AppContext:
    """Dependency returning the AppContext attached to the running app."""
    return request.app.state.context
