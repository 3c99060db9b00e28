"""
Shared fixtures: settings without delay, a fake Gemini client and an app
wired around them.
"""

import os
import sys
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from google.genai import types

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from lenormand_api.core.config import Settings  # noqa: E402
from lenormand_api.core.context import AppContext  # noqa: E402
from lenormand_api.core.security import build_limiter  # noqa: E402
from lenormand_api.main import create_app  # noqa: E402

VALID_READING = {"carta1": "O Sol", "carta2": "A Lua", "tempo": "Presente", "tema": "Amor"}


def gemini_response(text: str) -> types.GenerateContentResponse:
    return types.GenerateContentResponse.model_validate(
        {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}
    )


class FakeGeminiClient:
    """Mimics `client.aio.models.generate_content` and records every call."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else gemini_response("Interpretação")
        self.error = error
        self.calls = []
        self.aio = SimpleNamespace(models=SimpleNamespace(generate_content=self._generate_content))

    async def _generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def settings():
    return Settings(REQUEST_DELAY=0, GEMINI_API_KEY="test-key", ENVIRONMENT="development")


@pytest.fixture
def fake_client():
    return FakeGeminiClient()


@pytest.fixture
def make_app(settings):
    def _factory(client=None, **overrides):
        app_settings = settings.model_copy(update=overrides) if overrides else settings
        context = AppContext(
            settings=app_settings,
            llm_client=client if client is not None else FakeGeminiClient(),
            limiter=build_limiter(),
        )
        return create_app(context)
    return _factory


@pytest.fixture
def api(make_app, fake_client):
    with TestClient(make_app(fake_client)) as client:
        yield client
