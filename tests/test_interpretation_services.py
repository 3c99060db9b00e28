import time

import pytest
from google.genai import types

from conftest import VALID_READING, FakeGeminiClient, gemini_response
from lenormand_api.core.context import AppContext
from lenormand_api.core.errors import InputValidationError, UpstreamError
from lenormand_api.core.security import build_limiter
from lenormand_api.models.interpretation_models import InterpretationRequest
from lenormand_api.services.interpretation_services import build_prompt, interpret_cards
from lenormand_api.services.llm_services import extract_text


def _context(settings, client, delay_ms=0):
    return AppContext(
        settings=settings.model_copy(update={"REQUEST_DELAY": delay_ms}),
        llm_client=client,
        limiter=build_limiter(),
    )


def test_build_prompt_lowercases_theme_and_timeframe():
    prompt = build_prompt("O Navio", "A Chave", "Futuro", "Profissional")

    assert '"O Navio" e "A Chave"' in prompt
    assert "no âmbito profissional para o tempo futuro" in prompt
    assert "1. O significado geral da combinação" in prompt
    assert "2. Como isso se aplica especificamente ao tema profissional" in prompt
    assert "3. O que isso indica para o futuro" in prompt


def test_extract_text_reads_first_candidate():
    assert extract_text(gemini_response("primeira")) == "primeira"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"candidates": []},
        {"candidates": [{}]},
        {"candidates": [{"content": {"parts": []}}]},
    ],
)
def test_extract_text_rejects_incomplete_bodies(payload):
    with pytest.raises(UpstreamError, match="Resposta da API inválida"):
        extract_text(types.GenerateContentResponse.model_validate(payload))


@pytest.mark.asyncio
async def test_interpret_cards_waits_configured_delay_on_success(settings):
    client = FakeGeminiClient(gemini_response(" texto "))
    context = _context(settings, client, delay_ms=200)

    start = time.perf_counter()
    text = await interpret_cards(context, InterpretationRequest(**VALID_READING), "abc123")

    assert text == "texto"
    assert time.perf_counter() - start >= 0.19


@pytest.mark.asyncio
async def test_interpret_cards_does_not_wait_on_failure(settings):
    client = FakeGeminiClient(error=UpstreamError("boom", status_code=500))
    context = _context(settings, client, delay_ms=2000)

    start = time.perf_counter()
    with pytest.raises(UpstreamError):
        await interpret_cards(context, InterpretationRequest(**VALID_READING), "abc123")

    assert time.perf_counter() - start < 1


@pytest.mark.asyncio
async def test_interpret_cards_validates_before_calling_upstream(settings):
    client = FakeGeminiClient()
    context = _context(settings, client)

    with pytest.raises(InputValidationError) as exc:
        await interpret_cards(context, InterpretationRequest(carta1="O Sol"), "abc123")

    assert exc.value.messages[0] == "Carta2 inválida: None"
    assert client.calls == []
