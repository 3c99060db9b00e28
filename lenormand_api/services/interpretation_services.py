# lenormand_api/services/interpretation_services.py
import asyncio
import logging

from lenormand_api.core.context import AppContext
from lenormand_api.core.errors import InputValidationError
from lenormand_api.models.interpretation_models import InterpretationRequest
from lenormand_api.services.llm_services import generate_text
from lenormand_api.services.validation_services import validate_input

logger = logging.getLogger(__name__)


def build_prompt(card1: str, card2: str, timeframe: str, theme: str) -> str:
    """
    Prompt asking for the general meaning of the pair, its reading for the
    chosen theme and what it points to in the chosen time-frame.
    """
    theme = theme.lower()
    timeframe = timeframe.lower()
    return (
        f"Como especialista em baralho cigano, interprete a combinação das cartas "
        f"\"{card1}\" e \"{card2}\" no âmbito {theme} para o tempo {timeframe}.\n"
        f"Forneça uma interpretação detalhada e significativa, incluindo:\n"
        f"1. O significado geral da combinação\n"
        f"2. Como isso se aplica especificamente ao tema {theme}\n"
        f"3. O que isso indica para o {timeframe}\n"
        f"Mantenha a interpretação clara e objetiva."
    )


def check_request(request: InterpretationRequest):
    errors = validate_input(request.carta1, request.carta2, request.tempo, request.tema)
    if errors:
        raise InputValidationError(errors)


async def interpret_cards(context: AppContext, request: InterpretationRequest, request_id: str) -> str:
    """
    Validate the reading, ask Gemini for the interpretation and return its text.

    Raises InputValidationError before any upstream call when a field is
    invalid, and UpstreamError when Gemini fails or answers with an unusable
    body. The configured delay is only awaited once generation succeeded.
    """
    check_request(request)

    logger.info(
        f"[{request_id}] Gerando interpretação para: {request.carta1} + {request.carta2} "
        f"({request.tempo}, {request.tema})"
    )
    prompt = build_prompt(request.carta1, request.carta2, request.tempo, request.tema)
    logger.debug(f"[{request_id}] Prompt: {prompt}")

    text = await generate_text(context.llm_client, context.settings, prompt, request_id)

    await asyncio.sleep(context.settings.REQUEST_DELAY / 1000)

    logger.info(f"[{request_id}] Interpretação gerada com sucesso para: {request.carta1} + {request.carta2}")
    return text.strip()
