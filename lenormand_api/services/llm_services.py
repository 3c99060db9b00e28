# lenormand_api/services/llm_services.py
import logging
from typing import Any

from google.genai import errors, types

from lenormand_api.core.config import Settings
from lenormand_api.core.errors import UpstreamError

logger = logging.getLogger(__name__)

INVALID_RESPONSE_MESSAGE = "Resposta da API inválida"

TOP_P = 0.8
TOP_K = 40

SAFETY_SETTINGS = [
    types.SafetySetting(
        category=category,
        threshold=types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    )
    for category in (
        types.HarmCategory.HARM_CATEGORY_HARASSMENT,
        types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
    )
]


def build_generation_config(settings: Settings) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        temperature=settings.TEMPERATURE,
        max_output_tokens=settings.MAX_TOKENS,
        top_p=TOP_P,
        top_k=TOP_K,
        safety_settings=SAFETY_SETTINGS,
    )


def extract_text(response: Any) -> str:
    """
    Pull the text of the first candidate out of a generate_content response.

    Raises UpstreamError when the candidate/content/parts chain is missing,
    e.g. when the prompt was blocked and no candidate came back.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise UpstreamError(INVALID_RESPONSE_MESSAGE)

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None)
    if not parts or getattr(parts[0], "text", None) is None:
        raise UpstreamError(INVALID_RESPONSE_MESSAGE)

    return parts[0].text


async def generate_text(client: Any, settings: Settings, prompt: str, request_id: str = "-") -> str:
    """
    Send a single prompt to Gemini and return the generated text.

    Upstream error statuses are surfaced as UpstreamError with the status code
    and message Gemini reported. Nothing is retried.
    """
    logger.info(f"[{request_id}] Chamando API Gemini ({settings.GEMINI_MODEL})...")
    try:
        response = await client.aio.models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=prompt,
            config=build_generation_config(settings),
        )
    except errors.APIError as e:
        logger.error(f"[{request_id}] Erro na API Gemini: status={e.code} status_text={e.status} error={e.message}")
        raise UpstreamError(
            f"Erro na API Gemini: {e.code} - {e.message or 'Erro desconhecido'}",
            status_code=e.code,
        ) from e

    logger.info(f"[{request_id}] Resposta da API Gemini recebida")
    return extract_text(response)
