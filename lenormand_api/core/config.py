# lenormand_api/core/config.py
import logging

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    PORT: int = 3000
    HOST: str = "0.0.0.0"

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-pro-latest"

    MAX_REQUESTS_PER_MINUTE: int = 1
    REQUEST_DELAY: int = 250  # milliseconds, applied after a successful generation
    MAX_TOKENS: int = 1024
    TEMPERATURE: float = 0.7

    ENVIRONMENT: str = "development"
    PRODUCTION_ORIGIN: str = "https://joaohpereiraa.github.io"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"
        frozen = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


def load_settings(**overrides) -> Settings:
    """
    Resolve the server configuration once from the environment (and .env).
    """
    settings = Settings(**overrides)
    log_settings(settings)
    return settings


def log_settings(settings: Settings):
    logger.info("=== Configurações do Servidor ===")
    logger.info(f"Porta: {settings.PORT}")
    logger.info(f"API Key: {'Definida' if settings.GEMINI_API_KEY else 'Não definida'}")
    logger.info(f"Modelo: {settings.GEMINI_MODEL}")
    logger.info(f"Rate Limit: {settings.MAX_REQUESTS_PER_MINUTE} requisições/minuto")
    logger.info(f"Delay entre requisições: {settings.REQUEST_DELAY} ms")
    logger.info(f"Max Tokens: {settings.MAX_TOKENS}")
    logger.info(f"Temperature: {settings.TEMPERATURE}")
    logger.info(f"Ambiente: {settings.ENVIRONMENT}")
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY não definida; chamadas à API Gemini irão falhar.")
