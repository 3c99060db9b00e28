# lenormand_api/core/startup.py
import asyncio
import errno
import logging
import platform
import socket
import sys
from typing import Optional, Sequence

import uvicorn

from lenormand_api.core.config import Settings, log_settings
from lenormand_api.core.context import build_context
from lenormand_api.main import create_app

logger = logging.getLogger(__name__)

PORT_CANDIDATES = (3000, 3001, 3002, 3003, 3004, 3005)


class PortUnavailableError(RuntimeError):
    """Every candidate port from the preferred one upwards is already taken."""


def _next_candidate(port: int, candidates: Sequence[int]) -> Optional[int]:
    larger = [candidate for candidate in sorted(candidates) if candidate > port]
    return larger[0] if larger else None


def _listen(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    return sock


def bind_with_fallback(host: str, preferred_port: int, candidates: Sequence[int] = PORT_CANDIDATES) -> socket.socket:
    """
    Bind a listening socket on `preferred_port`, moving up the candidate list
    while the port is already in use.

    Only EADDRINUSE advances to the next larger candidate; any other bind
    error is raised as is. Raises PortUnavailableError once no larger
    candidate remains.
    """
    port = preferred_port
    while True:
        logger.info(f"Tentando porta: {port}")
        try:
            sock = _listen(host, port)
        except OSError as e:
            if e.errno != errno.EADDRINUSE:
                logger.error(f"Erro ao iniciar servidor na porta {port}: {e} (errno={e.errno})")
                raise
            next_port = _next_candidate(port, candidates)
            if next_port is None:
                raise PortUnavailableError(
                    f"Nenhuma porta disponível encontrada (tentativas a partir de {preferred_port})"
                ) from e
            logger.warning(f"Porta {port} em uso, tentando próxima porta: {next_port}")
            port = next_port
            continue

        logger.info(f"Socket aberto em {host}:{sock.getsockname()[1]}")
        return sock


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _log_unhandled_loop_error(loop: asyncio.AbstractEventLoop, context: dict):
    exc = context.get("exception")
    logger.error(f"=== ERRO NÃO TRATADO === {context.get('message')}", exc_info=exc)


async def serve(settings: Settings, sock: socket.socket):
    asyncio.get_running_loop().set_exception_handler(_log_unhandled_loop_error)

    context = build_context(settings)
    context.bound_port = sock.getsockname()[1]
    app = create_app(context)

    config = uvicorn.Config(app, log_level=settings.LOG_LEVEL.lower())
    server = uvicorn.Server(config)

    port = context.bound_port
    logger.info("=== SERVIDOR INICIADO ===")
    logger.info(f"URL do servidor: http://localhost:{port}")
    logger.info(f"Teste de conexão: http://localhost:{port}/api/test")
    logger.info(f"Status do servidor: http://localhost:{port}/api/status")

    await server.serve(sockets=[sock])


def run():
    """Console entry point: resolve settings, pick a port and serve until stopped."""
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    log_settings(settings)

    logger.info("=== INICIANDO APLICAÇÃO ===")
    logger.info(f"Python: {platform.python_version()} ({sys.platform})")
    logger.info(f"Portas disponíveis: {', '.join(str(p) for p in PORT_CANDIDATES)}")

    try:
        sock = bind_with_fallback(settings.HOST, settings.PORT)
    except (OSError, PortUnavailableError) as e:
        logger.critical(f"=== ERRO FATAL AO INICIAR SERVIDOR === {e}", exc_info=True)
        sys.exit(1)

    try:
        asyncio.run(serve(settings, sock))
    finally:
        sock.close()


if __name__ == "__main__":
    run()
