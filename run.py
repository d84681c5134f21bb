"""Entry point for the directory proxy.

Serves ``directory_proxy.app.main:app`` with uvicorn.  Host, port and
log level come from the same environment variables as the rest of the
configuration (``HOST``, ``PORT``, ``LOG_LEVEL``); see
``directory_proxy/app/core/config.py`` for the full list.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from directory_proxy.app.core.config import settings
from directory_proxy.app.main import app


async def main() -> None:
    """Run the API server until it is stopped."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
