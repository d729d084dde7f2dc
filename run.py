"""Entry point for the DJ agency portal API.

Starts the FastAPI application with Uvicorn.  Host and port are read
from ``API_HOST`` and ``API_PORT`` (see ``dj_agency_api/app/core/config.py``).

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from dj_agency_api.app.core.config import settings


async def main() -> None:
    config = Config(
        app="dj_agency_api.app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
