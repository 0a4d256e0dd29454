"""
banks-closed — HTTP server entrypoint.

Builds the services from settings and serves the FastAPI app with uvicorn.

Usage:
    python run.py
    PORT=8080 python run.py                       # override port (default BANKS_PORT / 3000)
    BANKS_ANALYTICS_BACKEND=redis python run.py   # publish analytics to Redis Streams
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

import structlog
import uvicorn

# ── Logging setup ──────────────────────────────────────────────────────────────
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    stream=sys.stdout,
)

log = structlog.get_logger("banks.run")


async def main() -> None:
    from api.app import app
    from config.settings import settings

    services = app.state.services
    log.info(
        "services built",
        environment=settings.environment,
        analytics=settings.analytics_backend,
        error_tracker=settings.error_tracker,
        countries=list(services.registry.supported_countries()),
    )

    port = int(os.environ.get("PORT", settings.port))
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=port,
        log_level="info",
        # Reuse the running event loop
        loop="none",
    )
    server = uvicorn.Server(config)
    log.info("server starting", port=port)

    await server.serve()
    log.info("banks-closed stopped")


if __name__ == "__main__":
    asyncio.run(main())
