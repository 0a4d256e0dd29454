"""
FastAPI application factory for the banks-closed API.

Usage:
    uvicorn api.app:app --port 3000
    python run.py
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.request_info import remote_ip, request_id
from api.routers import banks, countries
from bus.events import PAGE_VISIT

log = logging.getLogger("banks.api")


def create_app(services, lifespan=None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    `services` (orchestrator.Services) is stored on app.state so routers can
    retrieve collaborators via request.app.state.services.
    """
    app = FastAPI(
        title="Are Banks Closed Today?",
        version="1.0",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def track_page_visit(request: Request, call_next):
        # Every request is tracked; tracking can never fail the request
        try:
            services.analytics.record_event(
                PAGE_VISIT,
                {
                    "uuid":        request_id(request),
                    "remote_ip":   remote_ip(request),
                    "user_agent":  request.headers.get("user-agent"),
                    "request_url": str(request.url),
                },
                correlation_id=request_id(request),
                source="api",
            )
        except Exception as exc:
            log.warning("page_visit tracking failed: %s", exc)
        return await call_next(request)

    @app.get("/healthz", tags=["health"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    PREFIX = "/api/v1"
    app.include_router(banks.router,     prefix=PREFIX)
    app.include_router(countries.router, prefix=PREFIX)

    return app


# ── Module-level app for `uvicorn api.app:app` ────────────────────────────────

def _make_default_app() -> FastAPI:
    from config.settings import settings
    from orchestrator import build_services

    services = build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        log.info("banks-closed API started (environment=%s)", settings.environment)
        yield
        await services.close()
        log.info("services closed")

    return create_app(services, lifespan=lifespan)


app = _make_default_app()
