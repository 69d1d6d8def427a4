"""FastAPI application factory with lifespan for KITT."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from loguru import logger

from kitt import __version__
from kitt.api.services import Services, build_services
from kitt.settings import KittSettings, get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: load + watch the knowledge base. Shutdown: stop watcher, close clients."""
    services: Services = app.state.services
    services.store.load()
    watch_task = asyncio.create_task(services.store.watch())
    logger.info(f"{services.settings.app_name} LINE bot is online on port {services.settings.port}")
    yield
    watch_task.cancel()
    with suppress(asyncio.CancelledError):
        await watch_task
    await services.aclose()


def create_app(settings: KittSettings | None = None, services: Services | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = services or build_services(settings)

    # ── mount routers ──
    from kitt.api.routes import health, line_webhook

    app.include_router(health.router, tags=["health"])
    app.include_router(line_webhook.router, tags=["line"])

    return app
