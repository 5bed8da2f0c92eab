"""
Offline worker application: an offline-first proxy in front of the API.

Run with: uvicorn dashboard.worker.main:app --port 8081
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator

from fastapi import FastAPI

from dashboard.config import Settings, configure_logging, get_settings
from dashboard.worker.notifications import DAILY_CHECK_TAG
from dashboard.worker.routes import proxy_router, router
from dashboard.worker.service_worker import ServiceWorker

logger = logging.getLogger(__name__)


async def _periodic_reminders(worker: ServiceWorker, interval: float) -> None:
    """Fire the daily-check periodic sync every ``interval`` seconds."""
    while True:
        await asyncio.sleep(interval)
        await worker.handle_periodic_sync(DAILY_CHECK_TAG)


def create_worker_app(settings: Settings, worker: ServiceWorker | None = None) -> FastAPI:
    """Build the worker app around a (possibly pre-built) service worker."""
    worker = worker or ServiceWorker(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # Startup
        configure_logging(settings)
        try:
            await worker.start()
            logger.info("Worker active for %s (cache %s)", worker.scope, settings.worker_cache_name)
        except Exception:
            logger.exception("Worker install failed; requests will pass through")

        reminders = None
        if settings.worker_periodic_sync_seconds > 0:
            reminders = asyncio.create_task(
                _periodic_reminders(worker, settings.worker_periodic_sync_seconds)
            )
        yield
        # Shutdown
        if reminders is not None:
            reminders.cancel()
            with suppress(asyncio.CancelledError):
                await reminders
        await worker.close()

    app = FastAPI(
        title=f"{settings.app_name} Worker",
        description="Offline cache, sync queue and reminders",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.worker = worker

    # Control routes first: the proxy matches every path
    app.include_router(router)
    app.include_router(proxy_router)
    return app


app = create_worker_app(get_settings())
