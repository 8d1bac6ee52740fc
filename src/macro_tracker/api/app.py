"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from macro_tracker.api.nutrition import router as nutrition_router
from macro_tracker.api.tracking import router as tracking_router
from macro_tracker.app_logging import configure_logging
from macro_tracker.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Macro Tracker", lifespan=lifespan)
    app.state.container = container

    app.include_router(nutrition_router)
    app.include_router(tracking_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
