"""Inventory API application.

``create_app`` wires settings, services, exception handlers and the feature
routers; ``run`` is the console entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI

from ..__version__ import __version__
from ..config.logging_config import setup_logging
from ..config.settings import InventorySettings, get_settings
from ..features.communities.routers import router as communities_router
from ..features.resiloc_indicators.routers import router as resiloc_indicators_router
from ..features.resiloc_proxies.routers import router as resiloc_proxies_router
from ..features.resiloc_scenarios.routers import router as resiloc_scenarios_router
from ..features.scenarios.routers import router as scenarios_router
from ..features.snapshots.routers import router as snapshots_router
from ..features.static_proxies.routers import router as static_proxies_router
from ..features.users.routers import roles_router, router as users_router
from .container import ServiceContainer
from .dependencies import get_container
from .exception_handlers import register_exception_handlers

logger = logging.getLogger(__name__)

ROUTERS = (
    users_router,
    roles_router,
    communities_router,
    resiloc_proxies_router,
    resiloc_indicators_router,
    resiloc_scenarios_router,
    static_proxies_router,
    scenarios_router,
    snapshots_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the service container unless one was injected, close it on shutdown."""
    owned = app.state.container is None
    if owned:
        app.state.container = await ServiceContainer.create(app.state.settings)
        logger.info(f"Inventory services ready (schema {app.state.settings.database_schema})")

    yield

    if owned:
        await app.state.container.close()
        logger.info("Inventory services closed")


def create_app(
    settings: Optional[InventorySettings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """Create the inventory API.

    Args:
        settings: Settings to use; read from the environment when omitted.
        container: Prebuilt services, used as-is and never closed by the app.
    """
    setup_logging()
    settings = settings or get_settings()

    app = FastAPI(
        title="RESILOC Inventory API",
        version=__version__,
        description="Communities, proxy/indicator/scenario templates, community instances and snapshots",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )
    app.state.settings = settings
    app.state.container = container

    register_exception_handlers(app, settings.is_production)

    for router in ROUTERS:
        app.include_router(router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health", tags=["Health"])
    async def health(container=Depends(get_container)) -> Dict[str, Any]:
        healthy = await container.is_healthy()
        return {"status": "healthy" if healthy else "degraded", "version": __version__}

    logger.info(f"Created {settings.app_name} with {len(ROUTERS)} routers under {settings.api_prefix}")
    return app


def run() -> None:
    """Run the application."""
    settings = get_settings()
    app = create_app(settings)
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
        access_log=True,
    )


if __name__ == "__main__":
    run()
