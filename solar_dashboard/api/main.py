"""
FastAPI application factory for the solar dashboard API.

``create_app`` wires the routers, CORS, and the error handler that turns
every DashboardError into a ``{"error": message}`` response with the status
code of its kind. Settings are passed in explicitly (or loaded from the
environment once, when the factory is called) and kept on app.state.

Run with ``solar-dashboard`` or ``uvicorn --factory
solar_dashboard.api.main:create_app``.

CHANGELOG:
- 2026-10-19: Application factory with explicit settings and error mapping
"""

import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from solar_dashboard.api.alerts import router as alerts_router
from solar_dashboard.api.energy import router as energy_router
from solar_dashboard.api.generator import router as generator_router
from solar_dashboard.api.grid import router as grid_router
from solar_dashboard.api.health import router as health_router
from solar_dashboard.api.kpis import router as kpis_router
from solar_dashboard.api.power import router as power_router
from solar_dashboard.api.system import router as system_router
from solar_dashboard.api.weather import router as weather_router
from solar_dashboard.core.config import DashboardSettings
from solar_dashboard.core.errors import DashboardError
from solar_dashboard.core.logging import configure_logging
from solar_dashboard.db.session import create_engine, create_session_factory

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: database engine setup and teardown.

    Startup:
        - In database mode, builds the engine and session factory.

    Shutdown:
        - Disposes the engine.
    """
    settings: DashboardSettings = app.state.settings
    engine = None
    if settings.data_mode == "database":
        engine = create_engine(settings.database_url)
        app.state.session_factory = create_session_factory(engine)

    logger.info("Solar dashboard API ready (data_mode=%s)", settings.data_mode)
    yield
    logger.info("Solar dashboard API shutting down")

    if engine is not None:
        await engine.dispose()


async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    """Render a DashboardError as ``{"error": message}``."""
    if exc.status_code >= 500:
        logger.warning(
            "%s %s failed with %d: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(
    settings: DashboardSettings | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FastAPI:
    """Build the dashboard application.

    Args:
        settings: Configuration; loaded from the environment when omitted.
        clock: Returns the current UTC time. Defaults to the system clock.

    Returns:
        FastAPI: Configured application.

    Raises:
        pydantic.ValidationError: If settings are loaded and invalid.
    """
    settings = settings or DashboardSettings()

    app = FastAPI(
        title="Solar Dashboard API",
        description="Aggregated telemetry for the solar installation dashboard.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.clock = clock or _utc_now

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DashboardError, dashboard_error_handler)

    app.include_router(health_router)
    app.include_router(kpis_router)
    app.include_router(energy_router)
    app.include_router(grid_router)
    app.include_router(generator_router)
    app.include_router(system_router)
    app.include_router(alerts_router)
    app.include_router(power_router)
    app.include_router(weather_router)

    return app


def run() -> None:
    """Console entry point: load settings, configure logging, serve."""
    import uvicorn

    settings = DashboardSettings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000, log_config=None)
