"""
app.py — FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the policy repository and simulation service, registers the router,
and loads the room-policy table before the first request.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.controllers.access_controller import router as access_router
from backend.repository.policy_repository import PolicyRepository
from backend.services.simulation_service import SimulationService
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Dependencies are attached to app.state so controllers resolve them per
    request and tests can swap them.
    """
    settings = settings or get_settings()

    repository = PolicyRepository(settings)
    simulation_service = SimulationService(
        repository=repository,
        settings=settings,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.include_router(access_router)

    app.state.repository = repository
    app.state.simulation_service = simulation_service

    return app


def _startup(app: FastAPI) -> None:
    """Load the policy table eagerly so a broken policy file fails at boot."""
    repository: PolicyRepository = app.state.repository

    logger.info("Startup: loading room policies")
    policies = repository.list_room_policies()
    logger.info("Startup complete | rooms=%s", sorted(policies))


# Module-level app object for uvicorn
app = create_app()
