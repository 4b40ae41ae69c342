"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import Request

from backend.repository.policy_repository import PolicyRepository
from backend.services.simulation_service import SimulationService
from backend.utils.config import get_settings


def get_simulation_service(request: Request) -> SimulationService:
    service = getattr(request.app.state, "simulation_service", None)
    if service is None:
        repository = getattr(request.app.state, "repository", None)
        if repository is None:
            repository = PolicyRepository(get_settings())
            request.app.state.repository = repository
        service = SimulationService(repository=repository, settings=get_settings())
        request.app.state.simulation_service = service
    return service
