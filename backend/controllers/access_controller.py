"""HTTP controller layer for access simulation."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from backend.controllers.dependencies import get_simulation_service
from backend.domain.time_utils import TimeFormatError
from backend.repository.policy_repository import PolicyConfigurationError
from backend.services.normalizer_service import RequestInputError
from backend.services.simulation_service import SimulationService
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["access"])


class SimulateRequest(BaseModel):
    """Raw JSON text exactly as pasted by the operator."""

    payload: str = Field(min_length=1)
    input_order: bool = False


class RequestRow(BaseModel):
    id: str = Field(min_length=1)
    access_level: int | float
    request_time: str
    room: str


class DecisionRow(BaseModel):
    index: int = Field(ge=0)
    request: RequestRow
    decision: str = Field(pattern=r"^(GRANTED|DENIED)$")
    reason: str = Field(min_length=1)


class SummaryRow(BaseModel):
    total: int = Field(ge=0)
    granted: int = Field(ge=0)
    denied: int = Field(ge=0)


class SimulateResponse(BaseModel):
    decisions: list[DecisionRow]
    summary: SummaryRow


class RoomPolicyRow(BaseModel):
    room: str
    min_level: int = Field(ge=0)
    open_time: str
    close_time: str
    cooldown_minutes: int = Field(ge=0)


class SampleResponse(BaseModel):
    payload: str


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/simulate", response_model=SimulateResponse)
def simulate_batch(
    payload: SimulateRequest,
    service: SimulationService = Depends(get_simulation_service),
) -> SimulateResponse:
    try:
        report = service.run_payload(payload.payload, input_order=payload.input_order)
    except (RequestInputError, TimeFormatError) as exc:
        logger.info("Simulation rejected | error=%s | detail=%s", type(exc).__name__, exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PolicyConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    return SimulateResponse(**report.to_api_dict())


@router.get("/policies", response_model=list[RoomPolicyRow])
def list_policies(
    service: SimulationService = Depends(get_simulation_service),
) -> list[RoomPolicyRow]:
    try:
        policies = service.list_room_policies()
    except PolicyConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    return [RoomPolicyRow(**policies[room].to_api_dict()) for room in policies]


@router.get("/sample", response_model=SampleResponse)
def sample_batch(
    service: SimulationService = Depends(get_simulation_service),
) -> SampleResponse:
    return SampleResponse(payload=json.dumps(service.sample_requests(), indent=2))
