"""Batch access-decision simulation.

``simulate`` is pure: it holds no state between calls and performs no I/O.
The cooldown ledger lives only for the duration of one call, so running the
same batch twice yields the same decisions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence
from uuid import uuid4

from backend.domain.models import (
    AccessRequest,
    Decision,
    DecisionOutcome,
    DecisionSummary,
    RoomPolicy,
    ScheduledRequest,
)
from backend.domain.time_utils import format_clock, parse_clock
from backend.repository.policy_repository import PolicyRepository
from backend.services.normalizer_service import load_requests
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

AccessLedger = dict[tuple[str, str], int]


@dataclass(frozen=True)
class SimulationReport:
    decisions: list[Decision]
    summary: DecisionSummary

    def to_api_dict(self) -> dict[str, object]:
        return {
            "decisions": [decision.to_api_dict() for decision in self.decisions],
            "summary": self.summary.to_api_dict(),
        }


def schedule_requests(requests: Sequence[AccessRequest]) -> list[ScheduledRequest]:
    """Attach minute-of-day and batch index, then order by (minute, index).

    Any unparseable time aborts the whole batch before ordering.
    """
    scheduled = [
        ScheduledRequest(request=request, index=index, minute=parse_clock(request.request_time))
        for index, request in enumerate(requests)
    ]
    return sorted(scheduled, key=lambda item: (item.minute, item.index))


def evaluate_request(
    scheduled: ScheduledRequest,
    policies: Mapping[str, RoomPolicy],
    ledger: AccessLedger,
) -> Decision:
    request = scheduled.request
    minute = scheduled.minute

    policy = policies.get(request.room)
    if policy is None:
        return Decision(scheduled, DecisionOutcome.DENIED, f"Unknown room: {request.room}")

    if request.access_level < policy.min_level:
        return Decision(
            scheduled,
            DecisionOutcome.DENIED,
            f"Below required level (has {request.access_level}, needs {policy.min_level})",
        )

    open_minute = parse_clock(policy.open_time)
    close_minute = parse_clock(policy.close_time)
    if not open_minute <= minute < close_minute:
        return Decision(
            scheduled,
            DecisionOutcome.DENIED,
            f"Room closed at {request.request_time} "
            f"(open {policy.open_time}-{policy.close_time})",
        )

    key = (request.employee_id, request.room)
    last_granted = ledger.get(key)
    if last_granted is not None and minute - last_granted < policy.cooldown_minutes:
        return Decision(
            scheduled,
            DecisionOutcome.DENIED,
            f"Cooldown active (last access {format_clock(last_granted)}, "
            f"retry at {format_clock(last_granted + policy.cooldown_minutes)})",
        )

    ledger[key] = minute
    return Decision(scheduled, DecisionOutcome.GRANTED, f"Access granted to {request.room}")


def simulate(
    requests: Sequence[AccessRequest],
    policies: Mapping[str, RoomPolicy],
) -> list[Decision]:
    """Decide every request in chronological order.

    Rules are checked in a fixed order (room, level, opening window, cooldown)
    and only the first failing rule is reported. Decisions come back in
    processing order, not input order.
    """
    ledger: AccessLedger = {}
    return [
        evaluate_request(scheduled, policies, ledger)
        for scheduled in schedule_requests(requests)
    ]


def restore_input_order(decisions: Sequence[Decision]) -> list[Decision]:
    return sorted(decisions, key=lambda decision: decision.scheduled.index)


def summarize_decisions(decisions: Sequence[Decision]) -> DecisionSummary:
    granted = sum(1 for decision in decisions if decision.granted)
    return DecisionSummary(
        total=len(decisions),
        granted=granted,
        denied=len(decisions) - granted,
    )


class SimulationService:
    """Runs access simulations against the configured room-policy table."""

    def __init__(
        self,
        repository: Optional[PolicyRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or PolicyRepository(self._settings)

    def list_room_policies(self) -> Mapping[str, RoomPolicy]:
        return self._repository.list_room_policies()

    def sample_requests(self) -> list[dict[str, object]]:
        return self._repository.sample_requests()

    def run(
        self,
        requests: Sequence[AccessRequest],
        policies: Optional[Mapping[str, RoomPolicy]] = None,
    ) -> list[Decision]:
        run_id = str(uuid4())
        active_policies = policies if policies is not None else self.list_room_policies()
        logger.info(
            "Simulation run started | run_id=%s | requests=%s | rooms=%s",
            run_id,
            len(requests),
            sorted(active_policies),
        )

        decisions = simulate(requests, active_policies)

        summary = summarize_decisions(decisions)
        logger.info(
            "Simulation run completed | run_id=%s | granted=%s | denied=%s",
            run_id,
            summary.granted,
            summary.denied,
        )
        return decisions

    def run_payload(self, text: str, *, input_order: bool = False) -> SimulationReport:
        """Decode, validate and simulate a JSON batch in one step."""
        decisions = self.run(load_requests(text))
        if input_order:
            decisions = restore_input_order(decisions)
        return SimulationReport(decisions=decisions, summary=summarize_decisions(decisions))
