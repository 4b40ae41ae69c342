"""Domain models for access-request simulation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DecisionOutcome(str, Enum):
    GRANTED = "GRANTED"
    DENIED = "DENIED"


@dataclass(frozen=True)
class AccessRequest:
    employee_id: str
    access_level: int | float
    room: str
    request_time: str

    def to_api_dict(self) -> dict[str, str | int | float]:
        return {
            "id": self.employee_id,
            "access_level": self.access_level,
            "request_time": self.request_time,
            "room": self.room,
        }


@dataclass(frozen=True)
class ScheduledRequest:
    """A request with the fields derived while scheduling a batch."""

    request: AccessRequest
    index: int
    minute: int


@dataclass(frozen=True)
class RoomPolicy:
    room: str
    min_level: int
    open_time: str
    close_time: str
    cooldown_minutes: int

    def to_api_dict(self) -> dict[str, str | int]:
        return {
            "room": self.room,
            "min_level": self.min_level,
            "open_time": self.open_time,
            "close_time": self.close_time,
            "cooldown_minutes": self.cooldown_minutes,
        }


@dataclass(frozen=True)
class Decision:
    scheduled: ScheduledRequest
    outcome: DecisionOutcome
    reason: str

    @property
    def request(self) -> AccessRequest:
        return self.scheduled.request

    @property
    def granted(self) -> bool:
        return self.outcome is DecisionOutcome.GRANTED

    def to_api_dict(self) -> dict[str, object]:
        return {
            "index": self.scheduled.index,
            "request": self.request.to_api_dict(),
            "decision": self.outcome.value,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class DecisionSummary:
    total: int
    granted: int
    denied: int

    def to_api_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "granted": self.granted,
            "denied": self.denied,
        }
