"""Domain-level validation rules for room policies."""

from __future__ import annotations

from backend.domain.models import RoomPolicy
from backend.domain.time_utils import TimeFormatError, parse_clock


def validate_room_policy(policy: RoomPolicy) -> None:
    if not policy.room.strip():
        raise ValueError("room name must not be blank")
    if policy.min_level < 0:
        raise ValueError(f"min_level for room '{policy.room}' must be >= 0")
    if policy.cooldown_minutes < 0:
        raise ValueError(f"cooldown_minutes for room '{policy.room}' must be >= 0")
    for label, value in (("open_time", policy.open_time), ("close_time", policy.close_time)):
        try:
            parse_clock(value)
        except TimeFormatError as exc:
            raise ValueError(f"{label} for room '{policy.room}' is not a HH:MM value") from exc
