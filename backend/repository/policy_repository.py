"""Repository layer serving the room-policy table and the sample batch."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from backend.domain.constraints import validate_room_policy
from backend.domain.models import RoomPolicy
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class PolicyConfigurationError(Exception):
    """Raised when a room-policy file cannot be turned into valid policies."""


DEFAULT_ROOM_POLICIES: dict[str, dict[str, Any]] = {
    "ServerRoom": {"minLevel": 2, "open": "09:00", "close": "11:00", "cooldown": 15},
    "Vault": {"minLevel": 3, "open": "09:00", "close": "10:00", "cooldown": 30},
    "R&D Lab": {"minLevel": 1, "open": "08:00", "close": "12:00", "cooldown": 10},
}

SAMPLE_REQUESTS: list[dict[str, Any]] = [
    {"id": "EMP001", "access_level": 2, "request_time": "09:15", "room": "ServerRoom"},
    {"id": "EMP002", "access_level": 1, "request_time": "09:30", "room": "Vault"},
    {"id": "EMP003", "access_level": 3, "request_time": "10:05", "room": "ServerRoom"},
    {"id": "EMP004", "access_level": 3, "request_time": "09:45", "room": "Vault"},
    {"id": "EMP005", "access_level": 2, "request_time": "08:50", "room": "R&D Lab"},
    {"id": "EMP006", "access_level": 1, "request_time": "10:10", "room": "R&D Lab"},
    {"id": "EMP007", "access_level": 2, "request_time": "10:18", "room": "ServerRoom"},
    {"id": "EMP008", "access_level": 3, "request_time": "09:55", "room": "Vault"},
    {"id": "EMP001", "access_level": 2, "request_time": "09:28", "room": "ServerRoom"},
    {"id": "EMP006", "access_level": 1, "request_time": "10:15", "room": "R&D Lab"},
]


def build_room_policies(raw_table: Mapping[str, Any]) -> Mapping[str, RoomPolicy]:
    """Convert a ``{room: {minLevel, open, close, cooldown}}`` table into policies."""
    policies: dict[str, RoomPolicy] = {}
    for room, entry in raw_table.items():
        if not isinstance(entry, Mapping):
            raise PolicyConfigurationError(f"policy for room '{room}' must be an object")
        try:
            policy = RoomPolicy(
                room=str(room),
                min_level=int(entry["minLevel"]),
                open_time=str(entry["open"]),
                close_time=str(entry["close"]),
                cooldown_minutes=int(entry["cooldown"]),
            )
            validate_room_policy(policy)
        except KeyError as exc:
            raise PolicyConfigurationError(
                f"policy for room '{room}' is missing field {exc.args[0]!r}"
            ) from exc
        except (TypeError, ValueError) as exc:
            raise PolicyConfigurationError(f"policy for room '{room}' is invalid: {exc}") from exc
        policies[policy.room] = policy
    return MappingProxyType(policies)


class PolicyRepository:
    """Read-only source of room policies so services never touch files directly."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._policies: Mapping[str, RoomPolicy] | None = None

    @property
    def policy_path(self) -> Path | None:
        return self._settings.room_policy_path

    def _read_policy_file(self, path: Path) -> Mapping[str, Any]:
        try:
            raw_table = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise PolicyConfigurationError(f"cannot read policy file {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise PolicyConfigurationError(f"policy file {path} is not valid JSON: {exc}") from exc
        if not isinstance(raw_table, dict):
            raise PolicyConfigurationError(f"policy file {path} must contain a JSON object")
        return raw_table

    def list_room_policies(self) -> Mapping[str, RoomPolicy]:
        if self._policies is not None:
            return self._policies

        path = self.policy_path
        if path is None:
            self._policies = build_room_policies(DEFAULT_ROOM_POLICIES)
            logger.info("Room policies loaded | source=defaults | rooms=%s", len(self._policies))
        else:
            self._policies = build_room_policies(self._read_policy_file(path))
            logger.info(
                "Room policies loaded | source=%s | rooms=%s",
                path,
                len(self._policies),
            )
        return self._policies

    def sample_requests(self) -> list[dict[str, Any]]:
        return copy.deepcopy(SAMPLE_REQUESTS)
