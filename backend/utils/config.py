"""Application settings resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    room_policy_path: Optional[Path]


def _optional_path(value: str | None) -> Optional[Path]:
    if not value:
        return None
    return Path(value).expanduser()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process.

    ROOM_POLICY_PATH swaps the built-in room table for a JSON file without
    touching code; leaving it unset keeps the defaults.
    """
    return Settings(
        app_name=os.getenv("ACCESS_SIM_APP_NAME", "Access Simulator"),
        app_version=os.getenv("ACCESS_SIM_APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        room_policy_path=_optional_path(os.getenv("ROOM_POLICY_PATH")),
    )
