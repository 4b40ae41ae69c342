"""Tests for room-policy validation logic.

Covers every branch in validate_room_policy().
"""

from __future__ import annotations

import pytest

from backend.domain.constraints import validate_room_policy
from backend.domain.models import RoomPolicy


def valid_policy(**overrides) -> RoomPolicy:
    """Return a valid baseline RoomPolicy, optionally overriding fields."""
    defaults = {
        "room": "ServerRoom",
        "min_level": 2,
        "open_time": "09:00",
        "close_time": "11:00",
        "cooldown_minutes": 15,
    }
    defaults.update(overrides)
    return RoomPolicy(**defaults)


# --- Baseline pass ---

def test_valid_policy_passes() -> None:
    """A fully valid policy must not raise."""
    validate_room_policy(valid_policy())


# --- room ---

def test_blank_room_name_raises() -> None:
    with pytest.raises(ValueError):
        validate_room_policy(valid_policy(room="  "))


# --- min_level ---

def test_negative_min_level_raises() -> None:
    with pytest.raises(ValueError):
        validate_room_policy(valid_policy(min_level=-1))


# --- cooldown_minutes ---

def test_negative_cooldown_raises() -> None:
    with pytest.raises(ValueError):
        validate_room_policy(valid_policy(cooldown_minutes=-5))


# --- opening window ---

def test_malformed_open_time_raises() -> None:
    with pytest.raises(ValueError, match="open_time"):
        validate_room_policy(valid_policy(open_time="nine"))


def test_malformed_close_time_raises() -> None:
    with pytest.raises(ValueError, match="close_time"):
        validate_room_policy(valid_policy(close_time="11"))


# --- Boundary values ---

def test_zero_min_level_and_cooldown_pass() -> None:
    """Level zero and no cooldown are both valid."""
    validate_room_policy(valid_policy(min_level=0, cooldown_minutes=0))


def test_inverted_window_is_accepted() -> None:
    """An inverted window is legal config; it simply admits no one."""
    validate_room_policy(valid_policy(open_time="18:00", close_time="08:00"))
