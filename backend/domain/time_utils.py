"""Conversions between ``HH:MM`` clock strings and minutes since midnight."""

from __future__ import annotations

import re


MINUTES_PER_HOUR = 60

_COMPONENT_PATTERN = re.compile(r"-?[0-9]+")


class TimeFormatError(Exception):
    """Raised when a clock string cannot be split into hour and minute integers."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid time format: {value!r} (expected HH:MM)")


def parse_clock(value: str) -> int:
    """Return minutes since midnight for ``value``.

    Components are not range-checked, so ``"25:99"`` yields 1599 and is left
    for the opening-window rule to reject.
    """
    if not isinstance(value, str):
        raise TimeFormatError(value)
    parts = value.split(":")
    if len(parts) != 2:
        raise TimeFormatError(value)
    if not all(_COMPONENT_PATTERN.fullmatch(part.strip()) for part in parts):
        raise TimeFormatError(value)
    try:
        hours, minutes = (int(part) for part in parts)
    except ValueError as exc:
        raise TimeFormatError(value) from exc
    return hours * MINUTES_PER_HOUR + minutes


def format_clock(minutes: int) -> str:
    hours, remainder = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hours:02d}:{remainder:02d}"
