"""Decoding and validation of raw access-request batches.

Validation is fail-fast: the first element that does not validate aborts the
batch and is the only one reported.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Sequence

from backend.domain.models import AccessRequest
from backend.utils.logger import get_logger


logger = get_logger(__name__)

_LEVEL_PATTERN = re.compile(r"[0-9]+")


class RequestInputError(Exception):
    """Base class for batches rejected before simulation."""


class ParseError(RequestInputError):
    """Raised when the payload is not decodable JSON."""


class ShapeError(RequestInputError):
    """Raised when the decoded payload is not an array of requests."""


class ValidationError(RequestInputError):
    """Raised for the first request with missing or mistyped fields."""

    def __init__(self, index: int, fields: Sequence[str]) -> None:
        self.index = index
        self.fields = list(fields)
        super().__init__(
            f"Request at index {index} is missing required fields or has wrong types: "
            + ", ".join(self.fields)
        )


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _coerce_level(value: Any) -> int | float:
    if isinstance(value, str):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _invalid_fields(record: Any) -> list[str]:
    if not isinstance(record, dict):
        return ["id", "access_level", "request_time", "room"]

    invalid: list[str] = []
    employee_id = record.get("id")
    if not isinstance(employee_id, str) or not employee_id:
        invalid.append("id")
    level = record.get("access_level")
    if not (_is_number(level) or (isinstance(level, str) and _LEVEL_PATTERN.fullmatch(level))):
        invalid.append("access_level")
    if not isinstance(record.get("request_time"), str):
        invalid.append("request_time")
    if not isinstance(record.get("room"), str):
        invalid.append("room")
    return invalid


def parse_payload(text: str) -> Any:
    try:
        return json.loads(text)
    except RecursionError as exc:
        raise ParseError("JSON parse error: payload is nested too deeply") from exc
    except ValueError as exc:
        raise ParseError(f"JSON parse error: {exc}") from exc


def normalize_requests(raw: Any) -> list[AccessRequest]:
    """Validate every element of ``raw`` and coerce it into an ``AccessRequest``."""
    if not isinstance(raw, list):
        raise ShapeError("Top-level JSON must be an array of requests.")

    normalized: list[AccessRequest] = []
    for index, record in enumerate(raw):
        invalid = _invalid_fields(record)
        if invalid:
            logger.warning(
                "Request batch rejected | index=%s | fields=%s",
                index,
                invalid,
            )
            raise ValidationError(index, invalid)
        try:
            level = _coerce_level(record["access_level"])
        except ValueError as exc:
            logger.warning("Request batch rejected | index=%s | fields=%s", index, ["access_level"])
            raise ValidationError(index, ["access_level"]) from exc
        normalized.append(
            AccessRequest(
                employee_id=record["id"],
                access_level=level,
                room=record["room"],
                request_time=record["request_time"],
            )
        )
    return normalized


def load_requests(text: str) -> list[AccessRequest]:
    return normalize_requests(parse_payload(text))
