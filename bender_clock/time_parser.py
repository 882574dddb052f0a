"""Parsing and validation of clock time specifications."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

LOGGER = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

# Decimal number with optional sign and fraction, e.g. "7", "+07", "1.5", ".5".
_NUMERIC_PATTERN = re.compile(r"(?P<sign>[+-]?)(?:(?P<whole>\d+)(?:\.\d*)?|\.\d+)")


class ParseError(ValueError):
    """Base error for a time specification that cannot be displayed."""

    def __init__(self, message: str, field: Optional[str] = None, value: object = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class FormatError(ParseError):
    """Malformed specification: wrong field count or a non-numeric component."""


class RangeError(ParseError):
    """Numeric component outside the domain of its field."""


@dataclass(frozen=True)
class NormalizedTime:
    """Time of day on a 12-hour dial, each field expressed in seconds."""

    hours_in_seconds: int
    minutes_in_seconds: int
    seconds: int

    @property
    def total_seconds(self) -> int:
        return self.hours_in_seconds + self.minutes_in_seconds + self.seconds


def to_twelve_hour(hours: int) -> int:
    """Fold 13..23 onto the dial. 0 and 12 are kept as they are."""
    return hours - 12 if hours > 12 else hours


def _validated(raw: str, field: str, upper: int) -> int:
    text = raw.strip()
    match = _NUMERIC_PATTERN.fullmatch(text)
    if not match:
        raise FormatError(f"Attribute `time` unexpected format {field}.", field=field, value=raw)
    # Fraction is dropped, truncating toward zero.
    digits = (match.group("whole") or "0").lstrip("0") or "0"
    negative = match.group("sign") == "-" and digits != "0"
    if negative or len(digits) > len(str(upper)) or int(digits) > upper:
        raise RangeError(f"Attribute `time` {field} out of range 0..{upper}.", field=field, value=raw)
    return int(digits)


def validate_hours(raw: str) -> int:
    """Return the hour on a 12-hour dial for a 0..23 component."""
    return to_twelve_hour(_validated(raw, "hours", 23))


def validate_minutes(raw: str) -> int:
    return _validated(raw, "minutes", 59)


def validate_seconds(raw: str) -> int:
    return _validated(raw, "seconds", 59)


def from_datetime(instant: datetime) -> NormalizedTime:
    """Normalize a wall-clock reading."""
    return NormalizedTime(
        hours_in_seconds=to_twelve_hour(instant.hour) * SECONDS_PER_HOUR,
        minutes_in_seconds=instant.minute * SECONDS_PER_MINUTE,
        seconds=instant.second,
    )


def parse_time(
    spec: Optional[str],
    time_source: Callable[[], datetime] = datetime.now,
) -> NormalizedTime:
    """Turn ``H``, ``H:M`` or ``H:M:S`` into a :class:`NormalizedTime`.

    An empty or missing spec reads ``time_source`` once and never fails.
    When several fields are given they are validated seconds first, then
    minutes, then hours, so that is the order in which errors surface.
    """
    if spec is None or spec == "":
        return from_datetime(time_source())
    if not isinstance(spec, str):
        raise FormatError("Attribute `time` unexpected format", value=spec)

    parts = spec.split(":")
    if len(parts) > 3:
        raise FormatError("Attribute `time` unexpected format", value=spec)

    seconds = 0
    minutes_in_seconds = 0
    if len(parts) == 3:
        seconds = validate_seconds(parts[2])
    if len(parts) >= 2:
        minutes_in_seconds = validate_minutes(parts[1]) * SECONDS_PER_MINUTE
    hours_in_seconds = validate_hours(parts[0]) * SECONDS_PER_HOUR

    normalized = NormalizedTime(hours_in_seconds, minutes_in_seconds, seconds)
    LOGGER.debug("Parsed time %r as %s", spec, normalized)
    return normalized


class TimeParser:
    """Parser bound to a wall-clock source."""

    def __init__(self, time_source: Callable[[], datetime] | None = None) -> None:
        self._time_source = time_source or datetime.now

    def parse(self, spec: Optional[str]) -> NormalizedTime:
        return parse_time(spec, self._time_source)
