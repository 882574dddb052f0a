"""Clock engine that turns time specifications into hand angles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from .time_parser import NormalizedTime, ParseError, TimeParser

if TYPE_CHECKING:
    from .visibility import VisibilitySource

LOGGER = logging.getLogger(__name__)

HOUR_HAND_PERIOD = 43200  # 12 hours
MINUTE_HAND_PERIOD = 3600
SECOND_HAND_PERIOD = 60

TimeListener = Callable[[Optional[str]], None]


@dataclass(frozen=True)
class HandAngles:
    """Whole-degree rotation of each hand, 0 pointing at twelve."""

    hour_deg: int
    minute_deg: int
    second_deg: int


class HandRenderer(Protocol):
    """Surface that orients the three hands."""

    def set_hour_angle(self, degrees: int) -> None: ...

    def set_minute_angle(self, degrees: int) -> None: ...

    def set_second_angle(self, degrees: int) -> None: ...


def angle_for(elapsed_seconds: int, period_seconds: int) -> int:
    """Angle reached after ``elapsed_seconds`` of a full turn, rounded half up."""
    # Exact rational rounding: round(elapsed / period * 360) without float error.
    degrees = (2 * elapsed_seconds * 360 + period_seconds) // (2 * period_seconds)
    return degrees % 360


def compute_angles(normalized: NormalizedTime) -> HandAngles:
    """Derive hand angles from a normalized time."""
    return HandAngles(
        hour_deg=angle_for(normalized.total_seconds, HOUR_HAND_PERIOD),
        minute_deg=angle_for(normalized.minutes_in_seconds + normalized.seconds, MINUTE_HAND_PERIOD),
        second_deg=angle_for(normalized.seconds, SECOND_HAND_PERIOD),
    )


class ClockEngine:
    """Holds the displayed time spec and keeps the renderer in step with it."""

    def __init__(
        self,
        renderer: HandRenderer,
        parser: TimeParser | None = None,
        time_source: Callable[[], datetime] | None = None,
    ) -> None:
        self._renderer = renderer
        self._parser = parser or TimeParser(time_source)
        self._time: Optional[str] = ""
        self._angles: Optional[HandAngles] = None
        self._listeners: list[TimeListener] = []

    @property
    def time(self) -> Optional[str]:
        return self._time

    @time.setter
    def time(self, spec: Optional[str]) -> None:
        self.set_time(spec)

    @property
    def angles(self) -> Optional[HandAngles]:
        return self._angles

    def add_time_listener(self, listener: TimeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_time_listener(self, listener: TimeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_time(self, spec: Optional[str]) -> HandAngles:
        """Display ``spec`` (empty for the current time) and announce the change.

        Raises :class:`ParseError` and keeps the previous state when the spec
        cannot be displayed.
        """
        try:
            angles = self._apply(spec)
        except ParseError as error:
            LOGGER.debug("Rejected time %r: %s", spec, error)
            raise
        self._time = spec
        for listener in list(self._listeners):
            listener(spec)
        return angles

    def resync(self) -> HandAngles:
        """Recompute the hands from the last spec and the current clock."""
        LOGGER.debug("Resynchronizing clock hands for time %r", self._time)
        return self._apply(self._time)

    def on_visibility_changed(self, visible: bool) -> None:
        if visible:
            self.resync()

    def attach_visibility(self, source: "VisibilitySource") -> None:
        source.subscribe(self.on_visibility_changed)

    def detach_visibility(self, source: "VisibilitySource") -> None:
        source.unsubscribe(self.on_visibility_changed)

    def _apply(self, spec: Optional[str]) -> HandAngles:
        angles = compute_angles(self._parser.parse(spec))
        self._renderer.set_hour_angle(angles.hour_deg)
        self._renderer.set_minute_angle(angles.minute_deg)
        self._renderer.set_second_angle(angles.second_deg)
        self._angles = angles
        LOGGER.debug("Hands set to %s", angles)
        return angles
