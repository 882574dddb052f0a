"""PySide6 front end for the analog clock."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QElapsedTimer, QPointF, QRectF, Qt, QTimer
from PySide6.QtGui import QColor, QHideEvent, QPaintEvent, QPainter, QPen, QShowEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from .engine import HOUR_HAND_PERIOD, MINUTE_HAND_PERIOD, SECOND_HAND_PERIOD, ClockEngine
from .time_parser import ParseError
from .visibility import VisibilitySource, select_visibility_source

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockStyle:
    """Colours and frame shape of the clock face."""

    background_color: str = "#000000"
    border_color: str = "#FFFFFF"
    border_width_ratio: float = 0.025  # 4px on a 160px face
    border_radius_ratio: float = 0.5  # 0.5 round, 0.0 square
    hour_color: str = "#EEEEEE"
    minute_color: str = "#EEEEEE"
    second_color: str = "#EEEEEE"


DEFAULT_CLOCK_STYLE = ClockStyle()
SQUARE_CLOCK_STYLE = ClockStyle(border_radius_ratio=0.0)

ANIMATION_INTERVAL_MS = 50

# Hand geometry in tenths of the face size: (width, length, tail).
HOUR_HAND_SHAPE = (0.03, 0.22, 0.0)
MINUTE_HAND_SHAPE = (0.02, 0.34, 0.0)
SECOND_HAND_SHAPE = (0.006, 0.45, 0.07)
CENTER_DOT_RATIO = 0.06


def animated_angle(base: float, elapsed_seconds: float, period: int, steps: Optional[int] = None) -> float:
    """Angle of a hand ``elapsed_seconds`` into its looping rotation from ``base``.

    With ``steps`` the hand jumps in equal increments instead of sweeping.
    """
    fraction = (elapsed_seconds % period) / period
    if steps:
        fraction = math.floor(fraction * steps) / steps
    return (base + fraction * 360.0) % 360.0


class _AnimatedHand:
    """Angle set by the engine plus the animation progress since then."""

    def __init__(self, period: int, steps: Optional[int] = None) -> None:
        self.period = period
        self.steps = steps
        self.base_angle = 0
        self.elapsed_ms = 0

    def reset(self, degrees: int) -> None:
        self.base_angle = degrees
        self.elapsed_ms = 0

    @property
    def angle(self) -> float:
        return animated_angle(self.base_angle, self.elapsed_ms / 1000.0, self.period, self.steps)


class AnalogClockWidget(QWidget):
    """Widget that draws the clock face and animates its hands."""

    def __init__(
        self,
        style: Optional[ClockStyle] = None,
        animation_interval_ms: int = ANIMATION_INTERVAL_MS,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._style = style or DEFAULT_CLOCK_STYLE
        self._hour = _AnimatedHand(HOUR_HAND_PERIOD)
        self._minute = _AnimatedHand(MINUTE_HAND_PERIOD)
        self._second = _AnimatedHand(SECOND_HAND_PERIOD, steps=SECOND_HAND_PERIOD)
        self._elapsed = QElapsedTimer()
        self._timer = QTimer(self)
        self._timer.setInterval(animation_interval_ms)
        self._timer.timeout.connect(self._on_tick)
        self.setMinimumSize(160, 160)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

    @property
    def hour_angle(self) -> float:
        return self._hour.angle

    @property
    def minute_angle(self) -> float:
        return self._minute.angle

    @property
    def second_angle(self) -> float:
        return self._second.angle

    def set_hour_angle(self, degrees: int) -> None:
        self._hour.reset(degrees)
        self.update()

    def set_minute_angle(self, degrees: int) -> None:
        self._minute.reset(degrees)
        self.update()

    def set_second_angle(self, degrees: int) -> None:
        self._second.reset(degrees)
        self.update()

    @property
    def clock_style(self) -> ClockStyle:
        return self._style

    def set_style(self, style: ClockStyle) -> None:
        if self._style == style:
            return
        self._style = style
        self.update()

    def advance(self, milliseconds: int) -> None:
        """Move the animation forward as if ``milliseconds`` had passed on screen."""
        for hand in (self._hour, self._minute, self._second):
            hand.elapsed_ms += milliseconds
        self.update()

    def is_animating(self) -> bool:
        return self._timer.isActive()

    def showEvent(self, event: QShowEvent) -> None:
        super().showEvent(event)
        self._elapsed.start()
        self._timer.start()

    def hideEvent(self, event: QHideEvent) -> None:
        super().hideEvent(event)
        # Animation is suspended while hidden, so the hands fall behind.
        self._timer.stop()
        self._elapsed.invalidate()

    def _on_tick(self) -> None:
        if self._elapsed.isValid():
            self.advance(self._elapsed.restart())
        else:
            self._elapsed.start()

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)

        size = float(min(self.width(), self.height()))
        painter.translate(self.width() / 2.0, self.height() / 2.0)

        self._draw_frame(painter, size)
        self._draw_hand(painter, size, self._hour.angle, self._style.hour_color, HOUR_HAND_SHAPE)
        self._draw_hand(painter, size, self._minute.angle, self._style.minute_color, MINUTE_HAND_SHAPE)
        self._draw_hand(painter, size, self._second.angle, self._style.second_color, SECOND_HAND_SHAPE)
        self._draw_center(painter, size)

    def _draw_frame(self, painter: QPainter, size: float) -> None:
        painter.save()
        border = size * self._style.border_width_ratio
        pen = QPen(QColor(self._style.border_color))
        pen.setWidthF(border)
        painter.setPen(pen)
        painter.setBrush(QColor(self._style.background_color))
        inner = size - border
        rect = QRectF(-inner / 2.0, -inner / 2.0, inner, inner)
        radius = inner * self._style.border_radius_ratio
        painter.drawRoundedRect(rect, radius, radius)
        painter.restore()

    def _draw_hand(
        self,
        painter: QPainter,
        size: float,
        angle: float,
        color: str,
        shape: tuple[float, float, float],
    ) -> None:
        width, length, tail = (value * size for value in shape)
        painter.save()
        painter.rotate(angle)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QColor(color))
        painter.drawRect(QRectF(-width / 2.0, -length, width, length + tail))
        painter.restore()

    def _draw_center(self, painter: QPainter, size: float) -> None:
        painter.save()
        radius = size * CENTER_DOT_RATIO / 2.0
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QColor(self._style.hour_color))
        painter.drawEllipse(QPointF(0.0, 0.0), radius, radius)
        painter.restore()


class ClockWindow(QMainWindow):
    """Main window with the clock face and a time entry field."""

    def __init__(
        self,
        time: Optional[str] = None,
        style: Optional[ClockStyle] = None,
        visibility: Optional[VisibilitySource] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Bender Clock")
        self._clock_widget = AnalogClockWidget(style=style)
        self._engine = ClockEngine(self._clock_widget)
        self._engine.add_time_listener(self._on_time_changed)

        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)
        layout.addWidget(self._clock_widget, stretch=1)

        self._time_input = QLineEdit()
        self._time_input.setPlaceholderText("H[:M[:S]], empty for the current time")
        self._time_input.returnPressed.connect(self._handle_apply)
        self._apply_button = QPushButton("Set")
        self._apply_button.clicked.connect(self._handle_apply)

        input_layout = QHBoxLayout()
        input_layout.setSpacing(8)
        input_layout.addWidget(self._time_input, stretch=1)
        input_layout.addWidget(self._apply_button)
        layout.addLayout(input_layout)

        self._status = QLabel("")
        self._status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._status)

        self.setCentralWidget(central)
        self.resize(360, 460)

        # Chosen once; a host without visibility reporting is fatal here.
        self._visibility = visibility or select_visibility_source(self._clock_widget)
        self._engine.attach_visibility(self._visibility)

        self._time_input.setText(time or "")
        self._engine.set_time(time or "")

    @property
    def engine(self) -> ClockEngine:
        return self._engine

    @property
    def clock_widget(self) -> AnalogClockWidget:
        return self._clock_widget

    @property
    def status_text(self) -> str:
        return self._status.text()

    def apply_time(self, spec: str) -> bool:
        """Show ``spec`` on the clock, or report why it cannot be shown."""
        try:
            self._engine.set_time(spec)
        except ParseError as error:
            LOGGER.info("Ignoring invalid time %r: %s", spec, error)
            self._status.setText(str(error))
            return False
        return True

    def _handle_apply(self) -> None:
        self.apply_time(self._time_input.text().strip())

    def _on_time_changed(self, spec: Optional[str]) -> None:
        self._status.setText(spec or "Current time")
