from __future__ import annotations

import pytest

pytest.importorskip("PySide6")

from bender_clock.engine import HandAngles
from bender_clock.gui import SQUARE_CLOCK_STYLE, AnalogClockWidget, ClockWindow, animated_angle
from bender_clock.visibility import ManualVisibilitySource


def test_sweeping_hand_moves_continuously() -> None:
    assert animated_angle(0, 1800, 3600) == pytest.approx(180.0)
    assert animated_angle(350, 360, 3600) == pytest.approx(26.0)


def test_stepped_hand_moves_in_whole_steps() -> None:
    assert animated_angle(90, 1.9, 60, steps=60) == pytest.approx(96.0)
    assert animated_angle(90, 60.5, 60, steps=60) == pytest.approx(90.0)


def test_widget_animation_restarts_from_new_angle(qapp) -> None:
    widget = AnalogClockWidget()
    widget.set_second_angle(270)
    widget.set_minute_angle(143)

    widget.advance(1500)
    assert widget.second_angle == pytest.approx(276.0)
    assert widget.minute_angle == pytest.approx(143.15)

    widget.set_second_angle(0)
    assert widget.second_angle == pytest.approx(0.0)


def test_widget_animates_only_while_shown(qapp) -> None:
    widget = AnalogClockWidget()

    widget.show()
    assert widget.is_animating()
    widget.hide()
    assert not widget.is_animating()


def test_window_displays_initial_time(qapp) -> None:
    window = ClockWindow(time="1:23:45", visibility=ManualVisibilitySource())

    assert window.engine.angles == HandAngles(42, 143, 270)
    assert window.clock_widget.hour_angle == pytest.approx(42.0)
    assert window.status_text == "1:23:45"


def test_window_reports_invalid_time(qapp) -> None:
    window = ClockWindow(time="6", visibility=ManualVisibilitySource())

    assert not window.apply_time("25")
    assert window.engine.time == "6"
    assert "hours" in window.status_text

    assert window.apply_time("")
    assert window.status_text == "Current time"


def test_window_resyncs_on_visibility(qapp) -> None:
    visibility = ManualVisibilitySource()
    window = ClockWindow(time="3", visibility=visibility)
    window.clock_widget.advance(600_000)

    visibility.set_visible(False)
    visibility.set_visible(True)

    assert window.clock_widget.hour_angle == pytest.approx(90.0)


def test_widget_paints_with_square_style(qapp) -> None:
    widget = AnalogClockWidget()
    widget.resize(160, 160)
    widget.set_hour_angle(42)

    widget.set_style(SQUARE_CLOCK_STYLE)
    pixmap = widget.grab()

    assert widget.clock_style is SQUARE_CLOCK_STYLE
    assert not pixmap.isNull()
