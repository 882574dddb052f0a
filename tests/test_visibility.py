from __future__ import annotations

from datetime import datetime, timedelta

import pytest

pytest.importorskip("PySide6")

from PySide6.QtWidgets import QWidget
from shiboken6 import Shiboken

from bender_clock.engine import ClockEngine, compute_angles
from bender_clock.time_parser import parse_time
from bender_clock.visibility import (
    ManualVisibilitySource,
    QtVisibilitySource,
    VisibilityUnsupportedError,
    select_visibility_source,
)


class _Renderer:
    def set_hour_angle(self, degrees: int) -> None:
        self.hour = degrees

    def set_minute_angle(self, degrees: int) -> None:
        self.minute = degrees

    def set_second_angle(self, degrees: int) -> None:
        self.second = degrees


def test_manual_source_emits_only_on_change() -> None:
    source = ManualVisibilitySource()
    events: list[bool] = []
    source.subscribe(events.append)

    source.set_visible(True)
    source.set_visible(False)
    source.set_visible(False)
    source.set_visible(True)

    assert events == [False, True]
    assert not source.is_hidden


def test_unsubscribed_listener_stops_receiving() -> None:
    source = ManualVisibilitySource()
    events: list[bool] = []
    source.subscribe(events.append)
    source.unsubscribe(events.append)

    source.set_visible(False)

    assert events == []


def test_engine_resyncs_when_source_becomes_visible() -> None:
    instants = [datetime(2024, 1, 1, 8, 0, 0)]
    source = ManualVisibilitySource()
    engine = ClockEngine(_Renderer(), time_source=lambda: instants[-1])
    engine.attach_visibility(source)
    engine.set_time("")

    source.set_visible(False)
    instants.append(instants[-1] + timedelta(minutes=42, seconds=13))
    source.set_visible(True)

    assert engine.angles == compute_angles(parse_time("", lambda: instants[-1]))


def test_detached_engine_ignores_source() -> None:
    source = ManualVisibilitySource(hidden=True)
    engine = ClockEngine(_Renderer())
    engine.attach_visibility(source)
    engine.detach_visibility(source)

    source.set_visible(True)

    assert engine.angles is None


def test_selection_without_host_is_fatal() -> None:
    with pytest.raises(VisibilityUnsupportedError):
        select_visibility_source()


def test_selection_can_fall_back_to_manual() -> None:
    assert isinstance(select_visibility_source(allow_manual=True), ManualVisibilitySource)


def test_selection_prefers_qt_with_a_widget(qapp) -> None:
    widget = QWidget()

    assert isinstance(select_visibility_source(widget), QtVisibilitySource)


def test_qt_source_follows_show_and_hide(qapp) -> None:
    widget = QWidget()
    source = QtVisibilitySource(widget)
    events: list[bool] = []
    source.subscribe(events.append)
    assert source.is_hidden

    widget.show()
    widget.hide()
    widget.show()

    assert events == [True, False, True]
    widget.close()


def test_qt_source_detaches_when_widget_is_destroyed(qapp) -> None:
    widget = QWidget()
    source = QtVisibilitySource(widget)
    assert source.is_attached

    Shiboken.delete(widget)

    assert not source.is_attached
