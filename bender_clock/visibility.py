"""Sources that report when the clock surface is hidden or shown again."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication, QWidget

LOGGER = logging.getLogger(__name__)

VisibilityListener = Callable[[bool], None]

_HIDDEN_APPLICATION_STATES = {
    Qt.ApplicationState.ApplicationHidden,
    Qt.ApplicationState.ApplicationSuspended,
}


class VisibilityUnsupportedError(RuntimeError):
    """The host offers no way to learn that the clock became visible."""


class VisibilitySource:
    """Delivers ``True`` when the surface becomes visible and ``False`` when hidden."""

    def __init__(self, hidden: bool = False) -> None:
        self._hidden = hidden
        self._listeners: list[VisibilityListener] = []

    @property
    def is_hidden(self) -> bool:
        return self._hidden

    def subscribe(self, listener: VisibilityListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: VisibilityListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, visible: bool) -> None:
        if visible != self._hidden:
            return
        self._hidden = not visible
        LOGGER.debug("Clock surface %s", "visible" if visible else "hidden")
        for listener in list(self._listeners):
            listener(visible)


class ManualVisibilitySource(VisibilitySource):
    """Visibility driven by the caller, for headless hosts."""

    def set_visible(self, visible: bool) -> None:
        self._emit(visible)


class _WidgetVisibilityFilter(QObject):
    def __init__(self, callback: Callable[[], None], parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._callback = callback

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if event.type() in (QEvent.Type.Show, QEvent.Type.Hide, QEvent.Type.WindowStateChange):
            self._callback()
        return False


class QtVisibilitySource(VisibilitySource):
    """Tracks a widget's window through show/hide/minimize and application state."""

    def __init__(self, widget: QWidget) -> None:
        self._widget = widget
        super().__init__(hidden=self._compute_hidden())
        self._filter = _WidgetVisibilityFilter(self.refresh, widget)
        widget.installEventFilter(self._filter)
        window = widget.window()
        if window is not widget:
            window.installEventFilter(self._filter)
        QGuiApplication.instance().applicationStateChanged.connect(self._on_application_state)
        self._attached = True
        widget.destroyed.connect(self._detach)

    @property
    def is_attached(self) -> bool:
        return self._attached

    def _detach(self) -> None:
        if not self._attached:
            return
        QGuiApplication.instance().applicationStateChanged.disconnect(self._on_application_state)
        self._attached = False
        LOGGER.debug("Visibility widget destroyed, stopped watching application state")

    def refresh(self) -> None:
        self._emit(not self._compute_hidden())

    def _on_application_state(self, state: Qt.ApplicationState) -> None:
        LOGGER.debug("Application state changed to %s", state)
        self.refresh()

    def _compute_hidden(self) -> bool:
        if QGuiApplication.applicationState() in _HIDDEN_APPLICATION_STATES:
            return True
        return not self._widget.isVisible() or self._widget.window().isMinimized()


def select_visibility_source(
    widget: Optional[QWidget] = None,
    allow_manual: bool = False,
) -> VisibilitySource:
    """Pick the visibility adapter for this host once, at startup.

    Raises :class:`VisibilityUnsupportedError` when no adapter applies and
    ``allow_manual`` is false.
    """
    if widget is not None and QApplication.instance() is not None:
        LOGGER.debug("Using Qt visibility source")
        return QtVisibilitySource(widget)
    if allow_manual:
        LOGGER.debug("Using manual visibility source")
        return ManualVisibilitySource()
    raise VisibilityUnsupportedError(
        "The clock requires a host that reports visibility changes, such as a running QApplication."
    )
