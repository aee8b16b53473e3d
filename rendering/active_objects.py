"""
Tracks the single visualization widget currently in focus.
"""

import logging
import weakref
from typing import Any, Optional, Protocol

from PyQt5.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)


class ActiveSurfaceProvider(Protocol):
    """What the volume controller needs from an active-object tracker."""

    active_widget_changed: Any  # pyqtSignal(object)

    def active_widget(self) -> Optional[object]:
        ...


class ActiveObjects(QObject):
    """
    Holds a weak reference to the active widget and announces changes.

    The tracker never keeps a widget alive; a destroyed widget reads back
    as ``None``.
    """

    active_widget_changed = pyqtSignal(object)

    def __init__(self):
        super().__init__()
        self._widget_ref: Optional[weakref.ReferenceType] = None

    def active_widget(self) -> Optional[object]:
        if self._widget_ref is None:
            return None
        return self._widget_ref()

    def set_active_widget(self, widget: Optional[object]) -> None:
        if widget is self.active_widget():
            return
        self._widget_ref = weakref.ref(widget) if widget is not None else None
        logger.debug("Active widget -> %r", widget)
        self.active_widget_changed.emit(widget)


__all__ = ["ActiveSurfaceProvider", "ActiveObjects"]
