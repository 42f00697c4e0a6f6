"""Keyboard navigation over a coordinator's results.

Discrete keys map directly to SelectionCursor moves and coordinator actions.
The coordinator itself never interprets keys.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from PyQt6.QtCore import Qt

from pyqt_livequery.services.query_coordinator import QueryCoordinator

logger = logging.getLogger(__name__)


class NavigationKey(Enum):
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    ENTER = "enter"
    ESCAPE = "escape"


_QT_KEYS: Dict[Qt.Key, NavigationKey] = {
    Qt.Key.Key_Up: NavigationKey.UP,
    Qt.Key.Key_Down: NavigationKey.DOWN,
    Qt.Key.Key_Home: NavigationKey.HOME,
    Qt.Key.Key_End: NavigationKey.END,
    Qt.Key.Key_Return: NavigationKey.ENTER,
    Qt.Key.Key_Enter: NavigationKey.ENTER,
    Qt.Key.Key_Escape: NavigationKey.ESCAPE,
}


def navigation_key_for(qt_key: int) -> Optional[NavigationKey]:
    """Map a Qt key code (QKeyEvent.key()) to a NavigationKey, if any."""
    try:
        return _QT_KEYS.get(Qt.Key(qt_key))
    except ValueError:
        return None


class KeyboardNavigator:
    """
    Applies NavigationKeys to a coordinator and its cursor.

    Home/End only navigate while results are showing, so the line edit keeps
    its own cursor-to-start/end behavior otherwise.

    Usage:
        navigator = KeyboardNavigator(coordinator, on_accept=self.item_accepted.emit)
        if navigator.handle(NavigationKey.DOWN):
            event.accept()
    """

    def __init__(self, coordinator: QueryCoordinator,
                 on_accept: Optional[Callable[[Any], None]] = None):
        self._coordinator = coordinator
        self._on_accept = on_accept

    def handle(self, key: NavigationKey) -> bool:
        """Apply key. Returns True if the key was consumed."""
        cursor = self._coordinator.cursor

        if key is NavigationKey.ESCAPE:
            self._coordinator.clear()
            return True
        if key is NavigationKey.ENTER:
            # Nothing highlighted: search now instead of waiting for the debounce
            return self.accept() is not None or self._coordinator.flush()

        if cursor.count == 0:
            return False

        if key is NavigationKey.DOWN:
            cursor.move_next()
        elif key is NavigationKey.UP:
            cursor.move_previous()
        elif key is NavigationKey.HOME:
            cursor.jump_first()
        elif key is NavigationKey.END:
            cursor.jump_last()
        return True

    def accept(self) -> Optional[Any]:
        """Return the highlighted item and clear the coordinator."""
        item = self._coordinator.selected_item
        if item is None:
            return None
        logger.debug(f"[{self._coordinator.name}] accepted {item!r}")
        self._coordinator.clear()
        if self._on_accept is not None:
            self._on_accept(item)
        return item
