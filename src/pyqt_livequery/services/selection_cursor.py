"""Highlighted-row tracking for keyboard navigation over a result set."""

from typing import Any, Callable, List, Optional, Sequence, Tuple

NO_SELECTION = -1


class SelectionCursor:
    """
    Index of the highlighted result, with wrap-around navigation.

    ``reset`` is called by the coordinator every time it installs a result
    set (or drops one); it puts the index back to ``default_index``. Moves
    notify listeners, resets do not (the coordinator reports those with the
    state change).
    """

    def __init__(self, default_index: int = NO_SELECTION):
        if default_index not in (NO_SELECTION, 0):
            raise ValueError(f"default_index must be -1 or 0, got {default_index}")
        self.default_index = default_index
        self._items: Tuple[Any, ...] = ()
        self._index = NO_SELECTION
        self._listeners: List[Callable[[int], None]] = []

    @property
    def index(self) -> int:
        return self._index

    @property
    def count(self) -> int:
        return len(self._items)

    def reset(self, items: Sequence[Any] = ()) -> None:
        """Install a new item sequence and return to the default index."""
        self._items = tuple(items)
        self._index = self.default_index if self._items else NO_SELECTION

    def current(self) -> Optional[Any]:
        if 0 <= self._index < len(self._items):
            return self._items[self._index]
        return None

    def move_next(self) -> None:
        if not self._items:
            return
        last = len(self._items) - 1
        self._move_to(0 if self._index >= last else self._index + 1)

    def move_previous(self) -> None:
        if not self._items:
            return
        last = len(self._items) - 1
        self._move_to(last if self._index <= 0 else self._index - 1)

    def jump_first(self) -> None:
        if self._items:
            self._move_to(0)

    def jump_last(self) -> None:
        if self._items:
            self._move_to(len(self._items) - 1)

    def select(self, index: int) -> None:
        """Highlight index if it is in range (mouse hover/click)."""
        if 0 <= index < len(self._items):
            self._move_to(index)

    def add_listener(self, listener: Callable[[int], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[int], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _move_to(self, index: int) -> None:
        if index == self._index:
            return
        self._index = index
        for listener in list(self._listeners):
            listener(index)
