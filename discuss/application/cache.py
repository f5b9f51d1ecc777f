"""Client-side caches shared by readers and in-flight mutations.

Each cached value lives in a ``StateCell``. A cell is replaced wholesale
with the output of a pure function, so readers only ever see a complete
value from before or after a change, never a half-applied one.
"""

from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

import logfire

from discuss.domain.model.comment import CommentTree
from discuss.domain.model.moderation import ModerationQueueItem
from discuss.domain.value import CommentId, LessonId, ModerationFilters

T = TypeVar("T")

Listener = Callable[[T], None]
ModerationQueue = tuple[ModerationQueueItem, ...]


class StateCell(Generic[T]):
    """A single shared, replaceable value with change listeners."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Listener[T]] = []

    @property
    def value(self) -> T:
        """Current value."""
        return self._value

    def set(self, value: T) -> None:
        """Publish a new value; listeners are skipped if nothing changed.

        A failing listener is logged and does not stop the others or undo
        the new value.
        """
        if value is self._value:
            return
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logfire.error(
                    "State listener failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def update(self, fn: Callable[[T], T]) -> T:
        """Replace the value with ``fn(value)`` and return the result."""
        self.set(fn(self._value))
        return self._value

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


class CommentCache:
    """Comment trees per lesson."""

    def __init__(self) -> None:
        self._cells: dict[LessonId, StateCell[CommentTree]] = {}

    def cell(self, lesson_id: LessonId) -> StateCell[CommentTree]:
        """Cell holding the tree of ``lesson_id`` (empty until loaded)."""
        if lesson_id not in self._cells:
            self._cells[lesson_id] = StateCell(())
        return self._cells[lesson_id]

    def get(self, lesson_id: LessonId) -> CommentTree:
        """Current tree of ``lesson_id``."""
        return self.cell(lesson_id).value

    def cells_with_comment(
        self, comment_id: CommentId
    ) -> Iterator[StateCell[CommentTree]]:
        """Cells whose tree contains the root comment ``comment_id``."""
        for cell in self._cells.values():
            if any(comment.id == comment_id for comment in cell.value):
                yield cell


class ModerationQueueCache:
    """Moderation rows per filter combination."""

    def __init__(self) -> None:
        self._cells: dict[ModerationFilters, StateCell[ModerationQueue]] = {}

    def cell(
        self, filters: ModerationFilters
    ) -> StateCell[ModerationQueue]:
        """Cell holding the rows for ``filters`` (empty until loaded)."""
        if filters not in self._cells:
            self._cells[filters] = StateCell(())
        return self._cells[filters]

    def get(self, filters: ModerationFilters) -> ModerationQueue:
        """Current rows for ``filters``."""
        return self.cell(filters).value

    def find(self, item_id: str) -> ModerationQueueItem | None:
        """Row for ``item_id`` in any cached page."""
        for cell in self._cells.values():
            for item in cell.value:
                if item.id == item_id:
                    return item
        return None
