"""Rule Collection with Scoped Capture

``TrackingCollection.capture(listener)`` redirects items added to the
collection into ``listener`` for the duration of a ``with`` block. Dependent
rules, validator-level ``when`` blocks and rule sets use it to find out which
rules a configuration callback created.

The listener stack lives in a ``ContextVar`` so captures in one thread or
task are invisible to every other.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Generic, Iterator, TypeVar

T = TypeVar("T")

# Stack of (collection id, listener); innermost capture last.
_capture_stack: ContextVar[tuple[tuple[int, Callable], ...]] = ContextVar("fluentrules_capture_stack", default=())


class TrackingCollection(Generic[T]):
    """Ordered collection whose additions can be temporarily captured."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[T] = []

    def add(self, item: T) -> None:
        listener = self._active_listener()
        if listener is not None:
            listener(item)
        else:
            self._items.append(item)

    def remove(self, item: T) -> None:
        self._items.remove(item)

    def _active_listener(self) -> Callable[[T], None] | None:
        for owner, listener in reversed(_capture_stack.get()):
            if owner == id(self):
                return listener
        return None

    @contextmanager
    def capture(self, listener: Callable[[T], None]) -> Iterator[None]:
        """Send items added inside the block to ``listener`` instead of storing them."""
        token = _capture_stack.set((*_capture_stack.get(), (id(self), listener)))
        try:
            yield
        finally:
            _capture_stack.reset(token)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]
