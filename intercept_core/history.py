#!/usr/bin/env python3
"""
Fixed-capacity FIFO history used for position trails and the signal-strength series.
"""
from collections import deque
from typing import Deque, Generic, Iterator, Tuple, TypeVar

T = TypeVar("T")


class HistoryBuffer(Generic[T]):
    """
    Insertion-ordered buffer that evicts its oldest item once capacity is exceeded.

    Capacity is enforced by the underlying deque, so len(buffer) <= capacity always holds.
    """

    def __init__(self, capacity: int):
        if int(capacity) < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity!r}")
        self._items: Deque[T] = deque(maxlen=int(capacity))

    @property
    def capacity(self) -> int:
        return self._items.maxlen

    def push(self, item: T) -> None:
        self._items.append(item)

    def clear(self) -> None:
        self._items.clear()

    def resize(self, capacity: int) -> None:
        """Change capacity in place, keeping the most recent items."""
        if int(capacity) < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity!r}")
        self._items = deque(self._items, maxlen=int(capacity))

    def snapshot(self) -> Tuple[T, ...]:
        """Oldest-first copy of the contents."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._items))

    def __repr__(self) -> str:
        return f"HistoryBuffer(capacity={self.capacity}, items={list(self._items)!r})"
