"""FIFO queue that refuses items already waiting in it."""

from collections import deque
from collections.abc import Hashable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class UniqueQueue(Generic[T]):
    """
    First-in, first-out queue with no duplicates among the queued items.

    A set mirrors the deque so membership tests and pulls stay O(1). Once an
    item has been pulled it may be added again.
    """

    def __init__(self) -> None:
        self._queue: deque[T] = deque()
        self._members: set[T] = set()

    def add(self, item: T) -> bool:
        """Append `item` unless it is already queued. Returns True if it was added."""
        if item is None:
            # None is the empty signal of pull() and peek()
            raise ValueError("UniqueQueue cannot hold None")
        if item in self._members:
            return False
        self._members.add(item)
        self._queue.append(item)
        return True

    def pull(self) -> T | None:
        """Remove and return the head of the queue, or None when it is empty."""
        if not self._queue:
            return None
        item = self._queue.popleft()
        self._members.discard(item)
        return item

    def peek(self) -> T | None:
        return self._queue[0] if self._queue else None

    def is_empty(self) -> bool:
        return not self._queue

    def size(self) -> int:
        return len(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def __contains__(self, item: object) -> bool:
        return item in self._members

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._queue))

    def __repr__(self) -> str:
        return f"UniqueQueue({list(self._queue)!r})"
