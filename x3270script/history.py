"""Bounded command history."""

from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

MAX_COMMANDS = 5


class CommandHistory(Generic[T]):
    """
    Fixed-capacity ring buffer of recent results.

    Slots are indexed by insertion count modulo capacity, so once the buffer
    is full each insertion overwrites the oldest entry. Reads are
    most-recent-first.
    """

    def __init__(self, capacity: int = MAX_COMMANDS) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be positive: {capacity}")
        self._capacity = capacity
        self._slots: List[Optional[T]] = [None] * capacity
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, item: T) -> None:
        self._slots[self._count % self._capacity] = item
        self._count += 1

    def clear(self) -> None:
        self._slots = [None] * self._capacity
        self._count = 0

    def latest(self) -> Optional[T]:
        if self._count == 0:
            return None
        return self._slots[(self._count - 1) % self._capacity]

    def recent(self) -> List[T]:
        """Entries, most recent first."""
        items: List[T] = []
        for n in range(len(self)):
            item = self._slots[(self._count - 1 - n) % self._capacity]
            assert item is not None
            items.append(item)
        return items

    def __len__(self) -> int:
        return min(self._count, self._capacity)

    def __repr__(self) -> str:
        return f"CommandHistory(len={len(self)}, capacity={self._capacity})"
