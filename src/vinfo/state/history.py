from __future__ import annotations

from typing import List


class HistoryList:
    """Bounded list of strings kept oldest to newest without duplicates."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._items: List[str] = []

    def __len__(self) -> int:
        return len(self._items)

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def add(self, item: str) -> None:
        """Make ``item`` the newest entry, dropping the oldest ones that don't fit."""
        if self.capacity <= 0:
            return
        if item in self._items:
            self._items.remove(item)
        self._items.append(item)
        excess = len(self._items) - self.capacity
        if excess > 0:
            del self._items[:excess]

    def resize(self, capacity: int) -> None:
        self.capacity = capacity
        excess = len(self._items) - max(capacity, 0)
        if excess > 0:
            del self._items[:excess]

    def entries(self) -> List[str]:
        return list(self._items)
