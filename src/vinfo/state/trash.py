from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class TrashEntry:
    trashed: str
    original: str


class TrashStore:
    """Record of files moved to the trash and where they came from."""

    def __init__(self) -> None:
        self._entries: List[TrashEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def add_entry(self, original: str, trashed: str) -> bool:
        """Returns False if the pair is already recorded."""
        entry = TrashEntry(trashed, original)
        if entry in self._entries:
            return False
        self._entries.append(entry)
        return True

    def has_entry(self, original: str, trashed: str) -> bool:
        return TrashEntry(trashed, original) in self._entries

    def remove_entry(self, trashed: str) -> None:
        self._entries = [e for e in self._entries if e.trashed != trashed]

    def entries(self) -> List[TrashEntry]:
        return list(self._entries)
