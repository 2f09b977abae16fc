from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class DirStackEntry:
    left_dir: str
    left_file: str
    right_dir: str
    right_file: str


class DirStack:
    """Stack of saved pane locations.

    ``freeze()`` marks the current contents as the startup state; any push or
    pop afterwards makes ``changed()`` true even if the contents end up equal.
    """

    def __init__(self) -> None:
        self._entries: List[DirStackEntry] = []
        self._mutations = 0

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, left_dir: str, left_file: str, right_dir: str, right_file: str) -> None:
        self._entries.append(DirStackEntry(left_dir, left_file, right_dir, right_file))
        self._mutations += 1

    def pop(self) -> Optional[DirStackEntry]:
        if not self._entries:
            return None
        self._mutations += 1
        return self._entries.pop()

    def clear(self) -> None:
        if self._entries:
            self._mutations += 1
        self._entries.clear()

    def entries(self) -> List[DirStackEntry]:
        """Entries from the bottom of the stack to its top."""
        return list(self._entries)

    def freeze(self) -> None:
        self._mutations = 0

    def changed(self) -> bool:
        return self._mutations > 0
