from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from ..errors import StateError

VALID_MARKS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789<>'"
# Selection bounds and the previous-location mark are maintained by the UI.
SPECIAL_MARKS = "<>'"


@dataclass
class Mark:
    name: str
    directory: str
    file: str
    timestamp: int


def is_special_mark(name: str) -> bool:
    return name in SPECIAL_MARKS


class MarkStore:
    """Marks keyed by their single-character name."""

    def __init__(self) -> None:
        self._marks: Dict[str, Mark] = {}

    def setup_user_mark(self, name: str, directory: str, file: str, timestamp: int) -> Mark:
        """Set a mark with an explicit timestamp (used when restoring state)."""
        if len(name) != 1 or name not in VALID_MARKS or is_special_mark(name):
            raise StateError(f"Invalid mark name: {name!r}")
        mark = Mark(name, directory, file, int(timestamp))
        self._marks[name] = mark
        return mark

    def set(self, name: str, directory: str, file: str) -> Mark:
        """Set any valid mark, special ones included, stamping it with the current time."""
        if len(name) != 1 or name not in VALID_MARKS:
            raise StateError(f"Invalid mark name: {name!r}")
        mark = Mark(name, directory, file, int(time.time()))
        self._marks[name] = mark
        return mark

    def get(self, name: str) -> Optional[Mark]:
        return self._marks.get(name)

    def remove(self, name: str) -> None:
        self._marks.pop(name, None)

    def is_older(self, name: str, timestamp: float) -> bool:
        """Whether the live mark is absent or strictly older than ``timestamp``."""
        mark = self._marks.get(name)
        return mark is None or mark.timestamp < timestamp

    def active(self) -> Iterator[Mark]:
        """Marks in the canonical name order."""
        for name in VALID_MARKS:
            mark = self._marks.get(name)
            if mark is not None:
                yield mark
