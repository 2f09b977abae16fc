from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .matchers import Filter
from .options import VIEW_OPTIONS, OptionStore


class SortKey(enum.IntEnum):
    """Sort keys; a negative value in a sort descriptor means descending order."""

    EXTENSION = 1
    NAME = 2
    SIZE = 3
    TIME_ACCESSED = 4
    TIME_CHANGED = 5
    TIME_MODIFIED = 6
    INAME = 7
    DIR = 8
    TYPE = 9
    FILEEXT = 10
    NITEMS = 11
    GROUPS = 12
    TARGET = 13
    MODE = 14
    PERMISSIONS = 15
    OWNER_NAME = 16
    OWNER_ID = 17
    GROUP_NAME = 18
    GROUP_ID = 19
    NLINKS = 20
    INODE = 21
    ID = 22


DEFAULT_SORT_KEY = int(SortKey.NAME)
SORT_KEY_MAX = max(int(k) for k in SortKey)
# Number of keys a sort descriptor can hold.
SORT_SLOTS = SORT_KEY_MAX

_SORT_TOKEN = re.compile(r"\s*([+-]?\d+)")


def default_sort() -> List[int]:
    return [DEFAULT_SORT_KEY] + [0] * (SORT_SLOTS - 1)


def parse_sort_info(line: str) -> List[int]:
    """Parse a sort descriptor into a full list of slots.

    Signed integers are picked out of the line; commas and any other
    characters that aren't part of a number only separate them.  Keys are
    clamped to [-SORT_KEY_MAX, SORT_KEY_MAX] and scanning stops once all
    slots are filled.  Unused slots are zero and an empty result falls back
    to the default key.
    """
    keys: List[int] = []
    pos = 0
    while pos < len(line) and len(keys) < SORT_SLOTS:
        m = _SORT_TOKEN.match(line, pos)
        if m is not None:
            keys.append(max(-SORT_KEY_MAX, min(SORT_KEY_MAX, int(m.group(1)))))
            pos = m.end()
        else:
            pos += 1
        if line.startswith(",", pos):
            pos += 1
    if not keys:
        return default_sort()
    return keys + [0] * (SORT_SLOTS - len(keys))


def format_sort_info(sort: List[int]) -> str:
    keys: List[str] = []
    for key in sort[:SORT_SLOTS]:
        if key == 0 or abs(key) > SORT_KEY_MAX:
            break
        keys.append(str(key))
    return ",".join(keys)


@dataclass
class HistoryEntry:
    dir: str
    file: str
    rel_pos: int = 0


@dataclass
class View:
    """One of the two panes: location, directory history, filters and sorting."""

    name: str
    curr_dir: str = "/"
    curr_file: str = ""
    rel_pos: int = 0
    history: List[HistoryEntry] = field(default_factory=list)
    history_pos: int = 0
    invert: bool = True
    hide_dot: bool = True
    manual_filter: Filter = field(default_factory=Filter)
    prev_manual_filter: str = ""
    auto_filter: Filter = field(default_factory=Filter)
    sort: List[int] = field(default_factory=default_sort)
    options: OptionStore = field(default_factory=lambda: OptionStore(VIEW_OPTIONS))

    def save_position(
        self,
        capacity: int,
        dir: Optional[str] = None,
        file: Optional[str] = None,
        rel_pos: int = -1,
    ) -> None:
        """Record a location in the directory history.

        Without arguments the current location of the view is recorded.
        Revisiting the directory of the current entry updates it in place,
        otherwise forward history is dropped and the oldest entry is evicted
        once ``capacity`` is reached.
        """
        if capacity <= 0:
            return
        if dir is None:
            dir = self.curr_dir
        if file is None:
            file = self.curr_file
        if rel_pos < 0:
            rel_pos = self.rel_pos

        if self.history and self.history[self.history_pos].dir == dir:
            entry = self.history[self.history_pos]
            entry.file = file
            entry.rel_pos = rel_pos
            return

        if self.history:
            del self.history[self.history_pos + 1:]
        self.history.append(HistoryEntry(dir, file, rel_pos))
        while len(self.history) > capacity:
            self.history.pop(0)
        self.history_pos = len(self.history) - 1

    def history_contains(self, dir: str) -> bool:
        return any(entry.dir == dir for entry in self.history)

    def trim_history(self, capacity: int) -> None:
        """Drop the oldest entries that don't fit into a smaller capacity."""
        excess = len(self.history) - max(capacity, 0)
        if excess > 0:
            del self.history[:excess]
            self.history_pos = max(0, self.history_pos - excess)
