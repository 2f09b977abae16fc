from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..errors import StateError


@dataclass
class Bookmark:
    path: str
    tags: str
    timestamp: int

    def is_removed(self) -> bool:
        return not self.tags


def _validate_tags(tags: str) -> None:
    for tag in tags.split(","):
        if not tag.strip():
            raise StateError(f"Invalid bookmark tags: {tags!r}")


class BookmarkStore:
    """Bookmarks keyed by path.

    Removing a bookmark leaves an entry with empty tags and a fresh timestamp
    behind, so that older copies of it coming from other instances lose the
    timestamp comparison instead of bringing it back.
    """

    def __init__(self) -> None:
        self._bmarks: Dict[str, Bookmark] = {}

    def setup(self, path: str, tags: str, timestamp: int) -> Bookmark:
        """Add or replace a bookmark with an explicit timestamp."""
        if not path:
            raise StateError("Bookmark path can't be empty")
        if tags:
            _validate_tags(tags)
        bmark = Bookmark(path, tags, int(timestamp))
        self._bmarks[path] = bmark
        return bmark

    def add(self, path: str, tags: str) -> Bookmark:
        if not tags:
            raise StateError("Bookmark needs at least one tag")
        return self.setup(path, tags, int(time.time()))

    def remove(self, path: str) -> None:
        if path in self._bmarks:
            self._bmarks[path] = Bookmark(path, "", int(time.time()))

    def get(self, path: str) -> Optional[Bookmark]:
        bmark = self._bmarks.get(path)
        if bmark is None or bmark.is_removed():
            return None
        return bmark

    def is_older(self, path: str, timestamp: float) -> bool:
        """Whether the live bookmark (removed ones included) is absent or older."""
        bmark = self._bmarks.get(path)
        return bmark is None or bmark.timestamp < timestamp

    def list(self) -> List[Bookmark]:
        """Bookmarks that currently exist, in insertion order."""
        return [b for b in self._bmarks.values() if not b.is_removed()]
