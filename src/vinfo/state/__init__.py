"""In-memory live state of an instance: panes, options and persisted stores."""

from .assocs import Assoc, AssocRecord, AssocRegistry, RecordType
from .bookmarks import Bookmark, BookmarkStore
from .commands import CommandRegistry
from .dir_stack import DirStack, DirStackEntry
from .history import HistoryList
from .marks import Mark, MarkStore
from .matchers import Filter, Matchers
from .options import GLOBAL_OPTIONS, VIEW_OPTIONS, OptionStore
from .registers import RegisterStore
from .session import HISTORY_KINDS, Layout, Session
from .trash import TrashEntry, TrashStore
from .view import HistoryEntry, SortKey, View

__all__ = [
    "Assoc",
    "AssocRecord",
    "AssocRegistry",
    "RecordType",
    "Bookmark",
    "BookmarkStore",
    "CommandRegistry",
    "DirStack",
    "DirStackEntry",
    "HistoryList",
    "Mark",
    "MarkStore",
    "Filter",
    "Matchers",
    "GLOBAL_OPTIONS",
    "VIEW_OPTIONS",
    "OptionStore",
    "RegisterStore",
    "HISTORY_KINDS",
    "Layout",
    "Session",
    "TrashEntry",
    "TrashStore",
    "HistoryEntry",
    "SortKey",
    "View",
]
