from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ..config import Config, InfoFlag, format_info_flags, parse_info_flags
from .assocs import AssocRegistry
from .bookmarks import BookmarkStore
from .commands import CommandRegistry
from .dir_stack import DirStack
from .history import HistoryList
from .marks import MarkStore
from .options import GLOBAL_OPTIONS, OptionStore
from .registers import RegisterStore
from .trash import TrashStore
from .view import View

logger = logging.getLogger(__name__)

CMD_HISTORY = "cmd"
SEARCH_HISTORY = "search"
PROMPT_HISTORY = "prompt"
FILTER_HISTORY = "filter"
HISTORY_KINDS = (CMD_HISTORY, SEARCH_HISTORY, PROMPT_HISTORY, FILTER_HISTORY)


@dataclass
class Layout:
    """Window layout: quick view, split orientation, splitter and window count."""

    preview: bool = False
    split: str = "v"
    splitter_pos: int = -1
    window_count: int = 2


class Session:
    """
    Live state of one running instance.

    The session is the explicit context handed to the serializer, loader and
    merge engine: it owns both panes (and knows which one is active), the
    global options and every store whose contents are persisted.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config.from_env()
        self.options = OptionStore(GLOBAL_OPTIONS)
        self.left = View("left")
        self.right = View("right")
        self.current = self.left
        self.layout = Layout()
        self.marks = MarkStore()
        self.bookmarks = BookmarkStore()
        self.registers = RegisterStore()
        self.dir_stack = DirStack()
        self.trash = TrashStore()
        self.assocs = AssocRegistry()
        self.commands = CommandRegistry()
        self.histories: Dict[str, HistoryList] = {
            kind: HistoryList(self.history_len) for kind in HISTORY_KINDS
        }
        self.use_term_multiplexer = False
        self.color_scheme = "default"

    @property
    def other(self) -> View:
        return self.right if self.current is self.left else self.left

    @property
    def views(self) -> tuple:
        return (self.left, self.right)

    def activate(self, index: int) -> None:
        """Make the left (0) or right (1) pane the active one."""
        self.current = self.right if index == 1 else self.left

    @property
    def active_index(self) -> int:
        return 0 if self.current is self.left else 1

    @property
    def history_len(self) -> int:
        return int(self.options.get("history"))

    def resize_histories(self, new_len: int) -> None:
        """Change capacity of every history, trimming the oldest entries if needed."""
        new_len = max(0, int(new_len))
        self.options.set("history", new_len)
        self._sync_histories()

    def _sync_histories(self) -> None:
        capacity = self.history_len
        for hist in self.histories.values():
            hist.resize(capacity)
        for view in self.views:
            view.trim_history(capacity)
        logger.debug("History capacity is now %s", capacity)

    @property
    def info_flags(self) -> InfoFlag:
        return parse_info_flags(str(self.options.get("vinfo")))

    def set_info_flags(self, flags: InfoFlag) -> None:
        self.options.set("vinfo", format_info_flags(flags))

    def apply_option(self, arg: str) -> None:
        """Apply a global option argument, keeping dependent state in sync."""
        old_len = self.history_len
        self.options.apply(arg)
        if self.history_len != old_len:
            self._sync_histories()
