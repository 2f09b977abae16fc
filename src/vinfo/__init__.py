"""
vinfo: persistent state of a two-pane file manager.

This package provides:
- Live state of an instance (panes, options, marks, bookmarks, registers, ...)
- A JSON state document and a reader of the older line-oriented format
- Loading and saving of the state file shared by several running instances,
  merging in whatever another instance wrote since the last load
"""
import logging

from .config import Config, InfoFlag, format_info_flags, parse_info_flags
from .errors import DocumentError, MatcherError, OptionError, StateError, VinfoError
from .logging_config import configure_logging
from .persistence import InfoFileManager, load_state, merge_states, serialize_state
from .state import Session

__all__ = [
    "Config",
    "InfoFlag",
    "format_info_flags",
    "parse_info_flags",
    "DocumentError",
    "MatcherError",
    "OptionError",
    "StateError",
    "VinfoError",
    "configure_logging",
    "InfoFileManager",
    "load_state",
    "merge_states",
    "serialize_state",
    "Session",
]

# Silent unless the application configures logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())
