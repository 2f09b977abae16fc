from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from platformdirs import user_config_dir, user_data_dir

logger = logging.getLogger(__name__)

APP_NAME = "vinfo"
INFO_FILE_NAME = "vinfo.json"
LEGACY_FILE_NAME = "vinfo"


class InfoFlag(enum.IntFlag):
    """Persistence categories; a section is serialized only if its flag is set."""

    NONE = 0
    OPTIONS = enum.auto()
    FILETYPES = enum.auto()
    COMMANDS = enum.auto()
    MARKS = enum.auto()
    BOOKMARKS = enum.auto()
    TUI = enum.auto()
    DHISTORY = enum.auto()
    STATE = enum.auto()
    CS = enum.auto()
    SAVEDIRS = enum.auto()
    CHISTORY = enum.auto()
    SHISTORY = enum.auto()
    PHISTORY = enum.auto()
    FHISTORY = enum.auto()
    DIRSTACK = enum.auto()
    REGISTERS = enum.auto()


# Names used in the value of the `vinfo` option, in display order.
INFO_FLAG_NAMES = {
    "options": InfoFlag.OPTIONS,
    "filetypes": InfoFlag.FILETYPES,
    "commands": InfoFlag.COMMANDS,
    "marks": InfoFlag.MARKS,
    "bookmarks": InfoFlag.BOOKMARKS,
    "tui": InfoFlag.TUI,
    "dhistory": InfoFlag.DHISTORY,
    "state": InfoFlag.STATE,
    "cs": InfoFlag.CS,
    "savedirs": InfoFlag.SAVEDIRS,
    "chistory": InfoFlag.CHISTORY,
    "shistory": InfoFlag.SHISTORY,
    "phistory": InfoFlag.PHISTORY,
    "fhistory": InfoFlag.FHISTORY,
    "dirstack": InfoFlag.DIRSTACK,
    "registers": InfoFlag.REGISTERS,
}

DEFAULT_INFO = "bookmarks"


def all_info_flags() -> InfoFlag:
    flags = InfoFlag.NONE
    for flag in INFO_FLAG_NAMES.values():
        flags |= flag
    return flags


def parse_info_flags(value: str) -> InfoFlag:
    """Convert a comma-separated list of category names into flags.

    Unknown names are logged and ignored.
    """
    flags = InfoFlag.NONE
    for name in value.split(","):
        name = name.strip()
        if not name:
            continue
        flag = INFO_FLAG_NAMES.get(name)
        if flag is None:
            logger.warning("Unknown persistence category: %s", name)
            continue
        flags |= flag
    return flags


def format_info_flags(flags: InfoFlag) -> str:
    names: List[str] = [name for name, flag in INFO_FLAG_NAMES.items() if flags & flag]
    return ",".join(names)


def default_state_dir() -> Path:
    return Path(user_config_dir(APP_NAME))


def default_trash_dir() -> Path:
    return Path(user_data_dir(APP_NAME)) / "Trash"


@dataclass
class Config:
    """
    Static configuration of the state store.

    Paths can be overridden through the environment:
      - VINFO_STATE_DIR: directory holding vinfo.json and the legacy vinfo file
      - VINFO_TRASH_DIR: trash directory used to resolve legacy trash entries
    """

    state_dir: Path = field(default_factory=default_state_dir)
    trash_dir: Path = field(default_factory=default_trash_dir)
    info_file_name: str = INFO_FILE_NAME
    legacy_file_name: str = LEGACY_FILE_NAME

    def __post_init__(self) -> None:
        self.state_dir = Path(self.state_dir)
        self.trash_dir = Path(self.trash_dir)

    @property
    def info_path(self) -> Path:
        return self.state_dir / self.info_file_name

    @property
    def legacy_path(self) -> Path:
        return self.state_dir / self.legacy_file_name

    @staticmethod
    def from_env() -> "Config":
        cfg = Config()
        state_dir = os.getenv("VINFO_STATE_DIR")
        if state_dir:
            cfg.state_dir = Path(state_dir).expanduser()
        trash_dir = os.getenv("VINFO_TRASH_DIR")
        if trash_dir:
            cfg.trash_dir = Path(trash_dir).expanduser()
        logger.debug("Config resolved: state_dir=%s trash_dir=%s", cfg.state_dir, cfg.trash_dir)
        return cfg
