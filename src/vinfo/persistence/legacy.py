"""Reader of the legacy line-oriented state file.

Every record starts with a line whose first non-blank character is a tag and
whose remainder is a value.  Some records continue on the following lines.
The reader converts the whole file into a document of the same shape
:mod:`vinfo.persistence.serializer` produces, so loading has a single code
path.
"""
from __future__ import annotations

import logging
import os
import re
import time
from pathlib import Path
from typing import IO, Callable, Dict, List, Optional

from ..state.assocs import PSEUDO_CMD
from ..state.registers import VALID_REGISTERS
from .document import JsonArray, JsonObject, add_array, add_object, append_object

logger = logging.getLogger(__name__)

COMMENT = "#"
OPTION = "="
FILETYPE = "."
XFILETYPE = "x"
FILEVIEWER = ","
COMMAND = "!"
MARK = "'"
BOOKMARK = "b"
ACTIVE_VIEW = "a"
QUICK_VIEW_STATE = "q"
WIN_COUNT = "v"
SPLIT_ORIENTATION = "o"
SPLIT_POSITION = "m"
LWIN_SORT = "l"
RWIN_SORT = "r"
LWIN_HIST = "d"
RWIN_HIST = "D"
CMDLINE_HIST = ":"
SEARCH_HIST = "/"
PROMPT_HIST = "p"
FILTER_HIST = "|"
DIR_STACK = "S"
TRASH = "t"
REG = '"'
LWIN_FILT = "f"
RWIN_FILT = "F"
LWIN_FILT_INV = "i"
RWIN_FILT_INV = "I"
USE_SCREEN = "s"
COLORSCHEME = "c"
LWIN_SPECIFIC = "["
RWIN_SPECIFIC = "]"

LEFT_PANE_OPTION = "["
RIGHT_PANE_OPTION = "]"
PROP_DOTFILES = "."
PROP_AUTO_FILTER = "F"

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_NUMBER_LINE = re.compile(r"[+-]?\d+")


def atoi(text: str) -> int:
    """Leading integer of ``text`` or 0, the way C's atoi() reads it."""
    m = _INT_PREFIX.match(text)
    return int(m.group(1)) if m else 0


def read_number(text: str) -> Optional[int]:
    """Integer value of a line that holds nothing but a number."""
    if _NUMBER_LINE.fullmatch(text):
        return int(text)
    return None


def convert_old_trash_path(trash_path: str, trash_dir: Optional[Path]) -> str:
    """Resolve a relative trash path against the trash directory if it's there."""
    if trash_dir is None or os.path.isabs(trash_path):
        return trash_path
    if not os.access(trash_dir, os.W_OK):
        return trash_path
    full_path = os.path.join(str(trash_dir), trash_path)
    if os.path.lexists(full_path):
        return full_path
    return trash_path


class _Lines:
    """Line source with one line of look-ahead."""

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream
        self._pending: Optional[str] = None

    def _raw(self) -> Optional[str]:
        if self._pending is not None:
            line, self._pending = self._pending, None
            return line
        line = self._stream.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def next(self) -> Optional[str]:
        """Next line without leading whitespace, None at the end."""
        line = self._raw()
        return None if line is None else line.lstrip()

    def optional_number(self) -> Optional[int]:
        """Consume the next line only if it starts with a number.

        Negative numbers are consumed but read as "not set".
        """
        line = self._raw()
        if line is None:
            return None
        m = _INT_PREFIX.match(line) if line[:1].isdigit() or line[:1] in ("+", "-") else None
        if m is None:
            self._pending = line
            return None
        value = int(m.group(1))
        return None if value < 0 else value


class LegacyReader:
    """Builds a document out of a legacy state stream."""

    def __init__(self, trash_dir: Optional[Path] = None, now: Optional[Callable[[], float]] = None) -> None:
        self.trash_dir = trash_dir
        self.now = now or time.time

    def read(self, stream: IO[str]) -> JsonObject:
        root: JsonObject = {}
        self.options = add_array(root, "options")
        self.assocs = add_array(root, "assocs")
        self.xassocs = add_array(root, "xassocs")
        self.viewers = add_array(root, "viewers")
        self.cmds = add_object(root, "cmds")
        self.marks = add_object(root, "marks")
        self.bmarks = add_object(root, "bmarks")
        self.hists: Dict[str, JsonArray] = {
            CMDLINE_HIST: add_array(root, "cmd-hist"),
            SEARCH_HIST: add_array(root, "search-hist"),
            PROMPT_HIST: add_array(root, "prompt-hist"),
            FILTER_HIST: add_array(root, "lfilt-hist"),
        }
        self.dir_stack = add_array(root, "dir-stack")
        self.trash = add_array(root, "trash")
        self.regs = add_object(root, "regs")

        gtabs = add_array(root, "gtabs")
        self.gtab = append_object(gtabs)
        self.splitter = add_object(self.gtab, "splitter")
        panes = add_array(self.gtab, "panes")
        self.ptabs: List[JsonObject] = []
        for _ in range(2):
            pane = append_object(panes)
            ptab = append_object(add_array(pane, "ptabs"))
            add_array(ptab, "history")
            add_object(ptab, "filters")
            add_array(ptab, "options")
            self.ptabs.append(ptab)
        self.root = root

        lines = _Lines(stream)
        while True:
            line = lines.next()
            if line is None:
                break
            if not line or line[0] == COMMENT:
                continue
            self._record(line[0], line[1:], lines)
        return root

    def _record(self, tag: str, value: str, lines: _Lines) -> None:
        left, right = self.ptabs

        if tag == OPTION:
            if value.startswith(LEFT_PANE_OPTION):
                left["options"].append(value[1:])
            elif value.startswith(RIGHT_PANE_OPTION):
                right["options"].append(value[1:])
            else:
                self.options.append(value)
        elif tag in (FILETYPE, XFILETYPE, FILEVIEWER):
            cmd = lines.next()
            if cmd is None:
                return
            # Builtin associations of old versions were stored as well.
            if tag != FILEVIEWER and cmd.endswith("}" + PSEUDO_CMD):
                return
            target = {FILETYPE: self.assocs, XFILETYPE: self.xassocs, FILEVIEWER: self.viewers}[tag]
            target.append({"matchers": value, "cmd": cmd})
        elif tag == COMMAND:
            body = lines.next()
            if body is not None:
                self.cmds[value] = body
        elif tag == MARK:
            directory = lines.next()
            if directory is None:
                return
            file = lines.next()
            if file is None:
                return
            ts = lines.optional_number()
            if ts is None:
                ts = int(self.now())
            if value:
                self.marks[value[0]] = {"dir": directory, "file": file, "ts": ts}
        elif tag == BOOKMARK:
            tags = lines.next()
            if tags is None:
                return
            ts_line = lines.next()
            ts = None if ts_line is None else read_number(ts_line)
            if ts is not None:
                self.bmarks[value] = {"tags": tags, "ts": ts}
        elif tag == ACTIVE_VIEW:
            self.gtab["active-pane"] = 0 if value[:1] == "l" else 1
        elif tag == QUICK_VIEW_STATE:
            self.gtab["preview"] = bool(atoi(value))
        elif tag == WIN_COUNT:
            self.splitter["expanded"] = atoi(value) == 1
        elif tag == SPLIT_ORIENTATION:
            self.splitter["orientation"] = "v" if value[:1] == "v" else "h"
        elif tag == SPLIT_POSITION:
            self.splitter["pos"] = atoi(value)
        elif tag in (LWIN_SORT, RWIN_SORT):
            (left if tag == LWIN_SORT else right)["sorting"] = value
        elif tag in (LWIN_HIST, RWIN_HIST):
            ptab = left if tag == LWIN_HIST else right
            if not value:
                ptab["restore-last-location"] = True
                return
            file = lines.next()
            if file is None:
                return
            rel_pos = lines.optional_number()
            ptab["history"].append({
                "dir": value,
                "file": file,
                "relpos": -1 if rel_pos is None else rel_pos,
            })
        elif tag in self.hists:
            self.hists[tag].append(value)
        elif tag == DIR_STACK:
            left_file = lines.next()
            if left_file is None:
                return
            right_dir = lines.next()
            if right_dir is None:
                return
            right_file = lines.next()
            if right_file is None:
                return
            self.dir_stack.append({
                "left-dir": value,
                "left-file": left_file,
                "right-dir": right_dir[1:],
                "right-file": right_file,
            })
        elif tag == TRASH:
            original = lines.next()
            if original is not None:
                self.trash.append({
                    "trashed": convert_old_trash_path(value, self.trash_dir),
                    "original": original,
                })
        elif tag == REG:
            name = value[:1]
            if name and name in VALID_REGISTERS:
                self.regs.setdefault(name, []).append(value[1:])
        elif tag in (LWIN_FILT, RWIN_FILT):
            (left if tag == LWIN_FILT else right)["filters"]["manual"] = value
        elif tag in (LWIN_FILT_INV, RWIN_FILT_INV):
            (left if tag == LWIN_FILT_INV else right)["filters"]["invert"] = bool(atoi(value))
        elif tag == USE_SCREEN:
            self.root["use-term-multiplexer"] = bool(atoi(value))
        elif tag == COLORSCHEME:
            self.root["color-scheme"] = value
        elif tag in (LWIN_SPECIFIC, RWIN_SPECIFIC):
            filters = (left if tag == LWIN_SPECIFIC else right)["filters"]
            if value.startswith(PROP_DOTFILES):
                filters["dot"] = bool(atoi(value[1:]))
            elif value.startswith(PROP_AUTO_FILTER):
                filters["auto"] = value[1:]
        else:
            logger.debug("Skipping legacy record with unknown tag %r", tag)


def read_legacy_file(
    path: Path,
    trash_dir: Optional[Path] = None,
    now: Optional[Callable[[], float]] = None,
) -> Optional[JsonObject]:
    """Convert a legacy state file into a document, None if it can't be opened."""
    try:
        f = open(path, "r", encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Can't open legacy state file %s: %s", path, exc)
        return None
    with f:
        doc = LegacyReader(trash_dir=trash_dir, now=now).read(f)
    logger.info("Loaded legacy state file %s", path)
    return doc
