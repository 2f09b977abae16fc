"""Merging of state written by another instance into freshly serialized state.

``current`` is what this instance is about to write and ``admixture`` is the
document found on disk after some other instance changed it.  Merging only
ever adds to ``current``: entries already there are never dropped and win
every conflict, except for marks and bookmarks where the newer timestamp wins.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, Iterable, Optional

from ..config import InfoFlag
from ..state.session import Session
from ..state.view import View
from .document import (
    JsonObject,
    array_object_at,
    array_objects,
    array_strings,
    deep_copy,
    get_array,
    get_number,
    get_object,
    get_str,
)
from .serializer import ASSOC_NODES, HISTORY_NODES

logger = logging.getLogger(__name__)

_END = ""


class HistoryIndex:
    """Prefix tree of strings used to look up history entries."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._root: Dict[str, dict] = {}
        for entry in entries:
            self.put(entry)

    def put(self, entry: str) -> None:
        node = self._root
        for ch in entry:
            node = node.setdefault(ch, {})
        node[_END] = {}

    def __contains__(self, entry: object) -> bool:
        if not isinstance(entry, str):
            return False
        node = self._root
        for ch in entry:
            node = node.get(ch)
            if node is None:
                return False
        return _END in node


def merge_states(current: JsonObject, admixture: Optional[JsonObject], session: Session) -> None:
    """Add parts of ``admixture`` to ``current`` so another instance's state isn't lost."""
    if admixture is None:
        return

    flags = session.info_flags

    merge_tabs(current, admixture, session)

    if flags & InfoFlag.FILETYPES:
        for node, attr in ASSOC_NODES:
            merge_assocs(current, admixture, node, session, attr)

    if flags & InfoFlag.COMMANDS:
        merge_commands(current, admixture)

    if flags & InfoFlag.MARKS:
        merge_marks(current, admixture, session)

    if flags & InfoFlag.BOOKMARKS:
        merge_bmarks(current, admixture, session)

    for _, node, flag in HISTORY_NODES:
        if flags & flag:
            merge_history(current, admixture, node)

    if flags & InfoFlag.REGISTERS:
        merge_regs(current, admixture)

    if flags & InfoFlag.DIRSTACK:
        merge_dir_stack(current, admixture, session)

    merge_trash(current, admixture, session)


def merge_tabs(current: JsonObject, admixture: JsonObject, session: Session) -> None:
    """Merge directory histories when there is exactly one tab on both sides."""
    if not session.info_flags & InfoFlag.DHISTORY:
        return

    current_gtabs = get_array(current, "gtabs")
    updated_gtabs = get_array(admixture, "gtabs")
    if len(current_gtabs or ()) != 1 or len(updated_gtabs or ()) != 1:
        return

    current_panes = get_array(array_object_at(current_gtabs, 0), "panes")
    updated_panes = get_array(array_object_at(updated_gtabs, 0), "panes")

    for i, view in enumerate(session.views):
        current_ptabs = get_array(array_object_at(current_panes, i), "ptabs")
        updated_ptabs = get_array(array_object_at(updated_panes, i), "ptabs")
        if len(current_ptabs or ()) != 1 or len(updated_ptabs or ()) != 1:
            continue
        current_ptab = array_object_at(current_ptabs, 0)
        updated_ptab = array_object_at(updated_ptabs, 0)
        if current_ptab is not None and updated_ptab is not None:
            merge_dhistory(current_ptab, updated_ptab, view, session.history_len)


def merge_dhistory(current: JsonObject, admixture: JsonObject, view: View, history_len: int) -> None:
    updated = array_objects(get_array(admixture, "history"))
    extra_space = history_len - 1 - view.history_pos
    if extra_space <= 0 or not updated:
        return

    merged = []
    for entry in updated:
        dir = get_str(entry, "dir")
        # Directories that are gone aren't worth bringing back.
        if dir is not None and not view.history_contains(dir) and os.path.isdir(dir):
            merged.append(deep_copy(entry))
    merged.extend(deep_copy(entry) for entry in array_objects(get_array(current, "history")))
    current["history"] = merged


def merge_assocs(
    current: JsonObject,
    admixture: JsonObject,
    node: str,
    session: Session,
    attr: str,
) -> None:
    assocs = getattr(session.assocs, attr)
    entries = current.setdefault(node, [])
    for entry in array_objects(get_array(admixture, node)):
        matchers = get_str(entry, "matchers")
        cmd = get_str(entry, "cmd")
        if matchers is None or cmd is None:
            continue
        if not assocs.exists(matchers, cmd):
            entries.append(deep_copy(entry))


def merge_commands(current: JsonObject, admixture: JsonObject) -> None:
    cmds = current.setdefault("cmds", {})
    updated = get_object(admixture, "cmds") or {}
    for name in updated:
        body = get_str(updated, name)
        if body is not None and name not in cmds:
            cmds[name] = body


def merge_marks(current: JsonObject, admixture: JsonObject, session: Session) -> None:
    marks = current.setdefault("marks", {})
    updated = get_object(admixture, "marks") or {}
    for name in updated:
        mark = get_object(updated, name)
        ts = get_number(mark, "ts")
        if ts is not None and session.marks.is_older(name, int(ts)):
            marks[name] = deep_copy(mark)


def merge_bmarks(current: JsonObject, admixture: JsonObject, session: Session) -> None:
    bmarks = current.setdefault("bmarks", {})
    updated = get_object(admixture, "bmarks") or {}
    for path in updated:
        bmark = get_object(updated, path)
        ts = get_number(bmark, "ts")
        if ts is not None and session.bookmarks.is_older(path, int(ts)):
            bmarks[path] = deep_copy(bmark)


def merge_history(current: JsonObject, admixture: JsonObject, node: str) -> None:
    """Put entries known only to ``admixture`` before those of ``current``."""
    updated = array_strings(get_array(admixture, node))
    if not updated:
        return

    entries = array_strings(get_array(current, node))
    index = HistoryIndex(entries)
    merged = [entry for entry in updated if entry not in index]
    merged.extend(entries)
    current[node] = merged


def merge_regs(current: JsonObject, admixture: JsonObject) -> None:
    regs = current.setdefault("regs", {})
    updated = get_object(admixture, "regs") or {}
    for name in updated:
        if name not in regs:
            regs[name] = deep_copy(updated[name])


def merge_dir_stack(current: JsonObject, admixture: JsonObject, session: Session) -> None:
    # A stack changed by this instance is newer than whatever is on disk.
    if session.dir_stack.changed():
        return
    updated = get_array(admixture, "dir-stack")
    if updated is not None:
        current["dir-stack"] = deep_copy(updated)


def merge_trash(current: JsonObject, admixture: JsonObject, session: Session) -> None:
    updated = array_objects(get_array(admixture, "trash"))
    if not updated:
        return
    # Empty trash isn't written, so there may be no list to append to yet.
    trash = current.setdefault("trash", [])
    for entry in updated:
        trashed = get_str(entry, "trashed")
        original = get_str(entry, "original")
        if trashed is None or original is None:
            continue
        if not session.trash.has_entry(original, trashed):
            trash.append(deep_copy(entry))
    logger.debug("Trash has %d entries after merge", len(trash))
