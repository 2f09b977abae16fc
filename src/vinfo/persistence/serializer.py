from __future__ import annotations

import logging

from ..config import InfoFlag
from ..state.assocs import AssocList, RecordType, format_record
from ..state.history import HistoryList
from ..state.marks import is_special_mark
from ..state.session import (
    CMD_HISTORY,
    FILTER_HISTORY,
    PROMPT_HISTORY,
    SEARCH_HISTORY,
    Session,
)
from ..state.view import View, format_sort_info
from .document import JsonObject, add_array, add_object, append_object

logger = logging.getLogger(__name__)

# Document key of every history kind, in the order they are written.
HISTORY_NODES = (
    (CMD_HISTORY, "cmd-hist", InfoFlag.CHISTORY),
    (SEARCH_HISTORY, "search-hist", InfoFlag.SHISTORY),
    (PROMPT_HISTORY, "prompt-hist", InfoFlag.PHISTORY),
    (FILTER_HISTORY, "lfilt-hist", InfoFlag.FHISTORY),
)

# Document key and registry attribute of every association list.
ASSOC_NODES = (
    ("assocs", "filetypes"),
    ("xassocs", "xfiletypes"),
    ("viewers", "viewers"),
)


def serialize_state(session: Session) -> JsonObject:
    """Capture the live state of the session into a fresh document.

    Sections whose persistence category is off are left out entirely.
    """
    flags = session.info_flags
    root: JsonObject = {}

    gtabs = add_array(root, "gtabs")
    _store_gtab(append_object(gtabs), session, flags)

    _store_trash(root, session)

    if flags & InfoFlag.OPTIONS:
        root["options"] = session.options.format()

    if flags & InfoFlag.FILETYPES:
        for node, attr in ASSOC_NODES:
            _store_assocs(root, node, getattr(session.assocs, attr))

    if flags & InfoFlag.COMMANDS:
        cmds = add_object(root, "cmds")
        for name, body in session.commands.items():
            cmds[name] = body

    if flags & InfoFlag.MARKS:
        _store_marks(root, session)

    if flags & InfoFlag.BOOKMARKS:
        bmarks = add_object(root, "bmarks")
        for bmark in session.bookmarks.list():
            bmarks[bmark.path] = {"tags": bmark.tags, "ts": bmark.timestamp}

    for kind, node, flag in HISTORY_NODES:
        if flags & flag:
            _store_history(root, node, session.histories[kind])

    if flags & InfoFlag.REGISTERS:
        regs = add_object(root, "regs")
        for name, files in session.registers.items():
            regs[name] = files

    if flags & InfoFlag.DIRSTACK:
        entries = add_array(root, "dir-stack")
        for entry in session.dir_stack.entries():
            entries.append({
                "left-dir": entry.left_dir,
                "left-file": entry.left_file,
                "right-dir": entry.right_dir,
                "right-file": entry.right_file,
            })

    if flags & InfoFlag.STATE:
        root["use-term-multiplexer"] = session.use_term_multiplexer

    if flags & InfoFlag.CS:
        root["color-scheme"] = session.color_scheme

    logger.debug("Serialized sections: %s", ", ".join(root))
    return root


def _store_gtab(gtab: JsonObject, session: Session, flags: InfoFlag) -> None:
    panes = add_array(gtab, "panes")
    for view in session.views:
        _store_view(append_object(panes), view, session, flags)

    if flags & InfoFlag.TUI:
        layout = session.layout
        gtab["active-pane"] = session.active_index
        gtab["preview"] = layout.preview
        gtab["splitter"] = {
            "pos": layout.splitter_pos,
            "orientation": "v" if layout.split == "v" else "h",
            "expanded": layout.window_count == 1,
        }


def _store_view(pane: JsonObject, view: View, session: Session, flags: InfoFlag) -> None:
    ptab = append_object(add_array(pane, "ptabs"))

    if flags & InfoFlag.DHISTORY and session.history_len > 0:
        _store_dhistory(ptab, view, session, flags)

    if flags & InfoFlag.STATE:
        ptab["filters"] = {
            "invert": view.invert,
            "dot": view.hide_dot,
            "manual": view.manual_filter.expr,
            "auto": view.auto_filter.expr,
        }

    if flags & InfoFlag.OPTIONS:
        ptab["options"] = view.options.format()

    if flags & InfoFlag.TUI:
        ptab["sorting"] = format_sort_info(view.sort)


def _store_dhistory(ptab: JsonObject, view: View, session: Session, flags: InfoFlag) -> None:
    # The current location isn't in the history until it's left.
    view.save_position(session.history_len)

    history = add_array(ptab, "history")
    for entry in view.history[:view.history_pos + 1]:
        history.append({"dir": entry.dir, "file": entry.file, "relpos": entry.rel_pos})

    ptab["restore-last-location"] = bool(flags & InfoFlag.SAVEDIRS)


def _store_trash(root: JsonObject, session: Session) -> None:
    entries = session.trash.entries()
    if not entries:
        return
    trash = add_array(root, "trash")
    for entry in entries:
        trash.append({"trashed": entry.trashed, "original": entry.original})


def _store_assocs(root: JsonObject, node: str, assocs: AssocList) -> None:
    entries = add_array(root, node)
    for assoc, record in assocs.records():
        if not record.command or record.type is RecordType.BUILTIN:
            continue
        entries.append({"matchers": assoc.matchers.expr, "cmd": format_record(record)})


def _store_marks(root: JsonObject, session: Session) -> None:
    marks = add_object(root, "marks")
    for mark in session.marks.active():
        if is_special_mark(mark.name):
            continue
        marks[mark.name] = {"dir": mark.directory, "file": mark.file, "ts": mark.timestamp}


def _store_history(root: JsonObject, node: str, hist: HistoryList) -> None:
    entries = hist.entries()
    if not entries:
        return
    root[node] = entries
