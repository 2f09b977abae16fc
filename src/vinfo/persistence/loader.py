"""Application of a state document onto the live state of a session.

Nothing in a document is trusted: fields that are missing or hold values of
an unexpected type are skipped and leave the corresponding live state as it
was.  Entries rejected by the live stores are logged and skipped.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import MatcherError, OptionError, StateError
from ..state.history import HistoryList
from ..state.matchers import Filter, Matchers
from ..state.session import Session
from ..state.view import View, parse_sort_info
from .document import (
    JsonObject,
    array_object_at,
    array_objects,
    array_strings,
    get_array,
    get_bool,
    get_int,
    get_number,
    get_object,
    get_str,
)
from .serializer import HISTORY_NODES

logger = logging.getLogger(__name__)


def load_state(session: Session, root: JsonObject, reread: bool = False) -> None:
    """Apply a document to the session.

    ``reread`` is set when state is reloaded by a running instance; then the
    active pane, window count and last-location restoring are left alone.
    """
    use_term_multiplexer = get_bool(root, "use-term-multiplexer")
    if use_term_multiplexer is not None:
        session.use_term_multiplexer = use_term_multiplexer

    color_scheme = get_str(root, "color-scheme")
    if color_scheme is not None:
        session.color_scheme = color_scheme

    for gtab in array_objects(get_array(root, "gtabs")):
        _load_gtab(session, gtab, reread)

    _load_options(session, root)
    _load_assocs(session, root, "assocs", for_x=False)
    _load_assocs(session, root, "xassocs", for_x=True)
    _load_viewers(session, root)
    _load_cmds(session, root)
    _load_marks(session, root)
    _load_bmarks(session, root)
    _load_regs(session, root)
    _load_dir_stack(session, root)
    _load_trash(session, root)
    for kind, node, _ in HISTORY_NODES:
        _load_history(session, root, node, session.histories[kind])


def _load_gtab(session: Session, gtab: JsonObject, reread: bool) -> None:
    panes = get_array(gtab, "panes")
    _load_pane(session, array_object_at(panes, 0), session.left, reread)
    _load_pane(session, array_object_at(panes, 1), session.right, reread)

    layout = session.layout
    preview = get_bool(gtab, "preview")
    if preview is not None:
        layout.preview = preview

    splitter = get_object(gtab, "splitter")
    orientation = get_str(splitter, "orientation")
    if orientation is not None:
        layout.split = "v" if orientation.startswith("v") else "h"
    pos = get_int(splitter, "pos")
    if pos is not None:
        layout.splitter_pos = pos

    if reread:
        return

    active_pane = get_int(gtab, "active-pane")
    if active_pane in (0, 1):
        session.activate(active_pane)

    expanded = get_bool(splitter, "expanded")
    if expanded is not None:
        layout.window_count = 1 if expanded else 2


def _load_pane(session: Session, pane: Optional[JsonObject], view: View, reread: bool) -> None:
    for ptab in array_objects(get_array(pane, "ptabs")):
        _load_dhistory(session, ptab, view, reread)
        _load_filters(ptab, view)

        for arg in array_strings(get_array(ptab, "options")):
            try:
                view.options.apply(arg)
            except OptionError as exc:
                logger.warning("Skipping %s pane option `%s`: %s", view.name, arg, exc)

        sorting = get_str(ptab, "sorting")
        if sorting is not None:
            view.sort = parse_sort_info(sorting)


def _load_dhistory(session: Session, ptab: JsonObject, view: View, reread: bool) -> None:
    last_dir = None
    for entry in array_objects(get_array(ptab, "history")):
        dir = get_str(entry, "dir")
        file = get_str(entry, "file")
        rel_pos = get_int(entry, "relpos")
        if dir is None or file is None or rel_pos is None:
            continue
        # History stored by an instance with a larger capacity must still fit.
        if len(view.history) >= session.history_len:
            session.resize_histories(session.history_len + 1)
        view.save_position(session.history_len, dir, file, max(rel_pos, 0))
        last_dir = dir

    restore = get_bool(ptab, "restore-last-location")
    if restore and not reread and last_dir is not None:
        view.curr_dir = last_dir


def _load_filters(ptab: JsonObject, view: View) -> None:
    filters = get_object(ptab, "filters")
    if filters is None:
        return

    invert = get_bool(filters, "invert")
    if invert is not None:
        view.invert = invert

    dot = get_bool(filters, "dot")
    if dot is not None:
        view.hide_dot = dot

    manual = get_str(filters, "manual")
    if manual is not None:
        set_manual_filter(view, manual)

    auto = get_str(filters, "auto")
    if auto is not None:
        try:
            view.auto_filter.set(auto)
        except MatcherError as exc:
            logger.error("Error setting auto filename filter to: %s (%s)", auto, exc)


def set_manual_filter(view: View, value: str) -> None:
    """Set manual filter and its previous value, falling back to an empty filter."""
    view.prev_manual_filter = value
    try:
        view.manual_filter = Filter(value)
    except MatcherError as exc:
        logger.error("Error setting manual filter to: %s (%s)", value, exc)
        view.prev_manual_filter = ""
        view.manual_filter = Filter("")


def _load_options(session: Session, root: JsonObject) -> None:
    for arg in array_strings(get_array(root, "options")):
        try:
            session.apply_option(arg)
        except OptionError as exc:
            logger.warning("Skipping option `%s`: %s", arg, exc)


def _parse_matchers(expr: str, what: str) -> Optional[Matchers]:
    try:
        return Matchers.parse(expr)
    except MatcherError as exc:
        logger.error("Error with matchers of %s `%s`: %s", what, expr, exc)
        return None


def _load_assocs(session: Session, root: JsonObject, node: str, for_x: bool) -> None:
    for entry in array_objects(get_array(root, node)):
        matchers = get_str(entry, "matchers")
        cmd = get_str(entry, "cmd")
        if matchers is None or cmd is None:
            continue
        ms = _parse_matchers(matchers, "an assoc")
        if ms is not None:
            session.assocs.set_programs(ms, cmd, for_x=for_x)


def _load_viewers(session: Session, root: JsonObject) -> None:
    for entry in array_objects(get_array(root, "viewers")):
        matchers = get_str(entry, "matchers")
        cmd = get_str(entry, "cmd")
        if matchers is None or cmd is None:
            continue
        ms = _parse_matchers(matchers, "a viewer")
        if ms is not None:
            session.assocs.set_viewers(ms, cmd)


def _load_cmds(session: Session, root: JsonObject) -> None:
    cmds = get_object(root, "cmds") or {}
    for name in cmds:
        body = get_str(cmds, name)
        if body is None:
            continue
        try:
            session.commands.define(name, body)
        except StateError as exc:
            logger.warning("Can't define command `%s`: %s", name, exc)


def _load_marks(session: Session, root: JsonObject) -> None:
    marks = get_object(root, "marks") or {}
    for name in marks:
        mark = get_object(marks, name)
        dir = get_str(mark, "dir")
        file = get_str(mark, "file")
        ts = get_number(mark, "ts")
        if dir is None or file is None or ts is None:
            continue
        try:
            session.marks.setup_user_mark(name, dir, file, int(ts))
        except StateError as exc:
            logger.warning("Can't restore mark: %s", exc)


def _load_bmarks(session: Session, root: JsonObject) -> None:
    bmarks = get_object(root, "bmarks") or {}
    for path in bmarks:
        bmark = get_object(bmarks, path)
        tags = get_str(bmark, "tags")
        ts = get_number(bmark, "ts")
        if tags is None or ts is None:
            continue
        try:
            session.bookmarks.setup(path, tags, int(ts))
        except StateError as exc:
            logger.error("Can't add a bookmark: %s (%s): %s", path, tags, exc)


def _load_regs(session: Session, root: JsonObject) -> None:
    regs = get_object(root, "regs") or {}
    for name in regs:
        for path in array_strings(get_array(regs, name)):
            try:
                session.registers.append(name, path)
            except StateError as exc:
                logger.warning("Can't restore register contents: %s", exc)
                break


def _load_dir_stack(session: Session, root: JsonObject) -> None:
    for entry in array_objects(get_array(root, "dir-stack")):
        left_dir = get_str(entry, "left-dir")
        left_file = get_str(entry, "left-file")
        right_dir = get_str(entry, "right-dir")
        right_file = get_str(entry, "right-file")
        if None in (left_dir, left_file, right_dir, right_file):
            continue
        session.dir_stack.push(left_dir, left_file, right_dir, right_file)


def _load_trash(session: Session, root: JsonObject) -> None:
    for entry in array_objects(get_array(root, "trash")):
        trashed = get_str(entry, "trashed")
        original = get_str(entry, "original")
        if trashed is not None and original is not None:
            session.trash.add_entry(original, trashed)


def _load_history(session: Session, root: JsonObject, node: str, hist: HistoryList) -> None:
    for item in array_strings(get_array(root, node)):
        # Grow instead of losing entries saved with a larger history size.
        if hist.is_full():
            session.resize_histories(session.history_len + 1)
        hist.add(item)
