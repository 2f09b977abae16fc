from vinfo.config import InfoFlag, all_info_flags
from vinfo.persistence.document import decode_document, encode_document
from vinfo.persistence.loader import load_state
from vinfo.persistence.serializer import serialize_state
from vinfo.state import Session
from vinfo.state.matchers import Filter, Matchers


def populate(s: Session) -> None:
    s.apply_option("history=20")
    s.apply_option("vicmd=nvim -p")
    s.apply_option("nowrap")

    left, right = s.left, s.right
    left.save_position(s.history_len, "/a", "x", 1)
    left.curr_dir, left.curr_file, left.rel_pos = "/b", "y", 4
    left.invert = False
    left.hide_dot = False
    left.manual_filter = Filter("foo")
    left.auto_filter.set("bar")
    left.options.apply("number")
    left.sort = [3, -1] + [0] * (len(left.sort) - 2)
    right.curr_dir, right.curr_file = "/r", "z"
    right.options.apply("numberwidth=6")

    s.layout.preview = True
    s.layout.split = "h"
    s.layout.splitter_pos = 33
    s.layout.window_count = 1
    s.activate(1)

    s.assocs.set_programs(Matchers.parse("{*.pdf}"), "{PDF viewer}zathura,,x,evince")
    s.assocs.set_programs(Matchers.parse("{*.png}"), "feh", for_x=True)
    s.assocs.set_viewers(Matchers.parse("/\\.md$/i"), "bat")
    s.assocs.add_builtin(Matchers.parse("{*.zip}"), "archive")

    s.commands.define("hi", "echo hi")
    s.marks.setup_user_mark("a", "/d", "f", 100)
    s.marks.set("<", "/sel", "start")
    s.bookmarks.setup("/p", "t1,t2", 200)
    s.bookmarks.add("/gone", "t")
    s.bookmarks.remove("/gone")
    s.registers.append("a", "/x")
    s.registers.append("b", "/y")
    s.dir_stack.push("/l", "lf", "/r", "rf")
    s.trash.add_entry("/orig", "/trash/000_orig")
    s.histories["cmd"].add("ls")
    s.histories["search"].add("needle")
    s.histories["prompt"].add("yes")
    s.histories["filter"].add("*.c")
    s.use_term_multiplexer = True
    s.color_scheme = "dark"


def roundtrip(s: Session, config) -> Session:
    doc = decode_document(encode_document(serialize_state(s)))
    restored = Session(config)
    load_state(restored, doc)
    return restored


def test_every_section_survives_a_roundtrip(full_session, config):
    populate(full_session)
    s = roundtrip(full_session, config)

    assert s.history_len == 20
    assert s.options.get("vicmd") == "nvim -p"
    assert s.options.get("wrap") is False
    assert s.info_flags == all_info_flags()

    assert [e.dir for e in s.left.history] == ["/a", "/b"]
    assert s.left.history[1].rel_pos == 4
    assert s.left.curr_dir == "/b"
    assert s.right.curr_dir == "/r"
    assert s.left.invert is False and s.left.hide_dot is False
    assert s.left.manual_filter.expr == "foo"
    assert s.left.prev_manual_filter == "foo"
    assert s.left.auto_filter.expr == "bar"
    assert s.left.options.get("number") is True
    assert s.right.options.get("number") is False
    assert s.right.options.get("numberwidth") == 6
    assert s.left.sort[:3] == [3, -1, 0]

    assert s.layout.preview is True
    assert s.layout.split == "h"
    assert s.layout.splitter_pos == 33
    assert s.layout.window_count == 1
    assert s.active_index == 1

    assert s.assocs.filetypes.exists("{*.pdf}", "{PDF viewer}zathura,,x,evince")
    assert len(s.assocs.filetypes) == 1
    assert s.assocs.xfiletypes.exists("{*.png}", "feh")
    assert s.assocs.viewers.exists("/\\.md$/i", "bat")

    assert s.commands.get("hi") == "echo hi"
    assert s.marks.get("a").timestamp == 100
    assert s.marks.get("<") is None
    assert s.bookmarks.get("/p").tags == "t1,t2"
    assert s.bookmarks.get("/gone") is None
    assert s.registers.get("a") == ["/x"]
    assert s.registers.get("b") == ["/y"]
    assert [(e.left_dir, e.right_file) for e in s.dir_stack.entries()] == [("/l", "rf")]
    assert s.trash.has_entry("/orig", "/trash/000_orig")
    assert s.histories["cmd"].entries() == ["ls"]
    assert s.histories["search"].entries() == ["needle"]
    assert s.histories["prompt"].entries() == ["yes"]
    assert s.histories["filter"].entries() == ["*.c"]
    assert s.use_term_multiplexer is True
    assert s.color_scheme == "dark"


def test_unset_categories_are_left_out(session):
    populate(session)
    session.set_info_flags(InfoFlag.BOOKMARKS)

    doc = serialize_state(session)

    assert set(doc) == {"gtabs", "bmarks", "trash"}
    assert doc["bmarks"] == {"/p": {"tags": "t1,t2", "ts": 200}}
    ptab = doc["gtabs"][0]["panes"][0]["ptabs"][0]
    assert ptab == {}
    assert "active-pane" not in doc["gtabs"][0]


def test_empty_trash_is_not_written(session):
    assert "trash" not in serialize_state(session)


def test_options_list_every_option(full_session):
    doc = serialize_state(full_session)
    names = [opt.name for opt in full_session.options]
    assert len(doc["options"]) == len(names)
    assert "nohlsearch" not in doc["options"] and "hlsearch" in doc["options"]


def test_reread_keeps_focus_and_location(full_session, config):
    populate(full_session)
    doc = serialize_state(full_session)

    s = Session(config)
    s.left.curr_dir = "/stay"
    load_state(s, doc, reread=True)

    assert s.active_index == 0
    assert s.layout.window_count == 2
    assert s.left.curr_dir == "/stay"
    assert s.layout.preview is True


def test_long_histories_grow_capacity(session):
    dirs = [{"dir": f"/d{i}", "file": "f", "relpos": -3} for i in range(25)]
    doc = {
        "cmd-hist": [f"cmd{i}" for i in range(20)],
        "gtabs": [{"panes": [{"ptabs": [{"history": dirs}]}, {"ptabs": [{}]}]}],
    }
    load_state(session, doc)

    assert len(session.left.history) == 25
    assert session.left.history[0].rel_pos == 0
    assert session.histories["cmd"].entries() == [f"cmd{i}" for i in range(20)]
    assert session.history_len >= 25


def test_malformed_fields_are_skipped(session):
    doc = {
        "color-scheme": 5,
        "use-term-multiplexer": "yes",
        "options": ["nosuchoption", "history=x", 7, "history=12"],
        "assocs": [{"matchers": "{unclosed", "cmd": "x"}, {"matchers": "{*.c}"}, "junk"],
        "cmds": {"1bad": "x", "ok": "echo", "num": 3},
        "marks": {"<": {"dir": "/", "file": "f", "ts": 1}, "a": {"dir": "/", "file": "f", "ts": True}},
        "bmarks": {"/p": {"tags": ",,", "ts": 1}, "/q": {"tags": "t", "ts": 2}},
        "regs": {"?": ["/x"], "c": ["/y", 5]},
        "dir-stack": [{"left-dir": "/l"}],
        "trash": [{"trashed": "/t"}],
        "gtabs": [
            {
                "active-pane": 7,
                "panes": [
                    {"ptabs": [{"filters": {"manual": "(", "auto": "[", "invert": 1}, "sorting": 3}]},
                ],
            }
        ],
    }
    load_state(session, doc)

    assert session.color_scheme == "default"
    assert session.use_term_multiplexer is False
    assert session.history_len == 12
    assert len(session.assocs.filetypes) == 0
    assert "ok" in session.commands and "1bad" not in session.commands
    assert session.marks.get("<") is None and session.marks.get("a") is None
    assert session.bookmarks.get("/p") is None
    assert session.bookmarks.get("/q").tags == "t"
    assert session.registers.get("c") == ["/y"]
    assert len(session.dir_stack) == 0
    assert len(session.trash) == 0
    assert session.active_index == 0
    assert session.left.manual_filter.expr == ""
    assert session.left.prev_manual_filter == ""
    assert session.left.auto_filter.expr == ""
    assert session.left.invert is True


def _ptab_doc(**ptab):
    history = [{"dir": "/saved", "file": "f", "relpos": 0}]
    return {"gtabs": [{"panes": [{"ptabs": [dict(history=history, **ptab)]}, {"ptabs": [{}]}]}]}


def test_location_is_kept_unless_restoring_is_requested(session):
    session.left.curr_dir = "/here"
    load_state(session, _ptab_doc(**{"restore-last-location": False}))
    assert session.left.curr_dir == "/here"
    assert session.left.history_contains("/saved")

    load_state(session, _ptab_doc())
    assert session.left.curr_dir == "/here"

    load_state(session, _ptab_doc(**{"restore-last-location": True}))
    assert session.left.curr_dir == "/saved"


def test_non_finite_numbers_do_not_break_loading(session):
    doc = decode_document(
        '{"gtabs": [{"active-pane": NaN, "splitter": {"pos": 1e400},'
        ' "panes": [{"ptabs": [{"history": [{"dir": "/x", "file": "f", "relpos": 1e400},'
        ' {"dir": "/y", "file": "g", "relpos": 2}]}]}]}],'
        ' "marks": {"a": {"dir": "/", "file": "f", "ts": NaN}, "b": {"dir": "/", "file": "f", "ts": 5}},'
        ' "bmarks": {"/p": {"tags": "t", "ts": Infinity}}}'
    )
    load_state(session, doc)

    assert [e.dir for e in session.left.history] == ["/y"]
    assert session.layout.splitter_pos == -1
    assert session.active_index == 0
    assert session.marks.get("a") is None
    assert session.marks.get("b").timestamp == 5
    assert session.bookmarks.get("/p") is None
