import pytest

from vinfo.errors import StateError
from vinfo.state import BookmarkStore, DirStack, HistoryList, MarkStore, RegisterStore, TrashStore, View


def test_user_marks_reject_special_names():
    marks = MarkStore()
    with pytest.raises(StateError):
        marks.setup_user_mark("<", "/", "f", 1)
    with pytest.raises(StateError):
        marks.setup_user_mark("ab", "/", "f", 1)
    marks.set("<", "/", "f")
    assert marks.get("<") is not None


def test_mark_age():
    marks = MarkStore()
    assert marks.is_older("a", 0)
    marks.setup_user_mark("a", "/", "f", 10)
    assert marks.is_older("a", 11)
    assert not marks.is_older("a", 10)
    marks.setup_user_mark("Z", "/", "f", 1)
    assert [m.name for m in marks.active()] == ["a", "Z"]


def test_bookmark_removal_leaves_tombstone():
    bmarks = BookmarkStore()
    bmarks.setup("/p", "t", 10)
    bmarks.remove("/p")
    assert bmarks.get("/p") is None
    assert bmarks.list() == []
    assert not bmarks.is_older("/p", 11)
    with pytest.raises(StateError):
        bmarks.add("/q", "")
    with pytest.raises(StateError):
        bmarks.setup("/q", "a,,b", 1)


def test_registers():
    regs = RegisterStore()
    regs.append("a", "/x")
    regs.append("a", "/x")
    regs.append("_", "/gone")
    regs.append('"', "/y")
    assert regs.get("a") == ["/x"]
    assert regs.get("_") == []
    assert list(regs.items()) == [('"', ["/y"]), ("a", ["/x"])]
    with pytest.raises(StateError):
        regs.append("A", "/x")


def test_history_list_dedups_and_trims():
    hist = HistoryList(3)
    for item in ("a", "b", "a", "c", "d"):
        hist.add(item)
    assert hist.entries() == ["a", "c", "d"]
    assert hist.is_full()
    hist.resize(2)
    assert hist.entries() == ["c", "d"]


def test_dir_stack_changes_after_freeze():
    stack = DirStack()
    stack.push("/l", "", "/r", "")
    stack.freeze()
    assert not stack.changed()
    stack.clear()
    assert stack.changed()
    stack.freeze()
    assert stack.pop() is None
    assert not stack.changed()


def test_trash_dedup():
    trash = TrashStore()
    assert trash.add_entry("/o", "/t")
    assert not trash.add_entry("/o", "/t")
    assert trash.has_entry("/o", "/t")
    trash.remove_entry("/t")
    assert len(trash) == 0


def test_view_history_rules():
    view = View("left")
    view.save_position(3, "/a", "1", 0)
    view.save_position(3, "/b", "2", 0)
    view.save_position(3, "/b", "3", 5)
    assert [(e.dir, e.file, e.rel_pos) for e in view.history] == [("/a", "1", 0), ("/b", "3", 5)]

    view.history_pos = 0
    view.save_position(3, "/c", "4", 0)
    assert [e.dir for e in view.history] == ["/a", "/c"]

    view.save_position(3, "/d", "", 0)
    view.save_position(3, "/e", "", 0)
    assert [e.dir for e in view.history] == ["/c", "/d", "/e"]
    assert view.history_pos == 2
    assert view.history_contains("/d")
    assert not view.history_contains("/a")
