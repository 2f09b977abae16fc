from pathlib import Path

import pytest

from vinfo.errors import DocumentError
from vinfo.persistence.document import (
    array_object_at,
    array_objects,
    array_strings,
    decode_document,
    encode_document,
    get_array,
    get_bool,
    get_int,
    get_number,
    get_object,
    get_str,
    read_document,
    write_document,
)


def test_accessors_return_none_on_type_mismatch():
    doc = {"flag": True, "n": 3, "f": 2.5, "s": "text", "a": [1], "o": {}}

    assert get_bool(doc, "flag") is True
    assert get_bool(doc, "n") is None
    assert get_number(doc, "flag") is None  # bool isn't a number
    assert get_number(doc, "f") == 2.5
    assert get_int(doc, "f") == 2
    assert get_str(doc, "s") == "text"
    assert get_str(doc, "a") is None
    assert get_array(doc, "a") == [1]
    assert get_object(doc, "o") == {}
    assert get_object(doc, "missing") is None


def test_accessors_tolerate_missing_parent():
    assert get_str(None, "x") is None
    assert get_array(get_object({}, "gtabs"), "panes") is None
    assert array_objects(None) == []
    assert array_object_at([{"a": 1}], 3) is None


def test_array_helpers_skip_foreign_elements():
    arr = [{"a": 1}, "str", 5, {"b": 2}]
    assert array_objects(arr) == [{"a": 1}, {"b": 2}]
    assert array_strings(arr) == ["str"]
    assert array_object_at(arr, 1) is None


def test_encode_keeps_key_order_and_unicode():
    text = encode_document({"z": 1, "a": "ü"})
    assert text.index('"z"') < text.index('"a"')
    assert "ü" in text
    assert decode_document(text) == {"z": 1, "a": "ü"}


def test_decode_rejects_garbage_and_non_objects():
    with pytest.raises(DocumentError):
        decode_document("{not json")
    with pytest.raises(DocumentError):
        decode_document("[1, 2]")


def test_read_document_returns_none_for_missing_or_corrupt(tmp_path: Path):
    assert read_document(tmp_path / "absent.json") is None

    bad = tmp_path / "bad.json"
    bad.write_text("{\"gtabs\": [", encoding="utf-8")
    assert read_document(bad) is None


def test_write_then_read(tmp_path: Path):
    path = tmp_path / "vinfo.json"
    write_document(path, {"color-scheme": "dark"})
    assert path.read_text(encoding="utf-8").endswith("\n")
    assert read_document(path) == {"color-scheme": "dark"}


def test_non_finite_numbers_count_as_absent():
    doc = decode_document('{"big": 1e400, "nan": NaN, "ninf": -Infinity, "ok": 7.0}')
    assert get_number(doc, "big") is None
    assert get_number(doc, "nan") is None
    assert get_int(doc, "ninf") is None
    assert get_int(doc, "ok") == 7
