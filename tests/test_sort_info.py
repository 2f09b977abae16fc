from vinfo.state.view import (
    DEFAULT_SORT_KEY,
    SORT_KEY_MAX,
    SORT_SLOTS,
    format_sort_info,
    parse_sort_info,
)


def padded(*keys):
    return list(keys) + [0] * (SORT_SLOTS - len(keys))


def test_parse_keeps_signs_and_zero_fills():
    assert parse_sort_info("1,-2,3") == padded(1, -2, 3)


def test_parse_empty_falls_back_to_default():
    assert parse_sort_info("") == padded(DEFAULT_SORT_KEY)
    assert parse_sort_info("junk") == padded(DEFAULT_SORT_KEY)


def test_parse_clamps_out_of_range_keys():
    assert parse_sort_info("999") == padded(SORT_KEY_MAX)
    assert parse_sort_info("-999") == padded(-SORT_KEY_MAX)


def test_parse_skips_junk_between_keys():
    assert parse_sort_info("4,x,5") == padded(4, 5)
    assert parse_sort_info("4,,5") == padded(4, 5)
    assert parse_sort_info("1;2") == padded(1, 2)
    assert parse_sort_info("1 -2") == padded(1, -2)
    assert parse_sort_info("x3y-4z") == padded(3, -4)
    assert parse_sort_info("1-2") == padded(1, -2)


def test_parse_never_exceeds_slot_count():
    line = ",".join(["1"] * (SORT_SLOTS + 5))
    assert len(parse_sort_info(line)) == SORT_SLOTS


def test_format_stops_at_first_empty_slot():
    assert format_sort_info(padded(3, -7)) == "3,-7"
    assert format_sort_info(padded(DEFAULT_SORT_KEY)) == str(DEFAULT_SORT_KEY)
    assert parse_sort_info(format_sort_info(padded(-1, 9, 22))) == padded(-1, 9, 22)
