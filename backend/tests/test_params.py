"""Tests for lenient query-string parsing."""

import pytest

from bjjlib.utils.params import is_storable_id, parse_id_list, parse_positive_int


class TestParsePositiveInt:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, 7),
            ("3", 3),
            (" 12 ", 12),
            ("abc", 7),
            ("", 7),
            ("0", 7),
            ("-4", 7),
            ("2.5", 7),
            ("99999999999999999999", 2**31 - 1),
        ],
    )
    def test_falls_back_to_default(self, raw, expected) -> None:
        assert parse_positive_int(raw, 7) == expected


class TestParseIdList:
    def test_none_and_empty(self) -> None:
        assert parse_id_list(None) == []
        assert parse_id_list("") == []

    def test_malformed_entries_dropped(self) -> None:
        assert parse_id_list("1,x,,3") == [1, 3]

    def test_duplicates_keep_first_position(self) -> None:
        assert parse_id_list("3, 1,3,2,1") == [3, 1, 2]

    def test_nothing_valid(self) -> None:
        assert parse_id_list("a,b") == []

    def test_out_of_range_ids_kept(self) -> None:
        assert parse_id_list("99999999999999999999,-2") == [99999999999999999999, -2]


class TestIsStorableId:
    @pytest.mark.parametrize(
        "value, expected",
        [(1, True), (2**31 - 1, True), (0, False), (-3, False), (2**31, False)],
    )
    def test_bounds(self, value, expected) -> None:
        assert is_storable_id(value) is expected
