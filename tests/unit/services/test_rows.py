"""
Tests for row access and coercion helpers
"""

import math

import pytest

from chartforge.services.rows import (
    bucket_key, clean_number, distinct_in_order, field_value, is_blank, label_text, number_or,
    numeric_column, rows_as_dicts, sample_rows_for_charts, sort_labels, to_number, weight_of,
)


class TestFieldAccess:
    """Test safe row access"""

    def test_missing_field_is_none(self):
        assert field_value({"a": 1}, "b") is None

    def test_unbound_role_is_none(self):
        assert field_value({"a": 1}, None) is None

    def test_non_mapping_row_is_none(self):
        assert field_value(["a"], "a") is None

    @pytest.mark.parametrize("value,expected", [(None, True), ("", True), ("  ", True), (0, False), ("x", False)])
    def test_is_blank(self, value, expected):
        assert is_blank(value) is expected


class TestNumericCoercion:
    """Test numeric coercion of row values"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (3, 3.0),
            ("4.5", 4.5),
            (" 7 ", 7.0),
            (True, 1.0),
            (False, 0.0),
            ("abc", None),
            ("", None),
            (None, None),
            (float("nan"), None),
            (math.inf, None),
            ([1], None),
        ],
    )
    def test_to_number(self, value, expected):
        assert to_number(value) == expected

    def test_number_or_defaults(self):
        assert number_or("abc") == 0.0
        assert number_or(None, 5.0) == 5.0

    def test_weight_of(self):
        """Test that absent weights count as 1 while a real zero stays zero"""
        assert weight_of(None) == 1.0
        assert weight_of("n/a") == 1.0
        assert weight_of(0) == 0.0
        assert weight_of("2.5") == 2.5

    def test_numeric_column_skips_non_numbers(self):
        rows = [{"v": 1}, {"v": "x"}, {"v": None}, {"v": "3"}, {}]
        assert numeric_column(rows, "v") == [1.0, 3.0]


class TestLabels:
    """Test label helpers"""

    def test_label_text(self):
        assert label_text(None) == "null"
        assert label_text(2.0) == "2"
        assert label_text(2.5) == "2.5"
        assert label_text("east") == "east"

    def test_clean_number(self):
        assert clean_number(15.0) == 15
        assert isinstance(clean_number(15.0), int)
        assert clean_number(1.5) == 1.5

    def test_bucket_key_separates_booleans(self):
        """Test that True and 1 do not share a bucket"""
        assert bucket_key(True) != bucket_key(1)
        assert bucket_key(1) == bucket_key(1.0)

    def test_bucket_key_handles_unhashable_values(self):
        assert bucket_key([1, 2]) == bucket_key([1, 2])

    def test_distinct_in_order(self):
        assert distinct_in_order(["b", "a", "b", None, "a", None]) == ["b", "a", None]

    def test_sort_labels_mixed_types(self):
        """Test that numbers sort before strings and None goes last"""
        assert sort_labels(["b", 10, None, 2, "a", 2]) == [2, 10, "a", "b", None]


class TestSampling:
    """Test dataset sampling"""

    def test_small_dataset_unchanged(self):
        rows = [{"i": i} for i in range(5)]
        assert sample_rows_for_charts(rows, max_points=10) == rows

    def test_stride_sampling(self):
        """Test that every ceil(n / max)-th row is kept, starting at the first"""
        rows = [{"i": i} for i in range(10)]

        sampled = sample_rows_for_charts(rows, max_points=4)

        assert [row["i"] for row in sampled] == [0, 3, 6, 9]

    def test_default_limit_comes_from_settings(self, monkeypatch):
        from chartforge.config.settings import clear_settings_cache

        monkeypatch.setenv("MAX_CHART_DATA_POINTS", "2")
        clear_settings_cache()
        rows = [{"i": i} for i in range(5)]

        assert [row["i"] for row in sample_rows_for_charts(rows)] == [0, 3]

    def test_rows_as_dicts(self):
        assert rows_as_dicts([{"a": 1}, "junk", None, {"b": 2}]) == [{"a": 1}, {"b": 2}]
