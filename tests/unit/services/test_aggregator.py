"""
Tests for the aggregator
"""

import pytest

from chartforge.models.schemas import Aggregation
from chartforge.services.aggregator import AggregatedPoint, aggregate, reduce_values


ROWS = [
    {"region": "east", "sales": 10, "year": 2023},
    {"region": "west", "sales": 20, "year": 2023},
    {"region": "east", "sales": 5, "year": 2024},
    {"region": "east", "sales": "n/a", "year": 2024},
    {"region": "west", "sales": 7, "year": 2023},
]


class TestReduceValues:
    """Test reduce_values"""

    @pytest.mark.parametrize(
        "method,expected",
        [
            (Aggregation.SUM, 9.0),
            (Aggregation.AVG, 3.0),
            (Aggregation.MIN, 2.0),
            (Aggregation.MAX, 4.0),
            (Aggregation.COUNT, 5.0),
            (Aggregation.NONE, 3.0),
        ],
    )
    def test_methods(self, method, expected):
        assert reduce_values([3.0, 2.0, 4.0], 5, method) == expected

    def test_empty_bucket_is_zero(self):
        assert reduce_values([], 2, Aggregation.AVG) == 0.0
        assert reduce_values([], 2, Aggregation.COUNT) == 2.0


class TestAggregate:
    """Test aggregate"""

    def test_sum_in_first_seen_order(self):
        result = aggregate(ROWS, "region", "sales", Aggregation.SUM)

        assert [(p.x, p.y, p.count) for p in result] == [("east", 15.0, 3), ("west", 27.0, 2)]

    def test_non_numeric_values_count_as_zero(self):
        """Test that unparseable values enter the bucket as 0"""
        result = aggregate(ROWS, "region", "sales", "avg")

        assert result[0].y == 5.0
        assert result[0].count == 3

    @pytest.mark.parametrize(
        "method,expected",
        [(Aggregation.AVG, 5.0), (Aggregation.MIN, 0.0), (Aggregation.MAX, 10.0), (Aggregation.SUM, 10.0)],
    )
    def test_missing_and_non_numeric_values_reduce_as_zero(self, method, expected):
        rows = [{"x": "a", "y": "n/a"}, {"x": "a", "y": 10}]

        assert aggregate(rows, "x", "y", method)[0].y == expected

    def test_count(self):
        result = aggregate(ROWS, "region", "sales", Aggregation.COUNT)

        assert [p.y for p in result] == [3.0, 2.0]

    def test_grouped_keys(self):
        result = aggregate(ROWS, "region", "sales", Aggregation.SUM, group_field="year")

        assert [(p.x, p.group, p.y) for p in result] == [
            ("east", 2023, 10.0),
            ("west", 2023, 27.0),
            ("east", 2024, 5.0),
        ]

    def test_composite_keys_do_not_collide(self):
        """Test that joined-looking values stay separate buckets"""
        rows = [
            {"x": "A_B", "g": "", "y": 1},
            {"x": "A", "g": "B", "y": 2},
        ]

        result = aggregate(rows, "x", "y", Aggregation.SUM, group_field="g")

        assert len(result) == 2

    def test_null_x_is_its_own_bucket(self):
        rows = [{"x": None, "y": 1}, {"x": "a", "y": 2}, {"y": 3}]

        result = aggregate(rows, "x", "y", Aggregation.SUM)

        assert [(p.x, p.y) for p in result] == [(None, 4.0), ("a", 2.0)]

    def test_none_takes_first_value(self):
        result = aggregate(ROWS, "region", "sales", Aggregation.NONE)

        assert [p.y for p in result] == [10.0, 20.0]

    def test_deterministic(self):
        """Test that identical inputs give identical results"""
        first = aggregate(ROWS, "region", "sales", Aggregation.MAX, "year")
        second = aggregate(ROWS, "region", "sales", Aggregation.MAX, "year")

        assert first == second
        assert all(isinstance(point, AggregatedPoint) for point in first)
