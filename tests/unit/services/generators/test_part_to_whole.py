"""
Tests for part-to-whole generators
"""

import pytest

from chartforge.models.schemas import ChartTemplate
from chartforge.services.colors import COLOR_PALETTES
from chartforge.services.generators.part_to_whole import (
    build_funnel, build_gauge, build_slices, category_totals, gauge_percentage,
)


def template(**fields):
    return ChartTemplate.model_validate(fields)


class TestCategoryTotals:
    """Test category totals"""

    def test_weighted_counting_without_aggregation(self, sales_rows):
        totals = category_totals(template(chartType="pie", xAxis="region", yAxis="sales"), sales_rows)

        assert totals == [("east", 15.0), ("west", 20.0)]

    def test_counts_when_y_is_absent(self):
        rows = [{"c": "a"}, {"c": "b"}, {"c": "a"}, {"c": None}]

        totals = category_totals(template(chartType="pie", xAxis="c"), rows)

        assert totals == [("a", 2.0), ("b", 1.0)]

    def test_aggregation_is_used_when_requested(self, sales_rows):
        totals = category_totals(
            template(chartType="pie", xAxis="region", yAxis="sales", aggregation="max"), sales_rows
        )

        assert totals == [("east", 10.0), ("west", 20.0)]


class TestSlices:
    """Test pie-like charts"""

    def test_pie_uses_opaque_colors(self, sales_rows):
        chart = build_slices(template(chartType="pie", xAxis="region", yAxis="sales"), sales_rows)

        assert chart["labels"] == ["east", "west"]
        assert chart["datasets"][0]["data"] == [15, 20]
        assert chart["datasets"][0]["backgroundColor"] == list(COLOR_PALETTES["blue"][:2])

    def test_polar_area_is_translucent(self, sales_rows):
        chart = build_slices(template(chartType="polarArea", xAxis="region", yAxis="sales"), sales_rows)

        assert all(color.startswith("rgba(") for color in chart["datasets"][0]["backgroundColor"])


class TestFunnel:
    """Test funnel ordering"""

    def test_values_are_non_increasing(self):
        rows = [
            {"stage": "visit", "n": 100},
            {"stage": "signup", "n": 40},
            {"stage": "cart", "n": 60},
            {"stage": "visit", "n": 50},
            {"stage": "paid", "n": 60},
        ]

        chart = build_funnel(template(chartType="funnel", xAxis="stage", yAxis="n"), rows)
        data = chart["datasets"][0]["data"]

        assert chart["labels"] == ["visit", "cart", "paid", "signup"]
        assert all(a >= b for a, b in zip(data, data[1:]))


class TestGauge:
    """Test gauge"""

    @pytest.mark.parametrize(
        "current,low,high,expected",
        [(50, 0, 100, 50), (150, 0, 100, 100), (-5, 0, 100, 0), (5, 10, 10, 0), (25, 0, 200, 12.5)],
    )
    def test_gauge_percentage(self, current, low, high, expected):
        assert gauge_percentage(current, low, high) == expected

    def test_two_slices_from_average(self):
        rows = [{"score": 40}, {"score": 60}, {"score": "n/a"}]

        chart = build_gauge(template(chartType="gauge", yAxis="score", min=0, max=200), rows)
        dataset = chart["datasets"][0]

        assert dataset["data"] == [25, 75]
        assert dataset["currentValue"] == 50
        assert dataset["minValue"] == 0
        assert dataset["maxValue"] == 200
        assert chart["labels"] == ["score", "Remaining"]

    def test_default_range(self):
        chart = build_gauge(template(chartType="gauge", yAxis="score"), [{"score": 30}])

        assert chart["datasets"][0]["data"] == [30, 70]

    def test_empty_range_reads_zero(self):
        chart = build_gauge(template(chartType="gauge", yAxis="score", min=5, max=5), [{"score": 30}])

        assert chart["datasets"][0]["data"] == [0, 100]
