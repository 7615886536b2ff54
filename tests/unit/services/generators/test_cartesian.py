"""
Tests for the Cartesian XY generators
"""

import pytest

from chartforge.models.schemas import ChartTemplate
from chartforge.services.generators.cartesian import (
    bubble_radius, build_bubble, build_dot_plot, build_histogram, build_lollipop, build_mixed,
    build_scatter, build_xy_chart,
)


def template(**fields):
    return ChartTemplate.model_validate(fields)


class TestBuildXYChart:
    """Test line/bar/area family"""

    def test_aggregated_bar(self, sales_rows):
        """Test that summed sales are laid out against sorted labels"""
        chart = build_xy_chart(
            template(chartType="bar", xAxis="region", yAxis="sales", aggregation="sum"), sales_rows
        )

        assert chart["labels"] == ["east", "west"]
        assert len(chart["datasets"]) == 1
        assert chart["datasets"][0]["data"] == [15, 20]
        assert chart["datasets"][0]["label"] == "sales"

    def test_labels_are_sorted(self):
        rows = [{"x": "c", "y": 1}, {"x": "a", "y": 2}, {"x": "b", "y": 3}]

        chart = build_xy_chart(template(chartType="line", xAxis="x", yAxis="y"), rows)

        assert chart["labels"] == ["a", "b", "c"]
        assert chart["datasets"][0]["data"] == [2, 3, 1]

    def test_grouped_series_are_zero_filled(self, quarterly_rows):
        """Test that every group series spans the full label set"""
        chart = build_xy_chart(
            template(chartType="bar", xAxis="quarter", yAxis="revenue", groupBy="product"), quarterly_rows
        )

        assert chart["labels"] == ["Q1", "Q2", "Q3"]
        assert [d["label"] for d in chart["datasets"]] == ["alpha", "beta", "gamma"]
        for dataset in chart["datasets"]:
            assert len(dataset["data"]) == len(chart["labels"])
        assert chart["datasets"][0]["data"] == [100, 120, 0]
        assert chart["datasets"][1]["data"] == [80, 0, 60]
        assert chart["datasets"][2]["data"] == [0, 0, 30]

    def test_group_order_is_first_seen(self):
        rows = [
            {"x": "a", "g": "zeta", "y": 1},
            {"x": "a", "g": "alpha", "y": 2},
        ]

        chart = build_xy_chart(template(chartType="bar", xAxis="x", yAxis="y", groupBy="g"), rows)

        assert [d["label"] for d in chart["datasets"]] == ["zeta", "alpha"]

    def test_group_equal_to_x_is_ungrouped(self, sales_rows):
        chart = build_xy_chart(
            template(chartType="bar", xAxis="region", yAxis="sales", groupBy="region", aggregation="sum"),
            sales_rows,
        )

        assert len(chart["datasets"]) == 1

    def test_rows_with_missing_x_or_y_are_dropped(self):
        rows = [{"x": "a", "y": 1}, {"x": None, "y": 2}, {"x": "b"}, {"x": "c", "y": "oops"}]

        chart = build_xy_chart(template(chartType="line", xAxis="x", yAxis="y"), rows)

        assert chart["labels"] == ["a", "c"]
        assert chart["datasets"][0]["data"] == [1, 0]

    @pytest.mark.parametrize(
        "kind,tension",
        [("line", 0.4), ("area", 0.4), ("step", 0), ("spline", 0.6), ("area-spline", 0.6)],
    )
    def test_interpolation(self, kind, tension, sales_rows):
        chart = build_xy_chart(template(chartType=kind, xAxis="region", yAxis="sales"), sales_rows)

        assert chart["datasets"][0]["tension"] == tension

    def test_area_is_filled(self, sales_rows):
        chart = build_xy_chart(template(chartType="area", xAxis="region", yAxis="sales"), sales_rows)

        assert chart["datasets"][0]["fill"] is True

    def test_step_is_stepped(self, sales_rows):
        chart = build_xy_chart(template(chartType="step", xAxis="region", yAxis="sales"), sales_rows)

        assert chart["datasets"][0]["stepped"] == "before"

    def test_unknown_columns_give_empty_series(self, sales_rows):
        chart = build_xy_chart(template(chartType="bar", xAxis="nope", yAxis="nada"), sales_rows)

        assert chart["labels"] == []
        assert chart["datasets"][0]["data"] == []


class TestDotPlotAndLollipop:
    """Test dot plot and lollipop"""

    def test_dot_plot_averages(self, sales_rows):
        chart = build_dot_plot(template(chartType="dot-plot", xAxis="region", yAxis="sales"), sales_rows)

        assert chart["datasets"][0]["data"] == [7.5, 20]
        assert chart["datasets"][0]["showLine"] is False

    def test_lollipop_has_stem_and_head(self, sales_rows):
        chart = build_lollipop(
            template(chartType="lollipop", xAxis="region", yAxis="sales", aggregation="sum"), sales_rows
        )

        stem, head = chart["datasets"]
        assert stem["type"] == "line"
        assert head["type"] == "scatter"
        assert stem["data"] == head["data"] == [15, 20]


class TestMixed:
    """Test mixed bar/line charts"""

    def test_secondary_series_on_second_axis(self):
        rows = [{"m": "jan", "rev": 10, "margin": 0.2}, {"m": "feb", "rev": 12, "margin": 0.3}]

        chart = build_mixed(template(chartType="mixed", xAxis="m", yAxis="rev", yAxis2="margin"), rows)

        bar, line = chart["datasets"]
        assert bar["yAxisID"] == "y"
        assert line["yAxisID"] == "y1"
        assert line["data"] == [0.3, 0.2]

    def test_no_secondary_without_y_axis2(self):
        rows = [{"m": "jan", "rev": 10}]

        chart = build_mixed(template(chartType="mixed", xAxis="m", yAxis="rev"), rows)

        assert len(chart["datasets"]) == 1


class TestScatterAndBubble:
    """Test point charts"""

    def test_scatter_points(self):
        rows = [{"a": 1, "b": 2}, {"a": "3", "b": None}, {"a": 4, "b": "x"}]

        chart = build_scatter(template(chartType="scatter", xAxis="a", yAxis="b"), rows)

        assert chart["datasets"][0]["data"] == [{"x": 1, "y": 2}, {"x": 4, "y": 0}]

    @pytest.mark.parametrize("value,expected", [(100, 20), (1, 3), (8, 8), (None, 5), ("big", 5)])
    def test_bubble_radius(self, value, expected):
        assert bubble_radius(value) == expected

    def test_bubble_without_size_column(self):
        rows = [{"a": 1, "b": 2}]

        chart = build_bubble(template(chartType="bubble", xAxis="a", yAxis="b"), rows)

        assert chart["datasets"][0]["data"] == [{"x": 1, "y": 2, "r": 5}]

    def test_bubble_sizes_are_clamped(self):
        rows = [{"a": 1, "b": 2, "s": 50}, {"a": 2, "b": 3, "s": 0.5}]

        chart = build_bubble(template(chartType="bubble", xAxis="a", yAxis="b", sizeAxis="s"), rows)

        assert [point["r"] for point in chart["datasets"][0]["data"]] == [20, 3]


class TestHistogram:
    """Test histogram bins"""

    def test_template_bins(self):
        rows = [{"v": v} for v in range(10)]

        chart = build_histogram(template(chartType="histogram", xAxis="v", bins=3), rows)

        assert len(chart["labels"]) == 3
        assert sum(chart["datasets"][0]["data"]) == 10

    def test_default_bins(self):
        rows = [{"v": v} for v in range(100)]

        chart = build_histogram(template(chartType="histogram", xAxis="v"), rows)

        assert len(chart["labels"]) == 10

    def test_falls_back_to_y_axis(self):
        rows = [{"v": 1}, {"v": 2}]

        chart = build_histogram(template(chartType="histogram", yAxis="v", bins=2), rows)

        assert chart["datasets"][0]["data"] == [1, 1]

    def test_no_numeric_values(self):
        chart = build_histogram(template(chartType="histogram", xAxis="v"), [{"v": "x"}])

        assert chart == {"labels": [], "datasets": []}
