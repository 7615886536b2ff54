"""
Cartesian XY generators: line, bar, area, step, spline, scatter, bubble,
mixed, histogram, dot plot and lollipop
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from chartforge.config.settings import get_settings
from chartforge.models.schemas import Aggregation, ChartKind, ChartTemplate
from chartforge.services.aggregator import aggregate
from chartforge.services.generators.common import ChartData, empty_chart, styled_dataset
from chartforge.services.rows import (
    Row, bucket_key, distinct_in_order, field_value, is_blank, label_text, number_or, numeric_column, sort_labels,
)
from chartforge.services.statistics import histogram_bins

logger = structlog.get_logger(__name__)

# (x, y, group) triples before they are laid out against the label set
Point = Tuple[Any, float, Any]


def xy_points(
    template: ChartTemplate,
    rows: Sequence[Row],
    y_field: Optional[str],
    group_field: Optional[str] = None,
    aggregation: Optional[Aggregation] = None,
) -> List[Point]:
    """
    Points for one y column, aggregated when an aggregation is requested.

    Without aggregation rows map straight to points and any row with a
    missing x or y is dropped. Non-numeric y values read as 0.
    """
    method = aggregation or template.aggregation
    if Aggregation.reduces(method):
        return [
            (point.x, point.y, point.group)
            for point in aggregate(rows, template.x_axis, y_field, method, group_field)
        ]

    points = []
    for row in rows:
        x = field_value(row, template.x_axis)
        y = field_value(row, y_field)
        if is_blank(x) or is_blank(y):
            continue
        group = field_value(row, group_field) if group_field else None
        points.append((x, number_or(y), group))
    return points


def layout_series(points: List[Point], labels: List[Any], group: Any = None, grouped: bool = False) -> List[float]:
    """Values aligned to labels, first point wins, zero for missing labels"""
    lookup: Dict[Any, float] = {}
    for x, y, point_group in points:
        if grouped and bucket_key(point_group) != bucket_key(group):
            continue
        lookup.setdefault(bucket_key(x), y)
    return [lookup.get(bucket_key(label), 0.0) for label in labels]


def _series_style(kind: Optional[ChartKind], scheme: Optional[str], index: int, label: Any, data: List[float]):
    if kind in (ChartKind.AREA, ChartKind.AREA_SPLINE, ChartKind.STREAMGRAPH):
        dataset = styled_dataset(label, data, scheme, index, 0.3, fill=True, tension=0.4)
        if kind == ChartKind.AREA_SPLINE:
            dataset.update(tension=0.6, cubicInterpolationMode="monotone")
        return dataset
    if kind == ChartKind.LINE:
        return styled_dataset(label, data, scheme, index, tension=0.4)
    if kind == ChartKind.SPLINE:
        return styled_dataset(label, data, scheme, index, tension=0.6, cubicInterpolationMode="monotone")
    if kind == ChartKind.STEP:
        return styled_dataset(label, data, scheme, index, tension=0, stepped="before")
    if kind == ChartKind.DOT_PLOT:
        return styled_dataset(
            label, data, scheme, index, 0.8,
            borderWidth=2, pointRadius=6, pointHoverRadius=8, showLine=False,
        )
    return styled_dataset(label, data, scheme, index)


def build_xy_chart(template: ChartTemplate, rows: Sequence[Row], aggregation: Optional[Aggregation] = None) -> ChartData:
    """
    Labelled XY series for line, bar, horizontal bar, area, step and spline.

    Labels are the sorted distinct x values. With a groupBy different from
    the x column there is one series per group, in the order groups first
    appear in the rows, each zero-filled to the full label set.
    """
    kind = template.kind
    scheme = template.color_scheme
    group_field = template.group_by if template.has_distinct_group else None

    points = xy_points(template, rows, template.y_axis, group_field, aggregation)
    labels = sort_labels(x for x, _, _ in points)

    if group_field:
        groups = distinct_in_order(field_value(row, group_field) for row in rows)
        datasets = [
            _series_style(kind, scheme, index, label_text(group), layout_series(points, labels, group, grouped=True))
            for index, group in enumerate(groups)
        ]
    else:
        datasets = [_series_style(kind, scheme, 0, template.y_axis, layout_series(points, labels))]

    return {"labels": labels, "datasets": datasets}


def build_dot_plot(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """Dots at the per-category average unless another aggregation is given"""
    return build_xy_chart(template, rows, aggregation=template.aggregation or Aggregation.AVG)


def build_lollipop(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """A stem line and a head marker over the same per-category values"""
    scheme = template.color_scheme
    points = xy_points(template, rows, template.y_axis)
    labels = sort_labels(x for x, _, _ in points)
    data = layout_series(points, labels)

    stem = styled_dataset(
        f"{template.y_axis} (Stem)", data, scheme,
        type="line", borderWidth=3, pointRadius=0, tension=0,
    )
    stem["backgroundColor"] = "transparent"
    head = styled_dataset(
        f"{template.y_axis} (Head)", list(data), scheme, 0, 0.8,
        type="scatter", borderWidth=2, pointRadius=8, pointHoverRadius=10,
    )
    return {"labels": labels, "datasets": [stem, head]}


def build_mixed(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Bars for yAxis on the primary axis plus a line for yAxis2 on the
    secondary axis. The line is only emitted when yAxis2 is bound and has data.
    """
    scheme = template.color_scheme
    primary = xy_points(template, rows, template.y_axis)
    labels = sort_labels(x for x, _, _ in primary)

    datasets = [
        styled_dataset(
            template.y_axis, layout_series(primary, labels), scheme, 0, 0.7,
            type="bar", yAxisID="y",
        )
    ]

    if template.y_axis2:
        secondary = xy_points(template, rows, template.y_axis2)
        if secondary:
            datasets.append(
                styled_dataset(
                    template.y_axis2, layout_series(secondary, labels), scheme, 1, 0.2,
                    type="line", tension=0.4, yAxisID="y1",
                )
            )

    return {"labels": labels, "datasets": datasets}


def build_scatter(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    data = []
    for row in rows:
        x = field_value(row, template.x_axis)
        y = field_value(row, template.y_axis)
        if is_blank(x) or is_blank(y):
            continue
        data.append({"x": number_or(x), "y": number_or(y)})

    dataset = styled_dataset(f"{template.y_axis} vs {template.x_axis}", data, template.color_scheme)
    return {"datasets": [dataset]}


def bubble_radius(value: Any) -> float:
    """Bubble size clamped to [3, 20]; missing, zero or non-numeric sizes read as 5"""
    size = number_or(value) or 5.0
    return max(3.0, min(20.0, size))


def build_bubble(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    size_field = template.size_axis
    data = []
    for row in rows:
        x = field_value(row, template.x_axis)
        y = field_value(row, template.y_axis)
        if is_blank(x) or is_blank(y):
            continue
        if size_field and is_blank(field_value(row, size_field)):
            continue
        data.append({
            "x": number_or(x),
            "y": number_or(y),
            "r": bubble_radius(field_value(row, size_field)) if size_field else 5.0,
        })

    label = f"{template.y_axis} vs {template.x_axis}"
    if size_field:
        label += f" (size: {size_field})"
    dataset = styled_dataset(label, data, template.color_scheme, 0, 0.6, borderWidth=1)
    return {"datasets": [dataset]}


def build_histogram(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Equal-width frequency bins over the numeric values of xAxis (yAxis when
    no x column is bound).
    """
    field = template.x_axis or template.y_axis
    values = numeric_column(rows, field)
    if not values:
        logger.debug("Histogram has no numeric values", field=field)
        return empty_chart()

    bins = template.bins if template.bins and template.bins > 0 else get_settings().default_bins
    histogram = histogram_bins(values, bins)

    dataset = styled_dataset(
        f"Distribution of {field}",
        [b.count for b in histogram],
        template.color_scheme, 0, 0.7,
        borderWidth=1,
    )
    return {"labels": [b.label for b in histogram], "datasets": [dataset]}
