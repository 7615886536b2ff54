"""
Part-to-whole generators: pie, doughnut, polar area, radial bar/column,
funnel and gauge
"""

from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from chartforge.models.schemas import Aggregation, ChartKind, ChartTemplate
from chartforge.services.aggregator import aggregate
from chartforge.services.colors import color_for
from chartforge.services.generators.common import ChartData, per_point_dataset
from chartforge.services.rows import Row, field_value, label_text, numeric_column, weight_of

logger = structlog.get_logger(__name__)

GAUGE_TRACK_SCHEME = "gray"


def category_totals(
    template: ChartTemplate,
    rows: Sequence[Row],
    default_aggregation: Optional[Aggregation] = None,
) -> List[Tuple[str, float]]:
    """
    (label, value) per x category in first-seen order.

    With an aggregation this is the aggregator's output. Without one, each
    row adds its y value to its category, or 1 when y is absent or not
    numeric, so the chart degrades to occurrence counting. Rows without an
    x value are skipped in that mode.
    """
    method = template.aggregation or default_aggregation
    if Aggregation.reduces(method):
        return [
            (label_text(point.x), point.y)
            for point in aggregate(rows, template.x_axis, template.y_axis, method)
        ]

    totals: Dict[str, float] = {}
    for row in rows:
        x = field_value(row, template.x_axis)
        if x is None:
            continue
        key = label_text(x)
        totals[key] = totals.get(key, 0.0) + weight_of(field_value(row, template.y_axis))
    return list(totals.items())


def build_slices(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Pie, doughnut, polar area, radial bar and radial column.

    Pie and doughnut slices use opaque palette colors; the radial kinds use
    a translucent fill with an opaque border.
    """
    totals = category_totals(template, rows)
    labels = [label for label, _ in totals]
    data = [value for _, value in totals]

    alpha = 1 if template.kind in (ChartKind.PIE, ChartKind.DOUGHNUT) else 0.7
    label = template.y_axis or template.x_axis
    dataset = per_point_dataset(label, data, template.color_scheme, alpha, borderWidth=2)
    return {"labels": labels, "datasets": [dataset]}


def build_funnel(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """Stages sorted largest first; ties keep their first-seen order"""
    totals = category_totals(template, rows, default_aggregation=Aggregation.SUM)
    totals = sorted(totals, key=lambda item: -item[1])

    labels = [label for label, _ in totals]
    data = [value for _, value in totals]
    dataset = per_point_dataset("Funnel Data", data, template.color_scheme, 0.7, borderWidth=2)
    return {"labels": labels, "datasets": [dataset]}


def gauge_percentage(current: float, low: float, high: float) -> float:
    """Position of current within [low, high] as a 0..100 percentage"""
    span = high - low
    if span <= 0:
        return 0.0
    return min(max((current - low) / span * 100, 0.0), 100.0)


def build_gauge(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Half-doughnut gauge of the average yAxis value.

    The value is placed within [min, max] (defaults 0 and 100) and emitted
    as two slices: the filled percentage and the remaining track.
    """
    values = numeric_column(rows, template.y_axis)
    current = sum(values) / len(values) if values else 0.0
    low = template.gauge_min if template.gauge_min is not None else 0.0
    high = template.gauge_max if template.gauge_max is not None else 100.0

    if high <= low:
        logger.warning("Gauge range is empty", min=low, max=high)

    percentage = gauge_percentage(current, low, high)
    scheme = template.color_scheme
    dataset = {
        "label": template.y_axis,
        "data": [percentage, 100 - percentage],
        "backgroundColor": [color_for(scheme, 0, 0.8), color_for(GAUGE_TRACK_SCHEME, 0, 0.2)],
        "borderColor": [color_for(scheme, 0), color_for(GAUGE_TRACK_SCHEME, 0)],
        "borderWidth": 2,
        "cutout": "70%",
        "circumference": 180,
        "rotation": 270,
        "currentValue": current,
        "minValue": low,
        "maxValue": high,
    }
    return {"labels": [template.y_axis or "Value", "Remaining"], "datasets": [dataset]}
