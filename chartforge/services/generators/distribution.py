"""
Distribution generators: box plot, violin, ridgeline and streamgraph
"""

from typing import Any, List, Sequence, Tuple

from chartforge.models.schemas import Aggregation, ChartTemplate
from chartforge.services.generators.cartesian import build_xy_chart
from chartforge.services.generators.common import ChartData, cell_method, fill_cells, styled_dataset
from chartforge.services.rows import (
    Row, bucket_key, distinct_in_order, field_value, label_text, numeric_column, sort_labels, to_number,
)
from chartforge.services.statistics import five_number_summary, kernel_density
from chartforge.utils.errors import ChartUsageError


def grouped_values(rows: Sequence[Row], group_field: str, value_field: str) -> List[Tuple[Any, List[float]]]:
    """Numeric values of value_field per group, groups in first-seen order"""
    groups = distinct_in_order(field_value(row, group_field) for row in rows)
    values = {bucket_key(group): [] for group in groups}
    for row in rows:
        number = to_number(field_value(row, value_field))
        if number is not None:
            values[bucket_key(field_value(row, group_field))].append(number)
    return [(group, values[bucket_key(group)]) for group in groups]


def build_boxplot(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Five-number summary of yAxis, per groupBy value when one is bound.

    Each series carries a single {min, q1, median, q3, max} point.
    """
    scheme = template.color_scheme
    if template.group_by:
        groups = grouped_values(rows, template.group_by, template.y_axis)
        datasets = [
            styled_dataset(
                label_text(group), [five_number_summary(values).as_dict()], scheme, index, 0.7,
                borderWidth=1,
            )
            for index, (group, values) in enumerate(groups)
        ]
        return {"labels": [label_text(group) for group, _ in groups], "datasets": datasets}

    summary = five_number_summary(numeric_column(rows, template.y_axis))
    dataset = styled_dataset(template.y_axis, [summary.as_dict()], scheme, 0, 0.7, borderWidth=1)
    return {"labels": [template.y_axis], "datasets": [dataset]}


def build_violin(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """Kernel density curve of yAxis, per groupBy value when one is bound"""
    scheme = template.color_scheme
    if template.group_by:
        groups = grouped_values(rows, template.group_by, template.y_axis)
        datasets = [
            styled_dataset(label_text(group), kernel_density(values), scheme, index, 0.6, borderWidth=2)
            for index, (group, values) in enumerate(groups)
        ]
        return {"labels": [label_text(group) for group, _ in groups], "datasets": datasets}

    density = kernel_density(numeric_column(rows, template.y_axis))
    dataset = styled_dataset(template.y_axis, density, scheme, 0, 0.6, borderWidth=2)
    return {"labels": [template.y_axis], "datasets": [dataset]}


def build_ridgeline(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    One density curve per group, stacked by lifting group i by 2 * i.
    """
    if not template.group_by:
        raise ChartUsageError("ridgeline", "a groupBy field")

    datasets = []
    for index, (group, values) in enumerate(grouped_values(rows, template.group_by, template.y_axis)):
        offset = index * 2
        curve = [{"x": point["x"], "y": point["y"] + offset} for point in kernel_density(values)]
        datasets.append(
            styled_dataset(label_text(group), curve, template.color_scheme, index, 0.6, borderWidth=2, fill=True)
        )
    return {"datasets": datasets}


def build_streamgraph(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Stacked filled areas, one per groupBy category over the sorted x values.

    Without a groupBy this is a plain area chart.
    """
    if not template.group_by:
        return build_xy_chart(template, rows)

    time_points = sort_labels(field_value(row, template.x_axis) for row in rows)
    categories = distinct_in_order(field_value(row, template.group_by) for row in rows)
    cells = fill_cells(rows, (template.x_axis, template.group_by), template.y_axis)
    method = cell_method(template, default=Aggregation.SUM)

    datasets = [
        styled_dataset(
            label_text(category),
            [cells.reduce((time_point, category), method) for time_point in time_points],
            template.color_scheme, index, 0.7,
            borderWidth=1, fill=True, tension=0.4,
        )
        for index, category in enumerate(categories)
    ]
    return {"labels": time_points, "datasets": datasets}
