"""
Multi-series matrix generators: radar/spider, parallel coordinates,
heatmap, marimekko and chord
"""

from typing import Any, Dict, List, Sequence

from chartforge.models.schemas import Aggregation, ChartTemplate
from chartforge.services.aggregator import aggregate
from chartforge.services.colors import color_for, colors_for
from chartforge.services.generators.common import ChartData, cell_method, fill_cells, styled_dataset
from chartforge.services.rows import (
    Row, bucket_key, distinct_in_order, field_value, is_blank, label_text, number_or, sort_labels, weight_of,
)
from chartforge.services.statistics import normalise
from chartforge.utils.errors import ChartUsageError


def build_radar(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Radar (and spider) chart.

    With a groupBy different from the x column each group is one polygon
    over the categories in first-seen order, one reduced value per cell and
    zero where a group has no rows for a category. Cells count rows unless
    an aggregation is asked for. Without a group the aggregator's buckets
    are used directly, summing by default.
    """
    scheme = template.color_scheme

    if template.has_distinct_group:
        groups = distinct_in_order(field_value(row, template.group_by) for row in rows)
        categories = distinct_in_order(field_value(row, template.x_axis) for row in rows)
        cells = fill_cells(rows, (template.x_axis, template.group_by), template.y_axis)
        method = cell_method(template, default=Aggregation.COUNT)

        datasets = [
            styled_dataset(
                label_text(group),
                [cells.reduce((category, group), method) for category in categories],
                scheme, index, 0.2,
                borderWidth=2,
            )
            for index, group in enumerate(groups)
        ]
        return {"labels": categories, "datasets": datasets}

    points = aggregate(rows, template.x_axis, template.y_axis, template.aggregation or Aggregation.SUM)
    dataset = styled_dataset(template.y_axis, [point.y for point in points], scheme, 0, 0.2, borderWidth=2)
    return {"labels": [label_text(point.x) for point in points], "datasets": [dataset]}


def build_heatmap(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Full x by y grid of aggregated cells.

    Every (x, y) pair of the sorted distinct values gets a cell, observed or
    not, as {x: xIndex, y: yIndex, v: value}. The value column is valueAxis
    (sizeAxis as a fallback); with neither bound cells count rows. Each cell
    is colored at an intensity of value / max(values).
    """
    x_values = sort_labels(field_value(row, template.x_axis) for row in rows)
    y_values = sort_labels(field_value(row, template.y_axis) for row in rows)
    value_field = template.value_axis or template.size_axis

    cells = fill_cells(rows, (template.x_axis, template.y_axis), value_field)
    method = cell_method(template, default=Aggregation.SUM) if value_field else Aggregation.COUNT

    data = []
    for y_index, y_value in enumerate(y_values):
        for x_index, x_value in enumerate(x_values):
            data.append({"x": x_index, "y": y_index, "v": cells.reduce((x_value, y_value), method)})

    max_value = max((cell["v"] for cell in data), default=0)
    scheme = template.color_scheme
    backgrounds = [
        color_for(scheme, 0, min(max(cell["v"] / max_value, 0.0), 1.0) if max_value > 0 else 0)
        for cell in data
    ]

    dataset = {
        "label": f"{value_field or 'count'} by {template.x_axis} and {template.y_axis}",
        "data": data,
        "backgroundColor": backgrounds,
        "borderColor": color_for(scheme, 0),
        "borderWidth": 1,
    }
    return {"labels": x_values, "yLabels": y_values, "datasets": [dataset], "maxValue": max_value}


def build_marimekko(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Variable-width stacked cells from a y by x table of summed sizes.

    A cell's width is its share of its row total and its height is the
    row's share of the table total, both as percentages.
    """
    x_values = distinct_in_order(field_value(row, template.x_axis) for row in rows)
    y_values = distinct_in_order(field_value(row, template.y_axis) for row in rows)

    sizes: Dict[Any, float] = {}
    for row in rows:
        key = (bucket_key(field_value(row, template.x_axis)), bucket_key(field_value(row, template.y_axis)))
        sizes[key] = sizes.get(key, 0.0) + number_or(field_value(row, template.size_axis))

    table = [
        [sizes.get((bucket_key(x_value), bucket_key(y_value)), 0.0) for x_value in x_values]
        for y_value in y_values
    ]
    row_totals = [sum(cells) for cells in table]
    grand_total = sum(row_totals)

    scheme = template.color_scheme
    cells = []
    for y_index, y_value in enumerate(y_values):
        row_total = row_totals[y_index]
        height = row_total / grand_total * 100 if grand_total > 0 else 0.0
        for x_index, x_value in enumerate(x_values):
            size = table[y_index][x_index]
            cells.append({
                "x": x_index,
                "y": y_index,
                "width": size / row_total * 100 if row_total > 0 else 0.0,
                "height": height,
                "value": size,
                "xLabel": label_text(x_value),
                "yLabel": label_text(y_value),
                "color": color_for(scheme, x_index, 0.7),
            })

    dataset = {
        "label": template.size_axis,
        "data": cells,
        "backgroundColor": [cell["color"] for cell in cells],
        "borderColor": color_for(scheme, 0),
    }
    return {
        "labels": [label_text(x_value) for x_value in x_values],
        "yLabels": [label_text(y_value) for y_value in y_values],
        "datasets": [dataset],
    }


def flow_roles(template: ChartTemplate):
    """(source, target, value) columns, falling back to the x/y/size roles"""
    source = template.source_axis or template.x_axis
    target = template.target_axis or template.y_axis
    value = template.value_axis or template.size_axis
    return source, target, value


def build_chord(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Directed adjacency matrix over every entity seen as source or target.

    matrix[source][target] accumulates the row weight (1 when no numeric
    value). Rows with a blank endpoint are skipped.
    """
    source_field, target_field, value_field = flow_roles(template)

    entities: List[Any] = []
    for row in rows:
        for field in (source_field, target_field):
            value = field_value(row, field)
            if not is_blank(value):
                entities.append(value)
    entities = distinct_in_order(entities)
    index_of = {bucket_key(entity): i for i, entity in enumerate(entities)}

    matrix = [[0.0 for _ in entities] for _ in entities]
    for row in rows:
        source = field_value(row, source_field)
        target = field_value(row, target_field)
        if is_blank(source) or is_blank(target):
            continue
        weight = weight_of(field_value(row, value_field)) if value_field else 1.0
        matrix[index_of[bucket_key(source)]][index_of[bucket_key(target)]] += weight

    labels = [label_text(entity) for entity in entities]
    scheme = template.color_scheme
    datasets = [
        styled_dataset(label, matrix[i], scheme, i, 0.7)
        for i, label in enumerate(labels)
    ]
    return {
        "labels": labels,
        "matrix": matrix,
        "colors": colors_for(scheme, len(labels), 0.7),
        "datasets": datasets,
    }


def _dimension_range(values: List[float]) -> Dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0}
    return {"min": min(values), "max": max(values)}


def build_parallel(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Parallel coordinates over two or more numeric dimensions.

    Emits the numeric rows, each dimension's min/max range and one series
    per row with every dimension normalised to 0..1 against its range.
    """
    dimensions = template.dimensions
    if len(dimensions) < 2:
        raise ChartUsageError("parallel", "at least 2 dimensions")

    numeric_rows = []
    for index, row in enumerate(rows):
        values: Dict[str, Any] = {"index": index}
        for dimension in dimensions:
            values[dimension] = number_or(field_value(row, dimension))
        numeric_rows.append(values)

    ranges = {
        dimension: _dimension_range([values[dimension] for values in numeric_rows])
        for dimension in dimensions
    }

    scheme = template.color_scheme
    datasets = []
    for index, values in enumerate(numeric_rows):
        normalised = [
            normalise(values[dimension], ranges[dimension]["min"], ranges[dimension]["max"])
            for dimension in dimensions
        ]
        datasets.append(
            styled_dataset(f"Row {index + 1}", normalised, scheme, index, 0.5, borderWidth=1, fill=False)
        )

    return {
        "labels": list(dimensions),
        "dimensions": list(dimensions),
        "rows": numeric_rows,
        "ranges": ranges,
        "datasets": datasets,
    }
