"""
Temporal and rank generators: slope, bump, waterfall, candlestick,
calendar and gantt
"""

from typing import Any, Dict, List, Sequence

import structlog

from chartforge.models.schemas import Aggregation, ChartTemplate
from chartforge.services.aggregator import reduce_values
from chartforge.services.colors import color_for
from chartforge.services.generators.common import ChartData, fill_cells, styled_dataset
from chartforge.services.rows import (
    Row, bucket_key, distinct_in_order, field_value, is_blank, label_text, number_or, sort_labels,
)
from chartforge.services.statistics import rank_descending
from chartforge.utils.dates import parse_date, to_epoch_ms, to_iso_date
from chartforge.utils.errors import ChartUsageError

logger = structlog.get_logger(__name__)

CANDLE_UP_SCHEME = "green"
CANDLE_DOWN_SCHEME = "red"
NEGATIVE_SCHEME = "red"


def _time_points(template: ChartTemplate, rows: Sequence[Row]) -> List[Any]:
    return sort_labels(
        value for value in (field_value(row, template.x_axis) for row in rows) if value is not None
    )


def build_slope(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Before/after lines per group between exactly two time points.

    Each group's value at a time point is the sum of its yAxis values there.
    """
    if not template.group_by:
        raise ChartUsageError("slope", "a groupBy field")

    time_points = _time_points(template, rows)
    if len(time_points) != 2:
        raise ChartUsageError("slope", "exactly 2 time points")

    groups = distinct_in_order(field_value(row, template.group_by) for row in rows)
    cells = fill_cells(rows, (template.x_axis, template.group_by), template.y_axis)

    datasets = []
    for index, group in enumerate(groups):
        data = [cells.reduce((time_point, group), Aggregation.SUM) for time_point in time_points]
        dataset = styled_dataset(
            label_text(group), data, template.color_scheme, index, 0.1,
            tension=0, pointRadius=6, pointHoverRadius=8,
        )
        datasets.append(dataset)
    return {"labels": time_points, "datasets": datasets}


def build_bump(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Rank of each entity at each time point, 1 being the highest value.

    Values are summed per entity and time point before ranking; ties keep
    the order entities first appear at that time point. An entity with no
    rows at a time point is ranked one past the last entity.
    """
    if not template.group_by:
        raise ChartUsageError("bump", "a groupBy field")

    time_points = _time_points(template, rows)
    entities = distinct_in_order(field_value(row, template.group_by) for row in rows)
    absent_rank = len(entities) + 1

    rankings: Dict[Any, Dict[Any, int]] = {}
    for time_point in time_points:
        totals: Dict[Any, float] = {}
        for row in rows:
            if bucket_key(field_value(row, template.x_axis)) != bucket_key(time_point):
                continue
            entity = bucket_key(field_value(row, template.group_by))
            totals[entity] = totals.get(entity, 0.0) + number_or(field_value(row, template.y_axis))
        rankings[bucket_key(time_point)] = rank_descending(totals)

    datasets = []
    for index, entity in enumerate(entities):
        data = [
            rankings[bucket_key(time_point)].get(bucket_key(entity), absent_rank)
            for time_point in time_points
        ]
        datasets.append(
            styled_dataset(
                label_text(entity), data, template.color_scheme, index, 0.2,
                borderWidth=3, tension=0.2, pointRadius=6, pointHoverRadius=8,
            )
        )
    return {"labels": time_points, "datasets": datasets}


def build_waterfall(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Running total over the rows in order.

    Each step is split into a positive series and a negative series holding
    the absolute value of decreases, so the two can be stacked.
    """
    labels: List[str] = []
    positive: List[float] = []
    negative: List[float] = []
    cumulative: List[float] = []
    steps = []

    total = 0.0
    for row in rows:
        x = field_value(row, template.x_axis)
        if x is None:
            continue
        delta = number_or(field_value(row, template.y_axis))
        start = total
        total += delta

        labels.append(label_text(x))
        positive.append(delta if delta >= 0 else 0.0)
        negative.append(abs(delta) if delta < 0 else 0.0)
        cumulative.append(total)
        steps.append({"label": label_text(x), "value": delta, "start": start, "end": total, "isPositive": delta >= 0})

    scheme = template.color_scheme
    datasets = [
        styled_dataset("Positive Changes", positive, scheme, 0, 0.7, borderWidth=1),
        styled_dataset("Negative Changes", negative, NEGATIVE_SCHEME, 0, 0.7, borderWidth=1),
    ]
    return {"labels": labels, "datasets": datasets, "cumulative": cumulative, "steps": steps}


def build_candlestick(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    OHLC points sorted chronologically by their parsed x date.

    Rows with a blank date or a missing price are dropped; dates that do not
    parse sort after every parseable one in their original order.
    """
    fields = (template.open_axis, template.high_axis, template.low_axis, template.close_axis)

    points = []
    for row in rows:
        x = field_value(row, template.x_axis)
        if is_blank(x) or any(field_value(row, field) is None for field in fields):
            continue
        point = {"x": x}
        for key, field in zip(("o", "h", "l", "c"), fields):
            point[key] = number_or(field_value(row, field))
        points.append(point)

    def chronological(point):
        moment = parse_date(point["x"])
        return (moment is None, to_epoch_ms(moment) if moment else 0)

    points.sort(key=chronological)

    backgrounds = [
        color_for(CANDLE_UP_SCHEME if point["c"] >= point["o"] else CANDLE_DOWN_SCHEME, 0, 0.7)
        for point in points
    ]
    dataset = {
        "label": "OHLC Data",
        "data": points,
        "backgroundColor": backgrounds,
        "borderColor": color_for(template.color_scheme, 0),
        "borderWidth": 1,
    }
    return {"labels": [label_text(point["x"]) for point in points], "datasets": [dataset]}


def build_calendar(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Daily buckets keyed by ISO date, sorted by date.

    Same-day values are reduced with the template aggregation (sum by
    default). Missing or non-numeric values count as 0. Each day carries an
    intensity of value / max(values) for coloring.
    """
    date_field = template.date_axis or template.x_axis
    value_field = template.value_axis or template.y_axis
    method = template.aggregation or Aggregation.SUM

    days: Dict[str, List[float]] = {}
    for row in rows:
        day = to_iso_date(field_value(row, date_field))
        if day is None:
            continue
        days.setdefault(day, []).append(number_or(field_value(row, value_field)))

    entries = [
        {"date": day, "value": reduce_values(values, len(values), method)}
        for day, values in sorted(days.items())
    ]
    max_value = max((entry["value"] for entry in entries), default=0)

    scheme = template.color_scheme
    for entry in entries:
        intensity = min(max(entry["value"] / max_value, 0.0), 1.0) if max_value > 0 else 0.0
        entry["intensity"] = intensity
        entry["color"] = color_for(scheme, 0, intensity)

    dataset = {
        "label": value_field,
        "data": entries,
        "backgroundColor": [entry["color"] for entry in entries],
        "borderColor": color_for(scheme, 0),
    }
    return {"labels": [entry["date"] for entry in entries], "datasets": [dataset], "maxValue": max_value}


def build_gantt(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Task bars from start to end dates.

    Rows whose start or end date does not parse are skipped. Durations are
    in milliseconds and the timeline spans the earliest start to the latest
    end (None when there are no tasks).
    """
    scheme = template.color_scheme
    tasks = []
    starts = []
    ends = []
    for index, row in enumerate(rows):
        start = parse_date(field_value(row, template.start_date_axis))
        end = parse_date(field_value(row, template.end_date_axis))
        if start is None or end is None:
            logger.debug("Skipping gantt row with unparseable dates", row_index=index)
            continue

        task = field_value(row, template.task_axis)
        category = field_value(row, template.category_axis)
        tasks.append({
            "task": label_text(task) if not is_blank(task) else f"Task {index + 1}",
            "start": start.isoformat(),
            "end": end.isoformat(),
            "duration": to_epoch_ms(end) - to_epoch_ms(start),
            "category": label_text(category) if not is_blank(category) else "Default",
            "color": color_for(scheme, index, 0.7),
        })
        starts.append(start)
        ends.append(end)

    timeline = {"start": min(starts).isoformat(), "end": max(ends).isoformat()} if tasks else None
    dataset = {
        "label": "Tasks",
        "data": [{"x": [task["start"], task["end"]], "y": task["task"]} for task in tasks],
        "backgroundColor": [task["color"] for task in tasks],
        "borderColor": color_for(scheme, 0),
        "borderWidth": 1,
    }
    return {
        "labels": [task["task"] for task in tasks],
        "datasets": [dataset],
        "tasks": tasks,
        "categories": distinct_in_order(task["category"] for task in tasks),
        "timeline": timeline,
    }
