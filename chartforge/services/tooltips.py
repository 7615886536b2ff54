"""
Declarative tooltip strategies

Chart options carry tooltips as plain data, `{"strategy": <name>}`, instead of
renderer callbacks. `render_tooltip_label` evaluates a strategy against a
built chart's data block so the wording can be checked without a renderer.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from chartforge.services.rows import clean_number, to_number

TooltipText = Union[str, List[str]]


class TooltipStrategy(str, Enum):
    PERCENT_OF_TOTAL = "percentOfTotal"
    FIVE_NUMBER_SUMMARY = "fiveNumberSummary"
    CELL_VALUE = "cellValue"
    LABEL_VALUE = "labelValue"
    GAUGE_READING = "gaugeReading"
    FLOW = "flow"
    DATE_VALUE = "dateValue"
    WORD_WEIGHT = "wordWeight"
    NODE_DISTANCE = "nodeDistance"
    BULLET_MEASURES = "bulletMeasures"
    ICON_COUNT = "iconCount"
    ROW_DIMENSIONS = "rowDimensions"
    CELL_SHARE = "cellShare"
    BLANK = "blank"


def tooltip(strategy: TooltipStrategy, hide_title: bool = False, **params: Any) -> Dict[str, Any]:
    """`plugins.tooltip` block for a strategy"""
    callbacks: Dict[str, Any] = {"label": {"strategy": strategy.value, **params}}
    if hide_title:
        callbacks["title"] = {"strategy": TooltipStrategy.BLANK.value}
    return {"callbacks": callbacks}


def format_value(value: Any) -> str:
    """Numbers as a renderer would print them (15.0 -> 15), anything else via str"""
    if isinstance(value, float):
        return str(clean_number(value))
    if value is None:
        return ""
    return str(value)


def _item(sequence: Any, index: int) -> Any:
    if isinstance(sequence, list) and 0 <= index < len(sequence):
        return sequence[index]
    return None


def render_tooltip_label(
    tooltip_spec: Dict[str, Any],
    data: Dict[str, Any],
    dataset_index: int = 0,
    index: int = 0,
) -> TooltipText:
    """
    Evaluate a tooltip strategy for one point of a built chart.

    Args:
        tooltip_spec: The `{"strategy": ...}` object (or the whole
            `plugins.tooltip` block) from the chart options
        data: The chart's data block
        dataset_index: Series the hovered point belongs to
        index: Position of the point within the series

    Returns:
        A single line, or a list of lines for multi-line strategies
    """
    if "callbacks" in tooltip_spec:
        tooltip_spec = tooltip_spec["callbacks"]["label"]
    strategy = TooltipStrategy(tooltip_spec["strategy"])

    dataset = _item(data.get("datasets"), dataset_index) or {}
    point = _item(dataset.get("data"), index)
    label = _item(data.get("labels"), index)
    label_text = format_value(label) if label is not None else ""

    if strategy == TooltipStrategy.PERCENT_OF_TOTAL:
        decimals = tooltip_spec.get("decimals", 1)
        values = [to_number(value) or 0.0 for value in dataset.get("data", [])]
        total = sum(values)
        value = to_number(point) or 0.0
        percentage = value / total * 100 if total else 0.0
        return f"{label_text}: {format_value(point)} ({percentage:.{decimals}f}%)"

    if strategy == TooltipStrategy.FIVE_NUMBER_SUMMARY:
        stats = point or {}
        return [
            f"Min: {format_value(stats.get('min'))}",
            f"Q1: {format_value(stats.get('q1'))}",
            f"Median: {format_value(stats.get('median'))}",
            f"Q3: {format_value(stats.get('q3'))}",
            f"Max: {format_value(stats.get('max'))}",
        ]

    if strategy == TooltipStrategy.CELL_VALUE:
        return f"Value: {format_value((point or {}).get('v'))}"

    if strategy == TooltipStrategy.LABEL_VALUE:
        if isinstance(point, dict):
            return f"{point.get('label', '')}: {format_value(point.get('value'))}"
        return f"{label_text}: {format_value(point)}"

    if strategy == TooltipStrategy.GAUGE_READING:
        return [
            f"Current: {format_value(dataset.get('currentValue'))}",
            f"Range: {format_value(dataset.get('minValue'))} - {format_value(dataset.get('maxValue'))}",
        ]

    if strategy == TooltipStrategy.FLOW:
        if isinstance(point, dict) and "flow" in point:
            return f"Flow: {point.get('from')} -> {point.get('to')}: {format_value(point['flow'])}"
        return f"Flow: {format_value(point)}"

    if strategy == TooltipStrategy.DATE_VALUE:
        entry = point or {}
        return f"{entry.get('date')}: {format_value(entry.get('value'))}"

    if strategy == TooltipStrategy.WORD_WEIGHT:
        word = _item(data.get("words"), index) or {}
        return f"{word.get('text')}: {format_value(word.get('value'))}"

    if strategy == TooltipStrategy.NODE_DISTANCE:
        node = _item(data.get("nodes"), index) or {}
        return f"{node.get('label')}: Distance {format_value(node.get('height'))}"

    if strategy == TooltipStrategy.BULLET_MEASURES:
        item = point or {}
        return [
            f"Value: {format_value(item.get('value'))}",
            f"Target: {format_value(item.get('target'))}",
            f"Range: {format_value(item.get('range'))}",
        ]

    if strategy == TooltipStrategy.ICON_COUNT:
        item = point or {}
        return f"{item.get('label')}: {format_value(item.get('value'))} ({item.get('iconCount')} icons)"

    if strategy == TooltipStrategy.ROW_DIMENSIONS:
        dimension = _item(data.get("dimensions"), index)
        row = _item(data.get("rows"), dataset_index) or {}
        return f"{dataset.get('label')}: {dimension} = {format_value(row.get(dimension))}"

    if strategy == TooltipStrategy.CELL_SHARE:
        cell = point or {}
        return f"{cell.get('xLabel')} × {cell.get('yLabel')}: {format_value(cell.get('value'))}"

    return ""


def tooltip_strategy(options: Dict[str, Any]) -> Optional[str]:
    """Strategy name declared by a chart's options, if any"""
    label = options.get("plugins", {}).get("tooltip", {}).get("callbacks", {}).get("label")
    return label.get("strategy") if isinstance(label, dict) else None
