"""
Row access helpers shared by the aggregator and the chart generators

Rows are plain mappings parsed upstream. Nothing here assumes that a column
exists or that its value is well typed: absent columns read as None and
values are coerced leniently.
"""

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import structlog

from chartforge.config.settings import get_settings

logger = structlog.get_logger(__name__)

Row = Mapping[str, Any]


def field_value(row: Row, field: Optional[str]) -> Any:
    """Safe get-or-null accessor for a role binding"""
    if not field or not isinstance(row, Mapping):
        return None
    return row.get(field)


def is_blank(value: Any) -> bool:
    """True for None and empty/whitespace strings"""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def to_number(value: Any) -> Optional[float]:
    """
    Numeric coercion for row values.

    Booleans count as 1/0, numeric strings are parsed, and everything that
    is missing or not a finite number comes back as None.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def number_or(value: Any, default: float = 0.0) -> float:
    """to_number with a fallback for missing or non-numeric values"""
    number = to_number(value)
    return default if number is None else number


def weight_of(value: Any) -> float:
    """Counting weight: the numeric value, or 1 when absent or non-numeric"""
    number = to_number(value)
    return 1.0 if number is None else number


def clean_number(value: float) -> Any:
    """Render whole floats as ints so emitted data reads like the input"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def label_text(value: Any) -> str:
    """String form of a category value for labels and node ids"""
    if value is None:
        return "null"
    if isinstance(value, float):
        return str(clean_number(value))
    return str(value)


def bucket_key(value: Any) -> Any:
    """Hashable identity of a row value for grouping and lookups"""
    # 1 and 1.0 share a bucket, True does not
    if isinstance(value, bool):
        return ("bool", value)
    try:
        hash(value)
    except TypeError:
        return ("repr", repr(value))
    return value


def distinct_in_order(values: Iterable[Any]) -> List[Any]:
    """Distinct values in first-seen order"""
    seen = set()
    result = []
    for value in values:
        key = bucket_key(value)
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def _label_sort_key(value: Any):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, float(value), "")
    if value is None:
        return (2, 0.0, "")
    return (1, 0.0, str(value))


def sort_labels(values: Iterable[Any]) -> List[Any]:
    """
    Distinct values sorted for use as an axis label set.

    Numbers sort numerically ahead of strings, strings sort lexically and
    None goes last, so mixed columns never raise on comparison.
    """
    return sorted(distinct_in_order(values), key=_label_sort_key)


def numeric_column(rows: Sequence[Row], field: Optional[str]) -> List[float]:
    """All finite numeric values of a column, in row order"""
    values = []
    for row in rows:
        number = to_number(field_value(row, field))
        if number is not None:
            values.append(number)
    return values


def sample_rows_for_charts(rows: Sequence[Row], max_points: Optional[int] = None) -> List[Row]:
    """
    Downsample a dataset before building charts.

    When there are more rows than `max_points`, every ceil(len / max_points)-th
    row is kept, starting with the first one. Smaller datasets are returned
    unchanged.
    """
    if max_points is None:
        max_points = get_settings().max_chart_data_points

    rows = list(rows)
    if max_points <= 0 or len(rows) <= max_points:
        return rows

    stride = math.ceil(len(rows) / max_points)
    sampled = rows[::stride]
    logger.info(
        "Sampled rows for charting",
        original_rows=len(rows),
        sampled_rows=len(sampled),
        max_points=max_points,
        stride=stride,
    )
    return sampled


def rows_as_dicts(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    """Keep only mapping rows; anything else upstream produced is dropped"""
    return [row for row in rows if isinstance(row, Mapping)]
