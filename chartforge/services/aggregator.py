"""
Aggregator - groups rows by (x, group) and reduces the y values per bucket
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import structlog

from chartforge.models.schemas import Aggregation
from chartforge.services.rows import Row, bucket_key, field_value, number_or

logger = structlog.get_logger(__name__)


class _NoGroup:
    """Sentinel group key for ungrouped aggregation"""

    def __repr__(self) -> str:
        return "NO_GROUP"


NO_GROUP = _NoGroup()


@dataclass(frozen=True)
class AggregatedPoint:
    """One reduced (x, group) bucket"""
    x: Any
    y: float
    group: Any = None
    count: int = 0


@dataclass
class _Bucket:
    x: Any
    group: Any
    values: List[float]
    count: int = 0


def reduce_values(values: List[float], count: int, method: Aggregation) -> float:
    """Apply one aggregation method to a bucket's numeric values"""
    if method == Aggregation.COUNT:
        return float(count)
    if not values:
        return 0.0
    if method == Aggregation.SUM:
        return float(sum(values))
    if method == Aggregation.AVG:
        return float(sum(values)) / len(values)
    if method == Aggregation.MIN:
        return float(min(values))
    if method == Aggregation.MAX:
        return float(max(values))
    return values[0]


def aggregate(
    rows: Sequence[Row],
    x_field: Optional[str],
    y_field: Optional[str],
    method: Union[Aggregation, str, None] = Aggregation.SUM,
    group_field: Optional[str] = None,
) -> List[AggregatedPoint]:
    """
    Group rows by (x, group) and reduce numeric y values per bucket.

    Keys are composite tuples so an x of "A_B" never collides with x="A",
    group="B". Null x values are kept as their own bucket; filtering is left
    to callers. Missing or non-numeric values enter the bucket as 0. Output
    has one entry per key in first-seen order.

    Args:
        rows: Dataset rows
        x_field: Column supplying the bucket label
        y_field: Column supplying the values to reduce
        method: sum, avg, count, min, max or none (first value)
        group_field: Optional second key column

    Returns:
        List of AggregatedPoint
    """
    method = Aggregation.parse(method) or Aggregation.NONE

    buckets: Dict[Tuple[Any, Any], _Bucket] = {}
    for row in rows:
        x = field_value(row, x_field)
        group = field_value(row, group_field) if group_field else NO_GROUP
        key = (bucket_key(x), bucket_key(group))

        bucket = buckets.get(key)
        if bucket is None:
            bucket = _Bucket(x=x, group=group, values=[])
            buckets[key] = bucket

        bucket.count += 1
        bucket.values.append(number_or(field_value(row, y_field)))

    result = [
        AggregatedPoint(
            x=bucket.x,
            y=reduce_values(bucket.values, bucket.count, method),
            group=None if bucket.group is NO_GROUP else bucket.group,
            count=bucket.count,
        )
        for bucket in buckets.values()
    ]

    logger.debug(
        "Aggregated rows",
        rows=len(rows),
        buckets=len(result),
        method=method.value,
        x_field=x_field,
        y_field=y_field,
        group_field=group_field,
    )
    return result

