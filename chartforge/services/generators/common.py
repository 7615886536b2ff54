"""
Helpers shared by the chart-family generators
"""

from typing import Any, Dict, List, Optional, Sequence

from chartforge.models.schemas import Aggregation, ChartTemplate
from chartforge.services.aggregator import reduce_values
from chartforge.services.colors import color_for, colors_for
from chartforge.services.rows import Row, bucket_key, field_value, number_or

ChartData = Dict[str, Any]


def styled_dataset(
    label: Any,
    data: List[Any],
    scheme: Optional[str],
    index: int = 0,
    background_alpha: float = 1,
    **extra: Any,
) -> Dict[str, Any]:
    """One series with background/border colors taken from the palette"""
    dataset = {
        "label": label,
        "data": data,
        "backgroundColor": color_for(scheme, index, background_alpha),
        "borderColor": color_for(scheme, index),
    }
    dataset.update(extra)
    return dataset


def per_point_dataset(
    label: Any,
    data: List[Any],
    scheme: Optional[str],
    background_alpha: float = 1,
    **extra: Any,
) -> Dict[str, Any]:
    """One series colored point by point, as slice-based charts need"""
    dataset = {
        "label": label,
        "data": data,
        "backgroundColor": colors_for(scheme, len(data), background_alpha),
        "borderColor": colors_for(scheme, len(data)),
    }
    dataset.update(extra)
    return dataset


def empty_chart(**extra: Any) -> ChartData:
    chart: ChartData = {"labels": [], "datasets": []}
    chart.update(extra)
    return chart


class CellAccumulator:
    """
    Values collected per composite key, reduced on demand.

    Used by charts that build their own (category, group) grids instead of
    going through the aggregator's first-seen bucket list.
    """

    def __init__(self):
        self._values: Dict[Any, List[float]] = {}
        self._counts: Dict[Any, int] = {}

    def add(self, key: Any, value: Any) -> None:
        key = self._normalise(key)
        self._counts[key] = self._counts.get(key, 0) + 1
        self._values.setdefault(key, []).append(number_or(value))

    def reduce(self, key: Any, method: Aggregation, default: float = 0.0) -> float:
        key = self._normalise(key)
        if key not in self._counts:
            return default
        return reduce_values(self._values[key], self._counts[key], method)

    @staticmethod
    def _normalise(key: Any) -> Any:
        if isinstance(key, tuple):
            return tuple(bucket_key(part) for part in key)
        return bucket_key(key)


def fill_cells(
    rows: Sequence[Row],
    key_fields: Sequence[Optional[str]],
    value_field: Optional[str],
) -> CellAccumulator:
    """Accumulate value_field per tuple of key_fields"""
    cells = CellAccumulator()
    for row in rows:
        key = tuple(field_value(row, field) for field in key_fields)
        cells.add(key, field_value(row, value_field))
    return cells


def cell_method(template: ChartTemplate, default: Aggregation = Aggregation.SUM) -> Aggregation:
    """
    Reduction for grid cells: the template's method, `default` when unset,
    and count when the template explicitly asks for none.
    """
    method = template.aggregation or default
    if method == Aggregation.NONE:
        return Aggregation.COUNT
    return method
