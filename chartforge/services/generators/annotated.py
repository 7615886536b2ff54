"""
Annotated generators: bullet and pictogram
"""

import math
from typing import Sequence

from chartforge.models.schemas import Aggregation, ChartTemplate
from chartforge.services.colors import color_for
from chartforge.services.generators.common import ChartData
from chartforge.services.generators.part_to_whole import category_totals
from chartforge.services.rows import Row, field_value, is_blank, label_text, number_or

BULLET_RANGE_HEADROOM = 1.2


def build_bullet(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    One bullet per row: a value measured against a target within a range.

    The range defaults to 20% above the larger of value and target.
    """
    value_field = template.value_axis or template.y_axis
    label_field = template.label_axis or template.x_axis
    scheme = template.color_scheme

    items = []
    for index, row in enumerate(rows):
        value = number_or(field_value(row, value_field))
        target = number_or(field_value(row, template.target_axis))
        bullet_range = number_or(field_value(row, template.range_axis)) or max(value, target) * BULLET_RANGE_HEADROOM
        label = field_value(row, label_field)
        items.append({
            "label": label_text(label) if not is_blank(label) else f"Item {index + 1}",
            "value": value,
            "target": target,
            "range": bullet_range,
            "color": color_for(scheme, index, 0.7),
        })

    dataset = {
        "label": value_field,
        "data": items,
        "backgroundColor": [item["color"] for item in items],
        "borderColor": color_for(scheme, 0),
    }
    return {"labels": [item["label"] for item in items], "datasets": [dataset]}


def build_pictogram(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Category totals expressed as icon counts of `iconValue` each (default 1).

    A category needs ceil(value / iconValue) icons, of which
    floor(value / iconValue) are full and the remainder is the partial
    fraction of the last one.
    """
    icon_value = template.icon_value or 1.0
    scheme = template.color_scheme

    items = []
    for index, (label, value) in enumerate(category_totals(template, rows, Aggregation.SUM)):
        ratio = value / icon_value
        items.append({
            "label": label,
            "value": value,
            "iconCount": math.ceil(ratio),
            "fullIcons": math.floor(ratio),
            "partialIcon": math.fmod(value, icon_value) / icon_value,
            "color": color_for(scheme, index, 0.7),
        })

    dataset = {
        "label": template.y_axis,
        "data": items,
        "backgroundColor": [item["color"] for item in items],
        "borderColor": color_for(scheme, 0),
    }
    return {"labels": [item["label"] for item in items], "datasets": [dataset], "iconValue": icon_value}
