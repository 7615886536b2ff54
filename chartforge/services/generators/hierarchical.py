"""
Hierarchical generators: treemap, sunburst and dendrogram
"""

from typing import Any, Dict, List, Sequence

from chartforge.models.schemas import Aggregation, ChartTemplate
from chartforge.services.aggregator import aggregate
from chartforge.services.colors import color_for
from chartforge.services.generators.common import ChartData, fill_cells
from chartforge.services.rows import (
    Row, bucket_key, distinct_in_order, field_value, is_blank, label_text, number_or, weight_of,
)
from chartforge.services.statistics import distance_matrix
from chartforge.utils.errors import ChartUsageError

SUNBURST_ROOT = "Root"


def _hierarchy_dataset(label: str, nodes: List[Dict[str, Any]], border: str) -> Dict[str, Any]:
    return {
        "label": label,
        "data": nodes,
        "backgroundColor": [node["color"] for node in nodes],
        "borderColor": border,
        "borderWidth": 2,
    }


def build_treemap(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Treemap with one or two levels.

    With a groupBy different from the x column each group holds its x
    children, each reduced with the template aggregation (sum by default),
    and a group's value is the sum of its children. Otherwise the nodes are
    the aggregator's x buckets.
    """
    method = template.aggregation or Aggregation.SUM
    scheme = template.color_scheme

    if template.has_distinct_group:
        cells = fill_cells(rows, (template.group_by, template.x_axis), template.y_axis)
        members: Dict[Any, List[Any]] = {}
        groups = []
        for row in rows:
            group = field_value(row, template.group_by)
            key = bucket_key(group)
            if key not in members:
                members[key] = []
                groups.append(group)
            members[key].append(field_value(row, template.x_axis))

        nodes = []
        for index, group in enumerate(groups):
            items = distinct_in_order(members[bucket_key(group)])
            children = [
                {"label": label_text(item), "value": cells.reduce((group, item), method)}
                for item in items
            ]
            nodes.append({
                "label": label_text(group),
                "value": sum(child["value"] for child in children),
                "children": children,
                "color": color_for(scheme, index, 0.7),
            })
    else:
        nodes = [
            {"label": label_text(point.x), "value": point.y, "color": color_for(scheme, index, 0.7)}
            for index, point in enumerate(aggregate(rows, template.x_axis, template.y_axis, method))
        ]

    dataset = _hierarchy_dataset("Treemap Data", nodes, color_for(scheme, 0))
    return {"labels": [node["label"] for node in nodes], "datasets": [dataset]}


def build_sunburst(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Two-ring sunburst: groupBy categories around their x subcategories.

    Rows without a group fall under `Root`. With sum aggregation (the
    default) each row adds its y value, or 1 when y is not numeric;
    otherwise rows are counted. Child rings reuse their parent's color at
    increasing opacity.
    """
    summing = (template.aggregation or Aggregation.SUM) == Aggregation.SUM
    scheme = template.color_scheme

    hierarchy: Dict[str, Dict[str, Any]] = {}
    for row in rows:
        group = field_value(row, template.group_by)
        category = SUNBURST_ROOT if is_blank(group) else label_text(group)
        subcategory = label_text(field_value(row, template.x_axis))
        amount = weight_of(field_value(row, template.y_axis)) if summing else 1.0

        branch = hierarchy.setdefault(category, {"total": 0.0, "children": {}})
        branch["children"][subcategory] = branch["children"].get(subcategory, 0.0) + amount
        branch["total"] += amount

    nodes = []
    for category_index, (category, branch) in enumerate(hierarchy.items()):
        nodes.append({
            "label": category,
            "value": branch["total"],
            "level": 0,
            "color": color_for(scheme, category_index, 0.7),
        })
        for sub_index, (subcategory, value) in enumerate(branch["children"].items()):
            nodes.append({
                "label": subcategory,
                "value": value,
                "level": 1,
                "parent": category,
                "color": color_for(scheme, category_index, min(0.5 + sub_index * 0.1, 1)),
            })

    dataset = _hierarchy_dataset("Sunburst Data", nodes, "#ffffff")
    return {"labels": [node["label"] for node in nodes], "datasets": [dataset]}


def build_dendrogram(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Leaf nodes and their full pairwise Euclidean distance matrix.

    Feature columns come from `features`, falling back to `dimensions`;
    non-numeric feature values read as 0. Merging the leaves into clusters
    is left to the renderer.
    """
    features = template.features or template.dimensions
    if len(features) < 2:
        raise ChartUsageError("dendrogram", "at least 2 features")

    label_field = template.label_axis or template.x_axis
    scheme = template.color_scheme

    vectors = []
    nodes = []
    for index, row in enumerate(rows):
        vector = [number_or(field_value(row, feature)) for feature in features]
        label = field_value(row, label_field)
        vectors.append(vector)
        nodes.append({
            "id": index,
            "label": label_text(label) if not is_blank(label) else "Unknown",
            "children": [],
            "height": 0,
            "features": vector,
            "color": color_for(scheme, index, 0.7),
        })

    return {
        "labels": [node["label"] for node in nodes],
        "features": list(features),
        "nodes": nodes,
        "distances": distance_matrix(vectors),
        "datasets": [],
    }
