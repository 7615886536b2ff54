"""
Flow and graph generators: sankey, network and alluvial
"""

from typing import Any, Dict, List, Sequence, Tuple

import structlog

from chartforge.models.schemas import ChartTemplate
from chartforge.services.colors import color_for
from chartforge.services.generators.common import ChartData
from chartforge.services.generators.matrix import flow_roles
from chartforge.services.rows import Row, bucket_key, field_value, is_blank, label_text, weight_of
from chartforge.utils.errors import ChartUsageError

logger = structlog.get_logger(__name__)


class _LinkTable:
    """Nodes in first-seen order and links summed per (source, target)"""

    def __init__(self):
        self.nodes: List[Any] = []
        self._node_index: Dict[Any, int] = {}
        self.links: Dict[Tuple[int, int], float] = {}

    def node(self, value: Any) -> int:
        key = bucket_key(value)
        if key not in self._node_index:
            self._node_index[key] = len(self.nodes)
            self.nodes.append(value)
        return self._node_index[key]

    def add_link(self, source: Any, target: Any, weight: float) -> None:
        pair = (self.node(source), self.node(target))
        self.links[pair] = self.links.get(pair, 0.0) + weight

    def flow_dataset(self, label: str, scheme: Any) -> Dict[str, Any]:
        """Links as {from, to, flow} points for flow-capable renderers"""
        return {
            "label": label,
            "data": [
                {"from": label_text(self.nodes[s]), "to": label_text(self.nodes[t]), "flow": value}
                for (s, t), value in self.links.items()
            ],
            "backgroundColor": color_for(scheme, 0, 0.5),
            "borderColor": color_for(scheme, 0),
        }


def _link_weight(row: Row, value_field: Any) -> float:
    return weight_of(field_value(row, value_field)) if value_field else 1.0


def build_sankey(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Nodes and deduplicated links between source and target columns.

    Source and target default to xAxis and yAxis. Links with a blank
    endpoint or the same source and target are dropped, and repeated
    (source, target) pairs collapse into one link with the summed value.
    """
    source_field = template.source_axis or template.x_axis
    target_field = template.target_axis or template.y_axis
    value_field = template.value_axis or template.size_axis or template.y_axis

    if not source_field or not target_field:
        logger.warning("Sankey chart has no source/target columns", chart_type=template.chart_type)
        return {"nodes": [], "links": [], "datasets": []}

    table = _LinkTable()
    for row in rows:
        for field in (source_field, target_field):
            value = field_value(row, field)
            if not is_blank(value):
                table.node(value)

    for row in rows:
        source = field_value(row, source_field)
        target = field_value(row, target_field)
        if is_blank(source) or is_blank(target) or bucket_key(source) == bucket_key(target):
            continue
        table.add_link(source, target, _link_weight(row, value_field))

    inflow = [0.0] * len(table.nodes)
    outflow = [0.0] * len(table.nodes)
    for (s, t), value in table.links.items():
        outflow[s] += value
        inflow[t] += value

    scheme = template.color_scheme
    nodes = [
        {
            "id": index,
            "label": label_text(node),
            "value": max(inflow[index], outflow[index]),
            "color": color_for(scheme, index, 0.7),
        }
        for index, node in enumerate(table.nodes)
    ]
    links = [{"source": s, "target": t, "value": value} for (s, t), value in table.links.items()]
    return {"nodes": nodes, "links": links, "datasets": [table.flow_dataset("Flows", scheme)]}


def build_network(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Graph of entities joined by weighted links.

    Unlike sankey, self-links are kept. A node's value is the total weight
    of the links touching it.
    """
    source_field, target_field, value_field = flow_roles(template)

    table = _LinkTable()
    for row in rows:
        source = field_value(row, source_field)
        target = field_value(row, target_field)
        if is_blank(source) or is_blank(target):
            continue
        table.add_link(source, target, _link_weight(row, value_field))

    touching = [0.0] * len(table.nodes)
    for (s, t), value in table.links.items():
        touching[s] += value
        if t != s:
            touching[t] += value

    scheme = template.color_scheme
    labels = [label_text(node) for node in table.nodes]
    nodes = [
        {"id": label, "label": label, "value": touching[index], "color": color_for(scheme, index, 0.7)}
        for index, label in enumerate(labels)
    ]
    links = [
        {"source": labels[s], "target": labels[t], "value": value, "color": color_for(scheme, 0, 0.5)}
        for (s, t), value in table.links.items()
    ]
    dataset = {
        "label": "Nodes",
        "data": touching,
        "backgroundColor": [node["color"] for node in nodes],
        "borderColor": color_for(scheme, 0),
    }
    return {"labels": labels, "nodes": nodes, "links": links, "datasets": [dataset]}


def build_alluvial(template: ChartTemplate, rows: Sequence[Row]) -> ChartData:
    """
    Flows through two or more stage columns.

    Rows sharing the same path through every stage are merged first, then
    each path is expanded into links between adjacent stages. Nodes are
    identified per stage (`value_stageIndex`) so the same value in two
    stages stays two nodes. Transitions with a blank endpoint are skipped
    and identical stage-to-stage links from different paths are summed.
    """
    stages = template.stages
    if len(stages) < 2:
        raise ChartUsageError("alluvial", "at least 2 stages")

    value_field = template.value_axis or template.size_axis
    paths: Dict[Tuple[Any, ...], Dict[str, Any]] = {}
    for row in rows:
        values = [field_value(row, stage) for stage in stages]
        key = tuple(bucket_key(value) for value in values)
        if key not in paths:
            paths[key] = {"stages": values, "value": 0.0}
        paths[key]["value"] += _link_weight(row, value_field)

    table = _LinkTable()
    node_meta: Dict[str, Tuple[str, int]] = {}

    def node_id(value: Any, stage_index: int) -> str:
        label = label_text(value)
        identifier = f"{label}_{stage_index}"
        node_meta.setdefault(identifier, (label, stage_index))
        return identifier

    for path in paths.values():
        values = path["stages"]
        for stage_index, value in enumerate(values):
            if not is_blank(value):
                table.node(node_id(value, stage_index))
        for stage_index in range(len(values) - 1):
            source, target = values[stage_index], values[stage_index + 1]
            if is_blank(source) or is_blank(target):
                continue
            table.add_link(node_id(source, stage_index), node_id(target, stage_index + 1), path["value"])

    scheme = template.color_scheme
    nodes = [
        {
            "id": identifier,
            "label": node_meta[identifier][0],
            "stage": node_meta[identifier][1],
            "color": color_for(scheme, index, 0.7),
        }
        for index, identifier in enumerate(table.nodes)
    ]
    links = [
        {"source": table.nodes[s], "target": table.nodes[t], "value": value}
        for (s, t), value in table.links.items()
    ]
    return {"nodes": nodes, "links": links, "stages": list(stages), "datasets": [table.flow_dataset("Flows", scheme)]}
