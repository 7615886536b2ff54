"""
Chart option builders

Every chart gets the same base (responsive layout, bold title, top legend);
each builder then adds the axes and tooltip strategy its kind needs. Builders
receive the generated data block so options stay consistent with the series
actually produced.
"""

from typing import Any, Callable, Dict, Optional

from chartforge.models.schemas import ChartKind, ChartTemplate
from chartforge.services.tooltips import TooltipStrategy, tooltip

Options = Dict[str, Any]
OptionsBuilder = Callable[[ChartTemplate, Dict[str, Any]], Options]

RADIAL_GRID_COLOR = "rgba(0, 0, 0, 0.1)"
SECONDARY_AXIS_TITLE = "Secondary Axis"


def axis_title(text: Optional[str]) -> Dict[str, Any]:
    return {"display": True, "text": text}


def base_options(template: ChartTemplate) -> Options:
    return {
        "responsive": True,
        "maintainAspectRatio": False,
        "plugins": {
            "title": {
                "display": True,
                "text": template.title or "",
                "font": {"size": 16, "weight": "bold"},
            },
            "legend": {"display": True, "position": "top"},
        },
    }


def _with_tooltip(options: Options, strategy: TooltipStrategy, hide_title: bool = False, **params: Any) -> Options:
    options["plugins"]["tooltip"] = tooltip(strategy, hide_title=hide_title, **params)
    return options


def _xy_scales(x_text: Optional[str], y_text: Optional[str]) -> Dict[str, Any]:
    return {"x": {"title": axis_title(x_text)}, "y": {"title": axis_title(y_text)}}


def xy_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    """Titled x/y axes; horizontal bars swap the index axis"""
    options = base_options(template)
    options["scales"] = _xy_scales(template.x_axis, template.y_axis)
    if template.kind == ChartKind.HORIZONTAL_BAR:
        options["indexAxis"] = "y"
    return options


def stacked_xy_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    options = xy_options(template, data)
    options["scales"]["y"]["stacked"] = True
    return options


def mixed_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    """
    Primary axis on the left, and the secondary axis on the right only when
    a series is actually plotted against it.
    """
    options = base_options(template)
    scales: Dict[str, Any] = {
        "x": {"title": axis_title(template.x_axis)},
        "y": {"type": "linear", "position": "left", "title": axis_title(template.y_axis)},
    }
    if any(dataset.get("yAxisID") == "y1" for dataset in data.get("datasets", [])):
        scales["y1"] = {
            "type": "linear",
            "position": "right",
            "title": axis_title(template.y_axis2 or SECONDARY_AXIS_TITLE),
            "grid": {"drawOnChartArea": False},
        }
    options["scales"] = scales
    return options


def linear_xy_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    options = xy_options(template, data)
    options["scales"]["x"]["type"] = "linear"
    return options


def radar_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    options = base_options(template)
    options["scales"] = {
        "r": {
            "beginAtZero": True,
            "grid": {"color": RADIAL_GRID_COLOR},
            "pointLabels": {"font": {"size": 12}},
        }
    }
    return options


def radial_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    options = base_options(template)
    options["scales"] = {"r": {"beginAtZero": True, "grid": {"color": RADIAL_GRID_COLOR}}}
    return options


def share_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    """Pie, doughnut and polar area: each slice's share of the total"""
    return _with_tooltip(base_options(template), TooltipStrategy.PERCENT_OF_TOTAL, decimals=1)


def histogram_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    options = base_options(template)
    field = template.x_axis or template.y_axis
    options["scales"] = _xy_scales(f"{field} (Bins)", "Frequency")
    return options


def boxplot_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    options = base_options(template)
    options["scales"] = _xy_scales(template.group_by or template.x_axis, template.y_axis)
    return _with_tooltip(options, TooltipStrategy.FIVE_NUMBER_SUMMARY)


def heatmap_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    options = base_options(template)
    options["scales"] = {
        "x": {"type": "linear", "position": "bottom", "min": 0, "title": axis_title(template.x_axis)},
        "y": {"type": "linear", "min": 0, "title": axis_title(template.y_axis)},
    }
    return _with_tooltip(options, TooltipStrategy.CELL_VALUE, hide_title=True)


def label_value_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    """Funnel, treemap and sunburst"""
    return _with_tooltip(base_options(template), TooltipStrategy.LABEL_VALUE)


def gauge_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    return _with_tooltip(base_options(template), TooltipStrategy.GAUGE_READING)


def flow_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    """Sankey, network, chord and alluvial"""
    return _with_tooltip(base_options(template), TooltipStrategy.FLOW, hide_title=True)


def calendar_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    return _with_tooltip(base_options(template), TooltipStrategy.DATE_VALUE)


def rank_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    """Slope and bump; bump ranks read top-down so its y axis is reversed"""
    options = base_options(template)
    options["scales"] = _xy_scales(template.x_axis, template.y_axis)
    options["scales"]["y"]["reverse"] = template.kind == ChartKind.BUMP
    return options


def density_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    """Violin and ridgeline"""
    options = base_options(template)
    options["scales"] = _xy_scales(template.x_axis or "Value", "Density")
    return options


def wordcloud_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    return _with_tooltip(base_options(template), TooltipStrategy.WORD_WEIGHT)


def dendrogram_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    return _with_tooltip(base_options(template), TooltipStrategy.NODE_DISTANCE)


def bullet_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    return _with_tooltip(base_options(template), TooltipStrategy.BULLET_MEASURES)


def gantt_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    options = base_options(template)
    options["indexAxis"] = "y"
    options["scales"] = {
        "x": {"type": "time", "title": axis_title("Timeline")},
        "y": {"title": axis_title("Tasks")},
    }
    return options


def pictogram_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    return _with_tooltip(base_options(template), TooltipStrategy.ICON_COUNT)


def parallel_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    options = base_options(template)
    options["scales"] = {"y": {"min": 0, "max": 1, "title": axis_title("Normalised value")}}
    return _with_tooltip(options, TooltipStrategy.ROW_DIMENSIONS)


def marimekko_options(template: ChartTemplate, data: Dict[str, Any]) -> Options:
    return _with_tooltip(base_options(template), TooltipStrategy.CELL_SHARE)
