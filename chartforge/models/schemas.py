"""
Pydantic models and enums for chart templates

A template is the declarative chart request produced upstream (by a language
model or a rule-based fallback). Only `chartType` is guaranteed; every other
field is optional and validated leniently so a noisy template still yields a
best-effort chart instead of a validation failure.
"""

from typing import Any, Dict, List, Optional, Union
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ChartKind(str, Enum):
    """Closed set of chart kind tags understood by the dispatcher"""
    # Cartesian XY
    LINE = "line"
    BAR = "bar"
    HORIZONTAL_BAR = "horizontalBar"
    AREA = "area"
    STEP = "step"
    SPLINE = "spline"
    AREA_SPLINE = "area-spline"
    SCATTER = "scatter"
    BUBBLE = "bubble"
    MIXED = "mixed"
    HISTOGRAM = "histogram"
    DOT_PLOT = "dot-plot"
    LOLLIPOP = "lollipop"
    # Part-to-whole
    PIE = "pie"
    DOUGHNUT = "doughnut"
    POLAR_AREA = "polarArea"
    RADIAL_BAR = "radialBar"
    RADIAL_COLUMN = "radial-column"
    FUNNEL = "funnel"
    GAUGE = "gauge"
    # Hierarchical
    TREEMAP = "treemap"
    SUNBURST = "sunburst"
    DENDROGRAM = "dendrogram"
    # Multi-series matrix
    RADAR = "radar"
    SPIDER = "spider"
    PARALLEL = "parallel"
    HEATMAP = "heatmap"
    MARIMEKKO = "marimekko"
    CHORD = "chord"
    # Flow / graph
    SANKEY = "sankey"
    NETWORK = "network"
    ALLUVIAL = "alluvial"
    # Temporal / rank
    SLOPE = "slope"
    BUMP = "bump"
    CALENDAR = "calendar"
    GANTT = "gantt"
    CANDLESTICK = "candlestick"
    WATERFALL = "waterfall"
    # Distribution
    BOXPLOT = "boxplot"
    VIOLIN = "violin"
    RIDGELINE = "ridgeline"
    STREAMGRAPH = "streamgraph"
    # Text
    WORDCLOUD = "wordcloud"
    # Annotated
    BULLET = "bullet"
    PICTOGRAM = "pictogram"

    @classmethod
    def resolve(cls, tag: Any) -> Optional["ChartKind"]:
        """
        Map a raw chart type tag to a kind.

        Exact values win, then known aliases, then a case/separator-insensitive
        match. Returns None for anything unrecognized.
        """
        if isinstance(tag, cls):
            return tag
        if tag is None:
            return None
        text = str(tag).strip()
        try:
            return cls(text)
        except ValueError:
            pass
        folded = _fold_tag(text)
        if folded in _KIND_ALIASES:
            return _KIND_ALIASES[folded]
        return _FOLDED_KINDS.get(folded)


def _fold_tag(text: str) -> str:
    return text.lower().replace("-", "").replace("_", "").replace(" ", "")


_FOLDED_KINDS: Dict[str, ChartKind] = {_fold_tag(kind.value): kind for kind in ChartKind}

_KIND_ALIASES: Dict[str, ChartKind] = {
    "dendogram": ChartKind.DENDROGRAM,
    "column": ChartKind.BAR,
    "donut": ChartKind.DOUGHNUT,
    "box": ChartKind.BOXPLOT,
    "splinearea": ChartKind.AREA_SPLINE,
    "dotplot": ChartKind.DOT_PLOT,
    "radialcolumn": ChartKind.RADIAL_COLUMN,
}


class ColorScheme(str, Enum):
    """Named palettes available to templates"""
    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    PURPLE = "purple"
    ORANGE = "orange"
    TEAL = "teal"
    PINK = "pink"
    INDIGO = "indigo"
    RAINBOW = "rainbow"
    PASTEL = "pastel"
    DARK = "dark"
    WARM = "warm"
    COOL = "cool"
    GRAY = "gray"


class Aggregation(str, Enum):
    """Reduction applied per (x, group) bucket"""
    NONE = "none"
    SUM = "sum"
    AVG = "avg"
    COUNT = "count"
    MIN = "min"
    MAX = "max"

    @classmethod
    def parse(cls, value: Any) -> Optional["Aggregation"]:
        """Lenient parse: None stays None, unknown methods degrade to NONE"""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if not text:
            return None
        if text in ("average", "mean"):
            return cls.AVG
        try:
            return cls(text)
        except ValueError:
            return cls.NONE

    @classmethod
    def reduces(cls, method: Optional["Aggregation"]) -> bool:
        """True for a method that buckets rows, i.e. anything but unset or `none`"""
        return method is not None and method != cls.NONE


_NULL_STRINGS = {"", "null", "none", "undefined"}


class ChartTemplate(BaseModel):
    """
    Declarative chart request: kind + column role bindings + presentation.

    Field names are snake_case in Python and camelCase on the wire
    (`xAxis`, `groupBy`, `colorScheme`, ...). Templates are immutable.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    chart_type: str
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None

    # Role bindings
    x_axis: Optional[str] = None
    y_axis: Optional[str] = None
    y_axis2: Optional[str] = Field(default=None, alias="yAxis2")
    group_by: Optional[str] = None
    size_axis: Optional[str] = None
    value_axis: Optional[str] = None
    source_axis: Optional[str] = None
    target_axis: Optional[str] = None
    date_axis: Optional[str] = None
    text_axis: Optional[str] = None
    label_axis: Optional[str] = None
    range_axis: Optional[str] = None
    task_axis: Optional[str] = None
    start_date_axis: Optional[str] = None
    end_date_axis: Optional[str] = None
    category_axis: Optional[str] = None
    open_axis: Optional[str] = None
    high_axis: Optional[str] = None
    low_axis: Optional[str] = None
    close_axis: Optional[str] = None
    dimensions: List[str] = Field(default_factory=list)
    stages: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)

    # Presentation
    color_scheme: Optional[str] = None
    aggregation: Optional[Aggregation] = None
    bins: Optional[int] = None
    gauge_min: Optional[float] = Field(default=None, alias="min")
    gauge_max: Optional[float] = Field(default=None, alias="max")
    icon_value: Optional[float] = None

    @field_validator("chart_type", mode="before")
    @classmethod
    def coerce_chart_type(cls, v):
        if v is None:
            raise ValueError("chartType is required")
        return str(v).strip()

    @field_validator("id", "title", "description", mode="before")
    @classmethod
    def coerce_text(cls, v):
        if v is None:
            return None
        return str(v)

    @field_validator(
        "x_axis", "y_axis", "y_axis2", "group_by", "size_axis", "value_axis",
        "source_axis", "target_axis", "date_axis", "text_axis", "label_axis",
        "range_axis", "task_axis", "start_date_axis", "end_date_axis",
        "category_axis", "open_axis", "high_axis", "low_axis", "close_axis",
        "color_scheme",
        mode="before",
    )
    @classmethod
    def coerce_column(cls, v):
        if v is None or isinstance(v, (list, dict)):
            return None
        text = str(v).strip()
        if text.lower() in _NULL_STRINGS:
            return None
        return text

    @field_validator("dimensions", "stages", "features", mode="before")
    @classmethod
    def coerce_column_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = [part for part in v.split(",")]
        if not isinstance(v, (list, tuple)):
            return []
        columns = []
        for item in v:
            if item is None:
                continue
            text = str(item).strip()
            if text and text.lower() not in _NULL_STRINGS:
                columns.append(text)
        return columns

    @field_validator("aggregation", mode="before")
    @classmethod
    def coerce_aggregation(cls, v):
        return Aggregation.parse(v)

    @field_validator("bins", mode="before")
    @classmethod
    def coerce_int(cls, v):
        if v is None or isinstance(v, bool):
            return None
        try:
            return int(float(v))
        except (TypeError, ValueError):
            return None

    @field_validator("gauge_min", "gauge_max", "icon_value", mode="before")
    @classmethod
    def coerce_float(cls, v):
        if v is None or isinstance(v, bool):
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_any(cls, template: Union["ChartTemplate", Dict[str, Any]]) -> "ChartTemplate":
        """Accept an already-built template or a raw mapping from upstream"""
        if isinstance(template, cls):
            return template
        return cls.model_validate(template)

    @property
    def kind(self) -> Optional[ChartKind]:
        return ChartKind.resolve(self.chart_type)

    @property
    def has_distinct_group(self) -> bool:
        return bool(self.group_by) and self.group_by != self.x_axis


class ChartFailure(BaseModel):
    """A template that produced no chart, with the reason"""
    index: int
    chart_type: Optional[str] = None
    error: Dict[str, Any]


class ChartBatchResult(BaseModel):
    """Charts built from a template batch; failures never abort the batch"""
    charts: List[Dict[str, Any]] = Field(default_factory=list)
    failures: List[ChartFailure] = Field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.charts)
