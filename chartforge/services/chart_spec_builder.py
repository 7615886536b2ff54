"""
Chart Spec Builder - Converts chart templates plus rows into renderer-ready chart specs

Every chart kind maps to a generator (data block), an option builder and the
renderer type it is drawn with. The table below must cover every ChartKind;
the module refuses to import otherwise.
"""

from typing import Any, Callable, Dict, NamedTuple, Optional, Sequence, Union

import structlog
from pydantic import ValidationError

from chartforge.models.schemas import ChartBatchResult, ChartFailure, ChartKind, ChartTemplate
from chartforge.services import chart_options as opts
from chartforge.services import generators as gen
from chartforge.services.generators.common import ChartData
from chartforge.services.rows import Row, rows_as_dicts, sample_rows_for_charts
from chartforge.utils.errors import (
    ChartUsageError, ErrorCode, create_error_response, error_response_for_exception,
)

logger = structlog.get_logger(__name__)

Generator = Callable[[ChartTemplate, Sequence[Row]], ChartData]
TemplateInput = Union[ChartTemplate, Dict[str, Any]]


class ChartHandler(NamedTuple):
    generator: Generator
    options: opts.OptionsBuilder
    renderer_type: str


CHART_HANDLERS: Dict[ChartKind, ChartHandler] = {
    # Cartesian XY
    ChartKind.LINE: ChartHandler(gen.build_xy_chart, opts.xy_options, "line"),
    ChartKind.BAR: ChartHandler(gen.build_xy_chart, opts.xy_options, "bar"),
    ChartKind.HORIZONTAL_BAR: ChartHandler(gen.build_xy_chart, opts.xy_options, "bar"),
    ChartKind.AREA: ChartHandler(gen.build_xy_chart, opts.xy_options, "line"),
    ChartKind.STEP: ChartHandler(gen.build_xy_chart, opts.xy_options, "line"),
    ChartKind.SPLINE: ChartHandler(gen.build_xy_chart, opts.xy_options, "line"),
    ChartKind.AREA_SPLINE: ChartHandler(gen.build_xy_chart, opts.xy_options, "line"),
    ChartKind.SCATTER: ChartHandler(gen.build_scatter, opts.linear_xy_options, "scatter"),
    ChartKind.BUBBLE: ChartHandler(gen.build_bubble, opts.linear_xy_options, "bubble"),
    ChartKind.MIXED: ChartHandler(gen.build_mixed, opts.mixed_options, "bar"),
    ChartKind.HISTOGRAM: ChartHandler(gen.build_histogram, opts.histogram_options, "bar"),
    ChartKind.DOT_PLOT: ChartHandler(gen.build_dot_plot, opts.xy_options, "line"),
    ChartKind.LOLLIPOP: ChartHandler(gen.build_lollipop, opts.xy_options, "bar"),
    # Part-to-whole
    ChartKind.PIE: ChartHandler(gen.build_slices, opts.share_options, "pie"),
    ChartKind.DOUGHNUT: ChartHandler(gen.build_slices, opts.share_options, "doughnut"),
    ChartKind.POLAR_AREA: ChartHandler(gen.build_slices, opts.share_options, "polarArea"),
    ChartKind.RADIAL_BAR: ChartHandler(gen.build_slices, opts.radial_options, "polarArea"),
    ChartKind.RADIAL_COLUMN: ChartHandler(gen.build_slices, opts.radial_options, "polarArea"),
    ChartKind.FUNNEL: ChartHandler(gen.build_funnel, opts.label_value_options, "funnel"),
    ChartKind.GAUGE: ChartHandler(gen.build_gauge, opts.gauge_options, "doughnut"),
    # Hierarchical
    ChartKind.TREEMAP: ChartHandler(gen.build_treemap, opts.label_value_options, "treemap"),
    ChartKind.SUNBURST: ChartHandler(gen.build_sunburst, opts.label_value_options, "doughnut"),
    ChartKind.DENDROGRAM: ChartHandler(gen.build_dendrogram, opts.dendrogram_options, "dendrogram"),
    # Multi-series matrix
    ChartKind.RADAR: ChartHandler(gen.build_radar, opts.radar_options, "radar"),
    ChartKind.SPIDER: ChartHandler(gen.build_radar, opts.radar_options, "radar"),
    ChartKind.PARALLEL: ChartHandler(gen.build_parallel, opts.parallel_options, "line"),
    ChartKind.HEATMAP: ChartHandler(gen.build_heatmap, opts.heatmap_options, "matrix"),
    ChartKind.MARIMEKKO: ChartHandler(gen.build_marimekko, opts.marimekko_options, "bar"),
    ChartKind.CHORD: ChartHandler(gen.build_chord, opts.flow_options, "chord"),
    # Flow / graph
    ChartKind.SANKEY: ChartHandler(gen.build_sankey, opts.flow_options, "sankey"),
    ChartKind.NETWORK: ChartHandler(gen.build_network, opts.flow_options, "network"),
    ChartKind.ALLUVIAL: ChartHandler(gen.build_alluvial, opts.flow_options, "sankey"),
    # Temporal / rank
    ChartKind.SLOPE: ChartHandler(gen.build_slope, opts.rank_options, "line"),
    ChartKind.BUMP: ChartHandler(gen.build_bump, opts.rank_options, "line"),
    ChartKind.CALENDAR: ChartHandler(gen.build_calendar, opts.calendar_options, "matrix"),
    ChartKind.GANTT: ChartHandler(gen.build_gantt, opts.gantt_options, "bar"),
    ChartKind.CANDLESTICK: ChartHandler(gen.build_candlestick, opts.xy_options, "candlestick"),
    ChartKind.WATERFALL: ChartHandler(gen.build_waterfall, opts.stacked_xy_options, "bar"),
    # Distribution
    ChartKind.BOXPLOT: ChartHandler(gen.build_boxplot, opts.boxplot_options, "boxplot"),
    ChartKind.VIOLIN: ChartHandler(gen.build_violin, opts.density_options, "violin"),
    ChartKind.RIDGELINE: ChartHandler(gen.build_ridgeline, opts.density_options, "line"),
    ChartKind.STREAMGRAPH: ChartHandler(gen.build_streamgraph, opts.stacked_xy_options, "line"),
    # Text
    ChartKind.WORDCLOUD: ChartHandler(gen.build_wordcloud, opts.wordcloud_options, "wordCloud"),
    # Annotated
    ChartKind.BULLET: ChartHandler(gen.build_bullet, opts.bullet_options, "bar"),
    ChartKind.PICTOGRAM: ChartHandler(gen.build_pictogram, opts.pictogram_options, "bar"),
}

# Unknown tags are drawn as plain bar charts
FALLBACK_HANDLER = ChartHandler(gen.build_xy_chart, opts.xy_options, "bar")

_missing_kinds = [kind.value for kind in ChartKind if kind not in CHART_HANDLERS]
if _missing_kinds:
    raise RuntimeError(f"No chart handler registered for: {', '.join(_missing_kinds)}")


def handler_for(kind: Optional[ChartKind]) -> ChartHandler:
    if kind is None:
        return FALLBACK_HANDLER
    return CHART_HANDLERS[kind]


class ChartSpecBuilder:
    """
    Builds renderer-ready chart specs from templates and rows.
    Converts template + rows → {id, type, kind, title, data, options}.
    """

    def build_chart_spec(
        self,
        template: TemplateInput,
        rows: Sequence[Row],
        default_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Build one chart spec.

        Args:
            template: ChartTemplate or the raw template mapping from upstream
            rows: Dataset rows (column name -> scalar)
            default_id: Id used when the template carries none

        Returns:
            Chart spec dict with data block and options

        Raises:
            ChartUsageError: The chart kind's required role binding is missing
            ValidationError: The raw template has no usable chartType
        """
        template = ChartTemplate.from_any(template)
        kind = template.kind
        if kind is None:
            logger.warning(
                "Unknown chart type - falling back to bar chart",
                chart_type=template.chart_type,
            )
        handler = handler_for(kind)

        data = handler.generator(template, rows)
        options = handler.options(template, data)

        return {
            "id": template.id or default_id or "chart-1",
            "type": handler.renderer_type,
            "kind": kind.value if kind is not None else template.chart_type,
            "title": template.title or "",
            "data": data,
            "options": options,
        }

    def build_chart_specs(
        self,
        templates: Sequence[TemplateInput],
        rows: Sequence[Row],
        sample: bool = True,
    ) -> ChartBatchResult:
        """
        Build a chart spec per template; one failing template never aborts the rest.

        Args:
            templates: Templates in display order
            rows: Dataset rows shared by all charts
            sample: Stride-sample large datasets before building

        Returns:
            ChartBatchResult with charts in template order and per-template failures
        """
        result = ChartBatchResult()
        if not templates:
            logger.warning("No chart templates provided", row_count=len(rows) if rows else 0)
            return result

        chart_rows = rows_as_dicts(rows or [])
        if sample:
            chart_rows = sample_rows_for_charts(chart_rows)
        logger.info("Building charts", template_count=len(templates), row_count=len(chart_rows))

        for index, template in enumerate(templates):
            chart_type = _chart_type_of(template)
            try:
                logger.debug("Building chart", position=index + 1, chart_type=chart_type)
                spec = self.build_chart_spec(template, chart_rows, default_id=f"chart-{index + 1}")
                result.charts.append(spec)
                logger.debug("Built chart", chart_id=spec["id"], kind=spec["kind"])
            except ChartUsageError as e:
                logger.warning("Chart template unusable", position=index + 1, chart_type=chart_type, error=e.message)
                result.failures.append(ChartFailure(index=index, chart_type=chart_type, error=e.to_response()))
            except ValidationError as e:
                logger.warning("Chart template invalid", position=index + 1, error_count=e.error_count())
                error = create_error_response(
                    ErrorCode.TEMPLATE_VALIDATION_ERROR,
                    details={"fields": [".".join(str(part) for part in err["loc"]) for err in e.errors()]},
                )
                result.failures.append(ChartFailure(index=index, chart_type=chart_type, error=error))
            except Exception as e:
                logger.error("Failed to build chart", position=index + 1, chart_type=chart_type, exc_info=True)
                error = error_response_for_exception(e, ErrorCode.CHART_BUILD_ERROR)
                result.failures.append(ChartFailure(index=index, chart_type=chart_type, error=error))

        logger.info(
            "Built charts",
            built=result.succeeded,
            failed=len(result.failures),
            template_count=len(templates),
        )
        return result


def _chart_type_of(template: Any) -> Optional[str]:
    if isinstance(template, ChartTemplate):
        return template.chart_type
    if isinstance(template, dict):
        value = template.get("chartType", template.get("chart_type"))
        return str(value) if value is not None else None
    return None


# Global instance
chart_spec_builder = ChartSpecBuilder()


def build_chart_spec(template: TemplateInput, rows: Sequence[Row], default_id: Optional[str] = None) -> Dict[str, Any]:
    return chart_spec_builder.build_chart_spec(template, rows, default_id)


def build_chart_specs(templates: Sequence[TemplateInput], rows: Sequence[Row], sample: bool = True) -> ChartBatchResult:
    return chart_spec_builder.build_chart_specs(templates, rows, sample)
