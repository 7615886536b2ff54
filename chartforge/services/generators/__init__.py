"""
Chart-family generators

Each generator takes (template, rows) and returns the chart's data block:
`datasets` always, plus `labels` and any structural keys the family needs
(nodes, links, matrix, words, tasks, ...). Options are built separately.
"""

from chartforge.services.generators.annotated import build_bullet, build_pictogram
from chartforge.services.generators.cartesian import (
    build_bubble, build_dot_plot, build_histogram, build_lollipop, build_mixed, build_scatter, build_xy_chart,
)
from chartforge.services.generators.distribution import (
    build_boxplot, build_ridgeline, build_streamgraph, build_violin,
)
from chartforge.services.generators.flow import build_alluvial, build_network, build_sankey
from chartforge.services.generators.hierarchical import build_dendrogram, build_sunburst, build_treemap
from chartforge.services.generators.matrix import (
    build_chord, build_heatmap, build_marimekko, build_parallel, build_radar,
)
from chartforge.services.generators.part_to_whole import build_funnel, build_gauge, build_slices
from chartforge.services.generators.temporal import (
    build_bump, build_calendar, build_candlestick, build_gantt, build_slope, build_waterfall,
)
from chartforge.services.generators.text import build_wordcloud

__all__ = [
    "build_alluvial",
    "build_boxplot",
    "build_bubble",
    "build_bullet",
    "build_bump",
    "build_calendar",
    "build_candlestick",
    "build_chord",
    "build_dendrogram",
    "build_dot_plot",
    "build_funnel",
    "build_gantt",
    "build_gauge",
    "build_heatmap",
    "build_histogram",
    "build_lollipop",
    "build_marimekko",
    "build_mixed",
    "build_network",
    "build_parallel",
    "build_pictogram",
    "build_radar",
    "build_ridgeline",
    "build_sankey",
    "build_scatter",
    "build_slices",
    "build_slope",
    "build_streamgraph",
    "build_sunburst",
    "build_treemap",
    "build_violin",
    "build_waterfall",
    "build_wordcloud",
    "build_xy_chart",
]
