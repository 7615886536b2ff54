"""
Services package for the chart spec engine
Contains the aggregator, color resolver, statistics helpers, chart generators,
option builders, the dispatcher and the template parser
"""

__all__ = [
    'rows',
    'aggregator',
    'colors',
    'tooltips',
    'statistics',
    'generators',
    'chart_options',
    'chart_spec_builder',
    'template_parser',
]
