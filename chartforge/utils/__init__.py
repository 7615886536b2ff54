"""Utilities package for the chart engine"""

from chartforge.utils.errors import ChartForgeError, ChartUsageError, TemplateParseError, ErrorCode

__all__ = ['ChartForgeError', 'ChartUsageError', 'TemplateParseError', 'ErrorCode']
