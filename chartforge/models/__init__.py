from chartforge.models.schemas import (
    Aggregation, ChartBatchResult, ChartFailure, ChartKind, ChartTemplate, ColorScheme,
)

__all__ = ["Aggregation", "ChartBatchResult", "ChartFailure", "ChartKind", "ChartTemplate", "ColorScheme"]
