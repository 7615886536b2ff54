"""
Centralized Error Handling Utilities

Two disjoint classes of problems exist when turning templates into charts:
usage errors (a kind's mandatory role binding is missing) are raised to the
caller, while data-quality faults are absorbed by the generators. The error
payload helpers give failed charts a consistent shape inside batch results.
"""

from typing import Optional, Dict, Any
from enum import Enum
import structlog

logger = structlog.get_logger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for consistent chart build results"""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CHART_USAGE_ERROR = "CHART_USAGE_ERROR"
    CHART_BUILD_ERROR = "CHART_BUILD_ERROR"
    TEMPLATE_PARSE_ERROR = "TEMPLATE_PARSE_ERROR"
    TEMPLATE_VALIDATION_ERROR = "TEMPLATE_VALIDATION_ERROR"


USER_FRIENDLY_MESSAGES = {
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred while building the chart.",
    ErrorCode.CHART_USAGE_ERROR: "The chart template is missing a field this chart type requires.",
    ErrorCode.CHART_BUILD_ERROR: "The chart could not be built from the provided data.",
    ErrorCode.TEMPLATE_PARSE_ERROR: "The chart templates could not be read.",
    ErrorCode.TEMPLATE_VALIDATION_ERROR: "The chart template contains invalid values.",
}


class ChartForgeError(Exception):
    """Base class for errors raised by the chart engine"""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> Dict[str, Any]:
        return create_error_response(self.code, self.message, self.details)


class ChartUsageError(ChartForgeError):
    """
    A chart kind's mandatory role binding is missing or unusable.

    Non-recoverable for that chart: the caller must fix the template or
    skip the chart.
    """

    code = ErrorCode.CHART_USAGE_ERROR

    def __init__(self, chart_type: str, requirement: str):
        super().__init__(
            f"{chart_type} chart requires {requirement}",
            details={"chart_type": chart_type, "requirement": requirement},
        )
        self.chart_type = chart_type
        self.requirement = requirement


class TemplateParseError(ChartForgeError):
    """Upstream text could not be turned into a template list (recoverable)"""

    code = ErrorCode.TEMPLATE_PARSE_ERROR


def create_error_response(
    code: ErrorCode,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        code: Error code enum
        message: Optional custom message (defaults to user-friendly message)
        details: Optional additional details

    Returns:
        Standardized error response dict
    """
    return {
        "error": {
            "code": code.value,
            "message": message or USER_FRIENDLY_MESSAGES.get(code, USER_FRIENDLY_MESSAGES[ErrorCode.INTERNAL_ERROR]),
            **({"details": details} if details else {}),
        }
    }


def error_response_for_exception(
    exc: Exception,
    fallback_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
) -> Dict[str, Any]:
    """
    Map any exception raised while building a chart to an error payload.

    Engine errors keep their own code and message; anything else is reported
    under fallback_code without leaking the exception text.
    """
    if isinstance(exc, ChartForgeError):
        return exc.to_response()
    logger.debug("Mapping unexpected exception", error_type=type(exc).__name__, code=fallback_code.value)
    return create_error_response(fallback_code, details={"error_type": type(exc).__name__})
