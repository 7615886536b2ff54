"""
Tests for Error Handling Utilities
"""

from chartforge.utils.errors import (
    ErrorCode,
    USER_FRIENDLY_MESSAGES,
    ChartForgeError,
    ChartUsageError,
    TemplateParseError,
    create_error_response,
    error_response_for_exception,
)


class TestErrorCode:
    """Test ErrorCode enum"""

    def test_error_codes_have_friendly_messages(self):
        """Test that all error codes have user-friendly messages"""
        for code in ErrorCode:
            assert code in USER_FRIENDLY_MESSAGES, f"Missing friendly message for {code}"

    def test_friendly_messages_are_user_safe(self):
        """Test that friendly messages don't contain internal details"""
        unsafe_terms = ["traceback", "stack", "exception", "keyerror", "none"]

        for code, message in USER_FRIENDLY_MESSAGES.items():
            message_lower = message.lower()
            for term in unsafe_terms:
                assert term not in message_lower, \
                    f"Error message for {code} contains unsafe term '{term}'"


class TestCreateErrorResponse:
    """Test create_error_response function"""

    def test_creates_standard_format(self):
        """Test that error response has standard format"""
        response = create_error_response(ErrorCode.CHART_BUILD_ERROR)

        assert response["error"]["code"] == "CHART_BUILD_ERROR"
        assert response["error"]["message"] == USER_FRIENDLY_MESSAGES[ErrorCode.CHART_BUILD_ERROR]
        assert "details" not in response["error"]

    def test_custom_message_and_details(self):
        """Test that a custom message and details are included"""
        response = create_error_response(
            ErrorCode.TEMPLATE_PARSE_ERROR,
            message="Invalid JSON",
            details={"position": 3},
        )

        assert response["error"]["message"] == "Invalid JSON"
        assert response["error"]["details"] == {"position": 3}


class TestChartErrors:
    """Test the chart engine exception types"""

    def test_usage_error_names_requirement(self):
        """Test that usage errors name the chart and the missing binding"""
        error = ChartUsageError("slope", "exactly 2 time points")

        assert str(error) == "slope chart requires exactly 2 time points"
        assert error.chart_type == "slope"
        assert error.requirement == "exactly 2 time points"
        assert error.code == ErrorCode.CHART_USAGE_ERROR

    def test_usage_error_response(self):
        """Test that usage errors map to their own error code"""
        response = ChartUsageError("alluvial", "at least 2 stages").to_response()

        assert response["error"]["code"] == "CHART_USAGE_ERROR"
        assert response["error"]["details"]["requirement"] == "at least 2 stages"

    def test_error_classes_are_distinct(self):
        """Test that parse errors and usage errors can be told apart"""
        assert issubclass(ChartUsageError, ChartForgeError)
        assert issubclass(TemplateParseError, ChartForgeError)
        assert not issubclass(TemplateParseError, ChartUsageError)


class TestErrorResponseForException:
    """Test mapping arbitrary exceptions to payloads"""

    def test_engine_errors_keep_their_code(self):
        """Test that engine errors are reported with their own code"""
        response = error_response_for_exception(TemplateParseError("bad text"))

        assert response["error"]["code"] == "TEMPLATE_PARSE_ERROR"
        assert response["error"]["message"] == "bad text"

    def test_unexpected_errors_do_not_leak_message(self):
        """Test that unexpected exception text is not exposed"""
        response = error_response_for_exception(KeyError("secret column"))

        assert response["error"]["code"] == "INTERNAL_ERROR"
        assert "secret column" not in response["error"]["message"]
        assert response["error"]["details"] == {"error_type": "KeyError"}

    def test_fallback_code_for_unexpected_errors(self):
        """Test that callers can report unexpected errors under their own code"""
        response = error_response_for_exception(ValueError("bad cell"), ErrorCode.CHART_BUILD_ERROR)

        assert response["error"]["code"] == "CHART_BUILD_ERROR"
        assert response["error"]["message"] == USER_FRIENDLY_MESSAGES[ErrorCode.CHART_BUILD_ERROR]

    def test_engine_errors_ignore_fallback_code(self):
        """Test that engine errors are never relabelled"""
        response = error_response_for_exception(
            ChartUsageError("slope", "exactly 2 time points"), ErrorCode.CHART_BUILD_ERROR
        )

        assert response["error"]["code"] == "CHART_USAGE_ERROR"
