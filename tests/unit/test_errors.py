"""
Unit tests for the toolkit error taxonomy.
"""

import pytest

from aws_toolkit.utils.errors import (
    BadRequestError,
    ConfigurationError,
    DeserializationError,
    ErrorCategory,
    InvocationError,
    NotOpenedError,
    UnknownError,
    ValidationError,
    error_from_dict,
    format_error_response,
    wrap_error,
)


class TestToolkitError:
    """Test cases for ToolkitError and its subclasses."""

    def test_to_dict(self):
        """Test the dictionary form of an error."""
        cause = RuntimeError("boom")
        error = InvocationError(
            message="Failed to invoke lambda function",
            error_code="CALL_FAILED",
            trace_id="123",
            details={"command": "ping"},
            cause=cause,
        )

        data = error.to_dict()

        assert data["category"] == "INVOCATION"
        assert data["code"] == "CALL_FAILED"
        assert data["status"] == 500
        assert data["trace_id"] == "123"
        assert data["details"] == {"command": "ping"}
        assert data["cause"] == "boom"
        assert error.__cause__ is cause

    def test_with_details_chains(self):
        """Test attaching details fluently."""
        error = BadRequestError("Action ping was not found", error_code="NO_ACTION").with_details("command", "ping")

        assert error.details == {"command": "ping"}
        assert error.status == 400

    def test_not_opened_error(self):
        """Test the not-opened error."""
        error = NotOpenedError("LambdaClient", trace_id="123")

        assert error.error_code == "NOT_OPENED"
        assert error.category == ErrorCategory.INVALID_STATE
        assert "LambdaClient" in error.message

    def test_deserialization_is_invocation_error(self):
        """Test the deserialization error hierarchy."""
        assert issubclass(DeserializationError, InvocationError)


class TestErrorFromDict:
    """Test cases for rebuilding errors from their dictionary form."""

    @pytest.mark.parametrize("error", [
        ConfigurationError("bad config", error_code="NO_AWS_CONNECTION", trace_id="1"),
        BadRequestError("missing", error_code="NO_COMMAND", trace_id="2"),
        InvocationError("failed", error_code="CALL_FAILED", trace_id="3"),
        DeserializationError("bad payload", error_code="DESERIALIZATION_FAILED"),
        NotOpenedError("CloudWatchLogger", trace_id="4"),
        UnknownError("oops"),
    ])
    def test_rebuilds_same_class(self, error):
        """Test that category, code and trace id survive the round trip."""
        rebuilt = error_from_dict(error.to_dict())

        assert type(rebuilt) is type(error)
        assert rebuilt.error_code == error.error_code
        assert rebuilt.trace_id == error.trace_id
        assert rebuilt.message == error.message

    def test_rebuilds_validation_error(self):
        """Test that field errors survive the round trip."""
        error = ValidationError("Request validation failed", field_errors=[{"field": "id", "message": "required"}])

        rebuilt = error_from_dict(error.to_dict())

        assert isinstance(rebuilt, ValidationError)
        assert rebuilt.field_errors == [{"field": "id", "message": "required"}]

    def test_unknown_category(self):
        """Test that unknown categories become UnknownError."""
        rebuilt = error_from_dict({"category": "SOMETHING", "message": "x", "code": "X"})

        assert isinstance(rebuilt, UnknownError)
        assert rebuilt.error_code == "X"


class TestErrorHelpers:
    """Test cases for wrap_error and format_error_response."""

    def test_wrap_error_keeps_toolkit_errors(self):
        """Test that toolkit errors are returned unchanged."""
        error = ConfigurationError("bad")

        assert wrap_error(error) is error

    def test_wrap_error_wraps_others(self):
        """Test that other exceptions are wrapped."""
        cause = KeyError("id")

        error = wrap_error(cause, trace_id="123")

        assert isinstance(error, UnknownError)
        assert error.trace_id == "123"
        assert error.__cause__ is cause

    def test_format_error_response(self):
        """Test the dispatcher result shape."""
        response = format_error_response(BadRequestError("missing", error_code="NO_COMMAND"))

        assert list(response.keys()) == ["error"]
        assert response["error"]["code"] == "NO_COMMAND"
