"""
Error taxonomy for the AWS toolkit.

Every component raises subclasses of ToolkitError so callers can tell
configuration faults apart from remote invocation failures. Errors serialize
to plain dictionaries, which is how the Lambda dispatcher returns them through
the result channel and how LambdaClient rebuilds them on the calling side.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Type

from aws_toolkit.utils.observability import logger, metrics, tracer


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    UNKNOWN = "UNKNOWN"
    CONFIGURATION = "CONFIGURATION"
    INVALID_STATE = "INVALID_STATE"
    INVALID_ACTION = "INVALID_ACTION"
    INVOCATION = "INVOCATION"
    DESERIALIZATION = "DESERIALIZATION"
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION = "VALIDATION"


class ToolkitError(Exception):
    """Base exception class for toolkit errors."""

    category: ErrorCategory = ErrorCategory.UNKNOWN
    status: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN",
        trace_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.trace_id = trace_id
        self.details = dict(details or {})
        self.cause = cause
        self.error_id = str(uuid.uuid4())
        if cause is not None:
            self.__cause__ = cause

    def with_details(self, key: str, value: Any) -> "ToolkitError":
        """Attach a detail value and return the same error for chaining."""
        self.details[key] = value
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging and response."""
        return {
            "error_id": self.error_id,
            "category": self.category.value,
            "code": self.error_code,
            "status": self.status,
            "message": self.message,
            "trace_id": self.trace_id,
            "details": self.details or None,
            "cause": str(self.cause) if self.cause is not None else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class UnknownError(ToolkitError):
    """Raised for failures that do not fit any other category."""


class ConfigurationError(ToolkitError):
    """Raised when configuration cannot produce a usable component."""
    category = ErrorCategory.CONFIGURATION


class NotOpenedError(ToolkitError):
    """Raised when an operation needs a component that was never opened."""
    category = ErrorCategory.INVALID_STATE

    def __init__(self, component: str, trace_id: Optional[str] = None):
        super().__init__(
            message=f"{component} is not opened",
            error_code="NOT_OPENED",
            trace_id=trace_id,
            details={"component": component},
        )
        self.component = component


class InvalidActionError(ToolkitError):
    """Raised when a call is made without a usable command."""
    category = ErrorCategory.INVALID_ACTION
    status = 400


class InvocationError(ToolkitError):
    """Raised when a remote call fails in transport or on the remote side."""
    category = ErrorCategory.INVOCATION


class DeserializationError(InvocationError):
    """Raised when a remote call succeeded but its payload cannot be decoded."""
    category = ErrorCategory.DESERIALIZATION


class BadRequestError(ToolkitError):
    """Raised when an incoming request cannot be routed."""
    category = ErrorCategory.BAD_REQUEST
    status = 400


class ValidationError(BadRequestError):
    """Raised when request parameters fail schema validation."""
    category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        field_errors: Optional[list] = None,
        trace_id: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            trace_id=trace_id,
            details={"field_errors": field_errors or []},
        )
        self.field_errors = field_errors or []


_ERRORS_BY_CATEGORY: Dict[str, Type[ToolkitError]] = {
    ErrorCategory.UNKNOWN.value: UnknownError,
    ErrorCategory.CONFIGURATION.value: ConfigurationError,
    ErrorCategory.INVALID_ACTION.value: InvalidActionError,
    ErrorCategory.INVOCATION.value: InvocationError,
    ErrorCategory.DESERIALIZATION.value: DeserializationError,
    ErrorCategory.BAD_REQUEST.value: BadRequestError,
}


def error_from_dict(data: Dict[str, Any]) -> ToolkitError:
    """
    Rebuild an error from its dictionary form.

    Args:
        data: Dictionary produced by ToolkitError.to_dict

    Returns:
        Error instance of the matching category
    """
    category = data.get("category") or ErrorCategory.UNKNOWN.value
    message = data.get("message") or "Unknown error"
    code = data.get("code") or "UNKNOWN"
    trace_id = data.get("trace_id")
    details = data.get("details") or {}

    if category == ErrorCategory.VALIDATION.value:
        return ValidationError(message, field_errors=details.get("field_errors"), trace_id=trace_id)
    if category == ErrorCategory.INVALID_STATE.value:
        return NotOpenedError(details.get("component") or "Component", trace_id=trace_id)

    error_class = _ERRORS_BY_CATEGORY.get(category, UnknownError)
    return error_class(message, error_code=code, trace_id=trace_id, details=details)


def wrap_error(error: BaseException, trace_id: Optional[str] = None) -> ToolkitError:
    """Return toolkit errors unchanged and wrap anything else as UnknownError."""
    if isinstance(error, ToolkitError):
        return error
    return UnknownError(
        message=str(error) or type(error).__name__,
        error_code="UNKNOWN",
        trace_id=trace_id,
        cause=error,
    )


def format_error_response(error: ToolkitError) -> Dict[str, Any]:
    """Format error as a dispatcher result payload."""
    return {"error": error.to_dict()}


@tracer.capture_method
def log_error_metrics(error: ToolkitError) -> None:
    """Log error metrics for monitoring and alerting."""

    metrics.add_metric(name="ErrorCount", unit="Count", value=1)
    metrics.add_metric(name=f"Error{error.category.value.title().replace('_', '')}Count", unit="Count", value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_annotation("error_category", error.category.value)

    logger.error(
        "Toolkit error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_category": error.category.value,
            "error_message": error.message,
            "trace_id": error.trace_id,
            "details": error.details or None,
        }
    )
