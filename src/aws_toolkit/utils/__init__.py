"""Shared utilities: observability, errors and the periodic flush timer."""

from aws_toolkit.utils.errors import (
    BadRequestError,
    ConfigurationError,
    DeserializationError,
    ErrorCategory,
    InvalidActionError,
    InvocationError,
    NotOpenedError,
    ToolkitError,
    UnknownError,
    ValidationError,
)
from aws_toolkit.utils.flush_timer import FlushTimer
from aws_toolkit.utils.observability import logger, metrics, tracer

__all__ = [
    "BadRequestError",
    "ConfigurationError",
    "DeserializationError",
    "ErrorCategory",
    "FlushTimer",
    "InvalidActionError",
    "InvocationError",
    "NotOpenedError",
    "ToolkitError",
    "UnknownError",
    "ValidationError",
    "logger",
    "metrics",
    "tracer",
]
