"""Buffered logging and the CloudWatch Logs sink."""

from aws_toolkit.log.cached_logger import CachedLogger, ErrorDescription, LogLevel, LogMessage
from aws_toolkit.log.cloudwatch_logger import CloudWatchLogger, format_message_text

__all__ = [
    "CachedLogger",
    "CloudWatchLogger",
    "ErrorDescription",
    "LogLevel",
    "LogMessage",
    "format_message_text",
]
