"""
Buffered logger base.

CachedLogger filters messages by level and keeps them in memory until
``dump`` hands them to ``save``. Subclasses decide where messages go.
"""

import threading
import traceback
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field

from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.utils.errors import ToolkitError


class LogLevel(IntEnum):
    """Logging levels ordered from the least to the most verbose."""

    NONE = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6

    @classmethod
    def parse(cls, value: Union[str, int, None], default: Optional["LogLevel"] = None) -> "LogLevel":
        """
        Convert a level name or number into a LogLevel.

        Accepts names in any case ("info", "WARNING") and numeric values.
        Unknown values return the default, or INFO when no default is given.
        """
        default = LogLevel.INFO if default is None else default
        if value is None:
            return default
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return default

        text = str(value).strip().upper()
        if text.isdigit():
            return cls.parse(int(text), default)
        if text == 'WARNING':
            return cls.WARN
        if text == 'CRITICAL':
            return cls.FATAL
        return cls.__members__.get(text, default)


class ErrorDescription(BaseModel):
    """Serializable description of an error attached to a log message."""

    type: str
    code: Optional[str] = None
    category: Optional[str] = None
    message: str = ''
    stack_trace: Optional[str] = None

    @classmethod
    def from_exception(cls, error: BaseException) -> "ErrorDescription":
        code = None
        category = None
        if isinstance(error, ToolkitError):
            code = error.error_code
            category = error.category.value

        stack_trace = None
        if error.__traceback__ is not None:
            stack_trace = ''.join(traceback.format_exception(type(error), error, error.__traceback__))

        return cls(
            type=type(error).__name__,
            code=code,
            category=category,
            message=str(error),
            stack_trace=stack_trace,
        )


class LogMessage(BaseModel):
    """A buffered log message."""

    time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: Optional[str] = None
    level: LogLevel
    correlation_id: Optional[str] = None
    error: Optional[ErrorDescription] = None
    message: str = ''


class CachedLogger(ABC):
    """
    Abstract logger that caches messages in memory.

    Configuration parameters:
        level:                  maximum level to log (default: INFO)
        source:                 source name written into every message
        options.max_cache_size: number of messages that triggers a dump (default: 100)
    """

    def __init__(self):
        self._level = LogLevel.INFO
        self._source: Optional[str] = None
        self._cache: List[LogMessage] = []
        self._max_cache_size = 100
        self._lock = threading.RLock()

    @property
    def level(self) -> LogLevel:
        return self._level

    @level.setter
    def level(self, value: Union[LogLevel, str, int]) -> None:
        self._level = LogLevel.parse(value, self._level)

    @property
    def source(self) -> Optional[str]:
        return self._source

    @source.setter
    def source(self, value: Optional[str]) -> None:
        self._source = value

    def configure(self, config: ConfigParams) -> None:
        self._level = LogLevel.parse(config.get_as_nullable_string('level'), self._level)
        self._source = config.get_as_string_with_default('source', self._source)
        self._max_cache_size = config.get_as_integer_with_default('options.max_cache_size', self._max_cache_size)

    def log(
        self,
        level: LogLevel,
        trace_id: Optional[str],
        error: Optional[BaseException],
        message: str,
        *args: Any,
    ) -> None:
        """
        Log a message at the given level.

        Args:
            level: Message level
            trace_id: Transaction id used to trace execution through the call chain
            error: Optional error to attach
            message: Message text with optional %-style placeholders
            *args: Arguments for the message placeholders
        """
        if level > self._level or level == LogLevel.NONE:
            return

        if args:
            message = message % args

        self._write(LogMessage(
            source=self._source,
            level=level,
            correlation_id=trace_id,
            error=ErrorDescription.from_exception(error) if error is not None else None,
            message=message or '',
        ))

    def fatal(self, trace_id: Optional[str], message: str, *args: Any, error: Optional[BaseException] = None) -> None:
        self.log(LogLevel.FATAL, trace_id, error, message, *args)

    def error(self, trace_id: Optional[str], message: str, *args: Any, error: Optional[BaseException] = None) -> None:
        self.log(LogLevel.ERROR, trace_id, error, message, *args)

    def warn(self, trace_id: Optional[str], message: str, *args: Any, error: Optional[BaseException] = None) -> None:
        self.log(LogLevel.WARN, trace_id, error, message, *args)

    def info(self, trace_id: Optional[str], message: str, *args: Any, error: Optional[BaseException] = None) -> None:
        self.log(LogLevel.INFO, trace_id, error, message, *args)

    def debug(self, trace_id: Optional[str], message: str, *args: Any, error: Optional[BaseException] = None) -> None:
        self.log(LogLevel.DEBUG, trace_id, error, message, *args)

    def trace(self, trace_id: Optional[str], message: str, *args: Any, error: Optional[BaseException] = None) -> None:
        self.log(LogLevel.TRACE, trace_id, error, message, *args)

    def _write(self, message: LogMessage) -> None:
        with self._lock:
            self._cache.append(message)
            full = len(self._cache) >= self._max_cache_size

        if full:
            self.dump()

    @abstractmethod
    def save(self, messages: List[LogMessage]) -> None:
        """Save buffered messages to the destination."""

    def clear(self) -> None:
        with self._lock:
            self._cache = []

    def dump(self) -> None:
        """Hand all buffered messages to ``save`` and empty the buffer."""
        with self._lock:
            if not self._cache:
                return
            messages = self._cache
            self._cache = []

        self.save(messages)
