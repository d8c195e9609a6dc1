"""
CloudWatch Logs logger.

Buffers log messages and periodically writes them to a CloudWatch Logs stream
with ``put_log_events``. The stream's sequence token is refreshed before every
write and recovered once when CloudWatch rejects it.
"""

import threading
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.config.env_vars import get_toolkit_env_vars
from aws_toolkit.connect.client_factory import create_client
from aws_toolkit.connect.connection_params import AwsConnectionParams
from aws_toolkit.connect.connection_resolver import AwsConnectionResolver
from aws_toolkit.log.cached_logger import CachedLogger, LogMessage
from aws_toolkit.utils.errors import InvocationError, NotOpenedError
from aws_toolkit.utils.flush_timer import FlushTimer
from aws_toolkit.utils.observability import logger

_SEQUENCE_TOKEN_ERRORS = ('InvalidSequenceTokenException', 'DataAlreadyAcceptedException')


def format_message_text(message: LogMessage) -> str:
    """
    Format a log message as a single line of text.

    The layout is ``[source:correlation_id:LEVEL] message`` followed by the
    error message and stack trace when an error is attached. Missing source
    and correlation id are written as ``---``.
    """
    result = f"[{message.source or '---'}:{message.correlation_id or '---'}:{message.level.name}] {message.message}"

    if message.error is not None:
        result += ": " if message.message else "Error: "
        result += message.error.message
        if message.error.stack_trace:
            result += " StackTrace: " + message.error.stack_trace

    return result


class CloudWatchLogger(CachedLogger):
    """
    Logger that writes messages to AWS CloudWatch Logs.

    Configuration parameters:
        connection.*:            AWS connection, see AwsConnectionResolver
        credential.*:            AWS credentials, see AwsConnectionResolver
        group:                   log group name (default: "undefined")
        stream:                  log stream name (default: source, or POWERTOOLS_SERVICE_NAME)
        level:                   maximum level to log (default: INFO)
        options.connect_timeout: connection timeout in milliseconds (default: 30 sec)
        options.interval:        interval in milliseconds between saves (default: 5 mins)
        options.max_cache_size:  number of messages that triggers a save (default: 100)

    Example:
        cloudwatch_logger = CloudWatchLogger()
        cloudwatch_logger.configure(ConfigParams.from_tuples(
            'connection.region', 'us-east-1',
            'connection.arn', 'arn:aws:logs:us-east-1:123456789012:log-group:orders',
            'group', 'orders',
            'stream', 'orders-api',
        ))
        cloudwatch_logger.open('123')
        cloudwatch_logger.error('123', 'Order %s was rejected', order_id, error=e)
    """

    def __init__(self, resolver: Optional[AwsConnectionResolver] = None):
        super().__init__()
        self._resolver = resolver or AwsConnectionResolver()
        self._connection: Optional[AwsConnectionParams] = None
        self._connect_timeout = 30000
        self._interval = 300000
        self._client: Any = None
        self._timer: Optional[FlushTimer] = None
        self._group = 'undefined'
        self._stream: Optional[str] = None
        self._sequence_token: Optional[str] = None
        self._save_lock = threading.Lock()
        self._opened = False

    @property
    def group(self) -> str:
        return self._group

    @property
    def stream(self) -> Optional[str]:
        return self._stream

    def configure(self, config: ConfigParams) -> None:
        super().configure(config)
        self._resolver.configure(config)

        self._group = config.get_as_string_with_default('group', self._group)
        self._stream = config.get_as_string_with_default('stream', self._stream)
        self._connect_timeout = config.get_as_integer_with_default('options.connect_timeout', self._connect_timeout)
        self._interval = config.get_as_integer_with_default('options.interval', self._interval)

    def is_open(self) -> bool:
        return self._opened

    def open(self, trace_id: Optional[str], client: Any = None) -> None:
        """
        Resolve the connection, ensure the log group and stream exist and start flushing.

        Args:
            trace_id: Transaction id used to trace execution through the call chain
            client: Optional preconfigured boto3 logs client

        Raises:
            ConfigurationError: If the connection cannot be resolved
            InvocationError: If the log group or stream cannot be created
        """
        if self._opened:
            return

        self._connection = self._resolver.resolve(trace_id)
        self._client = client or create_client('logs', self._connection, self._connect_timeout)

        if self._stream is None:
            self._stream = self._source or get_toolkit_env_vars().POWERTOOLS_SERVICE_NAME

        try:
            self._create_log_group()
            self._sequence_token = self._create_log_stream()
        except (ClientError, BotoCoreError) as e:
            self._client = None
            raise InvocationError(
                message=f"Cannot open CloudWatch log stream {self._group}/{self._stream}",
                error_code='CONNECT_FAILED',
                trace_id=trace_id,
                details={'group': self._group, 'stream': self._stream},
                cause=e,
            ) from e

        self._timer = FlushTimer(self.dump, self._interval / 1000.0, name='cloudwatch-logger')
        self._timer.start()
        self._opened = True

        logger.debug("CloudWatch logger opened", extra={
            "trace_id": trace_id,
            "group": self._group,
            "stream": self._stream,
        })

    def close(self, trace_id: Optional[str]) -> None:
        """Save buffered messages, then stop the timer and release the client."""
        if not self._opened:
            return

        try:
            if self._timer is not None:
                self._timer.flush(blocking=True)
            else:
                self.dump()
        finally:
            if self._timer is not None:
                self._timer.stop()
            self._timer = None
            self._opened = False
            self._client = None
            self._connection = None

        logger.debug("CloudWatch logger closed", extra={"trace_id": trace_id})

    def _create_log_group(self) -> None:
        try:
            self._client.create_log_group(logGroupName=self._group)
        except ClientError as e:
            if e.response['Error']['Code'] != 'ResourceAlreadyExistsException':
                raise

    def _create_log_stream(self) -> Optional[str]:
        """Create the log stream, or return the upload token of the existing one."""
        try:
            self._client.create_log_stream(logGroupName=self._group, logStreamName=self._stream)
            return None
        except ClientError as e:
            if e.response['Error']['Code'] != 'ResourceAlreadyExistsException':
                raise
        return self._describe_sequence_token()

    def _describe_sequence_token(self) -> Optional[str]:
        response = self._client.describe_log_streams(
            logGroupName=self._group,
            logStreamNamePrefix=self._stream,
        )
        for stream in response.get('logStreams', []):
            if stream.get('logStreamName') == self._stream:
                return stream.get('uploadSequenceToken')
        return None

    def _put_events(self, events: List[Dict[str, Any]]) -> None:
        params: Dict[str, Any] = {
            'logGroupName': self._group,
            'logStreamName': self._stream,
            'logEvents': events,
        }
        if self._sequence_token:
            params['sequenceToken'] = self._sequence_token

        response = self._client.put_log_events(**params)
        self._sequence_token = response.get('nextSequenceToken')

    def save(self, messages: List[LogMessage]) -> None:
        """
        Write messages to the log stream.

        Args:
            messages: Messages to write

        Raises:
            NotOpenedError: If the logger is open but has no client
        """
        if not self._opened or not messages:
            return

        if self._client is None:
            raise NotOpenedError('CloudWatchLogger')

        # CloudWatch requires events in chronological order
        events = [
            {'timestamp': int(message.time.timestamp() * 1000), 'message': format_message_text(message)}
            for message in sorted(messages, key=lambda m: m.time)
        ]

        with self._save_lock:
            try:
                self._sequence_token = self._describe_sequence_token()
                self._put_events(events)
            except ClientError as e:
                if e.response['Error']['Code'] not in _SEQUENCE_TOKEN_ERRORS:
                    self._log_save_failure(e, len(events))
                    return
                self._retry_with_token(e, events)
            except BotoCoreError as e:
                self._log_save_failure(e, len(events))

    def _retry_with_token(self, error: ClientError, events: List[Dict[str, Any]]) -> None:
        """Recover the sequence token from a rejected write and retry once."""
        try:
            expected = error.response.get('expectedSequenceToken')
            self._sequence_token = expected or self._describe_sequence_token()
            self._put_events(events)
        except (ClientError, BotoCoreError) as e:
            self._log_save_failure(e, len(events))

    def _log_save_failure(self, error: Exception, count: int) -> None:
        logger.error("Failed to write log events to CloudWatch", extra={
            "group": self._group,
            "stream": self._stream,
            "events": count,
            "error": str(error),
        })
