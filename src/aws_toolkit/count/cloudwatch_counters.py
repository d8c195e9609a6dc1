"""
CloudWatch Metrics counters sink.

Collects counters in memory and periodically publishes them to CloudWatch
with ``put_metric_data``. Each datapoint carries an InstanceID dimension so
several instances of the same service can be told apart.
"""

import socket
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.config.env_vars import get_toolkit_env_vars
from aws_toolkit.connect.client_factory import create_client
from aws_toolkit.connect.connection_params import AwsConnectionParams
from aws_toolkit.connect.connection_resolver import AwsConnectionResolver
from aws_toolkit.count.cloudwatch_unit import CloudWatchUnit
from aws_toolkit.count.counters import CachedCounters, Counter, CounterType
from aws_toolkit.utils.errors import NotOpenedError
from aws_toolkit.utils.flush_timer import FlushTimer
from aws_toolkit.utils.observability import logger

# CloudWatch accepts at most 20 datapoints per put_metric_data call
MAX_DATAPOINTS_PER_REQUEST = 20


class CloudWatchCounters(CachedCounters):
    """
    Performance counters that periodically publish to AWS CloudWatch Metrics.

    Configuration parameters:
        connection.*:              AWS connection, see AwsConnectionResolver
        credential.*:              AWS credentials, see AwsConnectionResolver
        source:                    metric namespace (default: POWERTOOLS_SERVICE_NAME)
        instance:                  value of the InstanceID dimension (default: host name)
        options.connect_timeout:   connection timeout in milliseconds (default: 30 sec)
        options.interval:          interval in milliseconds between saves (default: 5 mins)
        options.reset_timeout:     timeout in milliseconds to reset the counters (default: 0)

    Example:
        counters = CloudWatchCounters()
        counters.configure(ConfigParams.from_tuples(
            'connection.region', 'us-east-1',
            'connection.arn', 'arn:aws:cloudwatch:us-east-1:123456789012:metrics',
            'source', 'orders-service',
        ))
        counters.open('123')
        counters.increment('mycomponent.mymethod.calls', 1)
    """

    def __init__(self, resolver: Optional[AwsConnectionResolver] = None):
        super().__init__()
        self._resolver = resolver or AwsConnectionResolver()
        self._connection: Optional[AwsConnectionParams] = None
        self._connect_timeout = 30000
        self._client: Any = None
        self._timer: Optional[FlushTimer] = None
        self._source: Optional[str] = None
        self._instance: Optional[str] = None
        self._opened = False

    @property
    def source(self) -> Optional[str]:
        return self._source

    @property
    def instance(self) -> Optional[str]:
        return self._instance

    def configure(self, config: ConfigParams) -> None:
        super().configure(config)
        self._resolver.configure(config)

        self._source = config.get_as_string_with_default('source', self._source)
        self._instance = config.get_as_string_with_default('instance', self._instance)
        self._connect_timeout = config.get_as_integer_with_default('options.connect_timeout', self._connect_timeout)

    def is_open(self) -> bool:
        return self._opened

    def open(self, trace_id: Optional[str], client: Any = None) -> None:
        """
        Resolve the connection, create the CloudWatch client and start flushing.

        Args:
            trace_id: Transaction id used to trace execution through the call chain
            client: Optional preconfigured boto3 cloudwatch client

        Raises:
            ConfigurationError: If the connection cannot be resolved
        """
        if self._opened:
            return

        self._connection = self._resolver.resolve(trace_id)
        self._client = client or create_client('cloudwatch', self._connection, self._connect_timeout)

        if self._source is None:
            self._source = get_toolkit_env_vars().POWERTOOLS_SERVICE_NAME
        if self._instance is None:
            self._instance = socket.gethostname()

        self._timer = FlushTimer(self.dump, self._interval / 1000.0, name='cloudwatch-counters')
        self._timer.start()
        self._opened = True

        logger.debug("CloudWatch counters opened", extra={
            "trace_id": trace_id,
            "namespace": self._source,
            "instance": self._instance,
        })

    def close(self, trace_id: Optional[str]) -> None:
        """Publish remaining counters, then stop the timer and release the client."""
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

        logger.debug("CloudWatch counters closed", extra={"trace_id": trace_id})

    def _get_counter_data(self, counter: Counter, now: datetime) -> Dict[str, Any]:
        """Build one CloudWatch datapoint from a counter."""
        value: Dict[str, Any] = {
            'MetricName': counter.name,
            'Timestamp': counter.time or now,
            'Dimensions': [
                {'Name': 'InstanceID', 'Value': self._instance},
            ],
            'Unit': CloudWatchUnit.NONE.value,
        }

        if counter.type == CounterType.INCREMENT:
            value['Value'] = counter.count or 0
            value['Unit'] = CloudWatchUnit.COUNT.value
        elif counter.type in (CounterType.INTERVAL, CounterType.STATISTICS):
            count = counter.count or 0
            average = counter.average or 0.0
            value['StatisticValues'] = {
                'SampleCount': count,
                'Maximum': counter.max or 0.0,
                'Minimum': counter.min or 0.0,
                'Sum': count * average,
            }
        elif counter.type == CounterType.LAST_VALUE:
            value['Value'] = counter.last or 0.0
        elif counter.type == CounterType.TIMESTAMP:
            timestamp = counter.time or now
            value['Value'] = int(timestamp.timestamp() * 1000)

        return value

    def save(self, counters: List[Counter]) -> None:
        """
        Publish counters to CloudWatch in chunks of at most 20 datapoints.

        Args:
            counters: Counters to publish

        Raises:
            NotOpenedError: If the sink is open but has no client
        """
        if not self._opened or not counters:
            return

        if self._client is None:
            raise NotOpenedError('CloudWatchCounters')

        now = datetime.now(timezone.utc)
        data = [self._get_counter_data(counter, now) for counter in counters]
        chunks = [
            data[i:i + MAX_DATAPOINTS_PER_REQUEST]
            for i in range(0, len(data), MAX_DATAPOINTS_PER_REQUEST)
        ]

        for chunk in chunks:
            try:
                self._client.put_metric_data(Namespace=self._source, MetricData=chunk)
            except (ClientError, BotoCoreError) as e:
                logger.error("Failed to publish metrics to CloudWatch", extra={
                    "namespace": self._source,
                    "datapoints": len(chunk),
                    "error": str(e),
                })
