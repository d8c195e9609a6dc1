"""
AWS Lambda client.

Invokes a remote Lambda function that hosts a LambdaFunction dispatcher. Every
call carries the command name in ``cmd`` and the trace id in ``correlationId``.
"""

import json
import uuid
from typing import Any, Dict, Optional

from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.connect.client_factory import create_client
from aws_toolkit.connect.connection_params import AwsConnectionParams
from aws_toolkit.connect.connection_resolver import AwsConnectionResolver
from aws_toolkit.connect.discovery import CredentialStore, Discovery
from aws_toolkit.count.counters import Counters, NullCounters, Timing
from aws_toolkit.utils.errors import (
    DeserializationError,
    InvalidActionError,
    InvocationError,
    NotOpenedError,
    error_from_dict,
)
from aws_toolkit.utils.observability import logger, metrics, tracer

REQUEST_RESPONSE = 'RequestResponse'
EVENT = 'Event'


class LambdaClient:
    """
    Base class for clients that call AWS Lambda functions.

    Configuration parameters:
        connection.arn:          full ARN of the Lambda function, or its parts
        connection.region:       (optional) AWS region, overrides the region inside the arn
        credential.access_id:    AWS access key id
        credential.access_key:   AWS secret access key
        options.connect_timeout: connection timeout in milliseconds (default: 10 sec)
        options.timeout:         (optional) read timeout in milliseconds

    Example:
        class MyLambdaClient(LambdaClient):
            def get_data(self, trace_id, id):
                timing = self.instrument(trace_id, 'myclient.get_data')
                try:
                    return self.call('get_data', trace_id, {'id': id})
                finally:
                    timing.end_timing()
    """

    def __init__(
        self,
        resolver: Optional[AwsConnectionResolver] = None,
        counters: Optional[Counters] = None,
    ):
        self._resolver = resolver or AwsConnectionResolver()
        self._counters: Counters = counters or NullCounters()
        self._connection: Optional[AwsConnectionParams] = None
        self._connect_timeout = 10000
        self._timeout: Optional[int] = None
        self._client: Any = None
        self._opened = False

    @property
    def connection(self) -> Optional[AwsConnectionParams]:
        return self._connection

    def configure(self, config: ConfigParams) -> None:
        self._resolver.configure(config)
        self._connect_timeout = config.get_as_integer_with_default('options.connect_timeout', self._connect_timeout)
        timeout = config.get_as_integer_with_default('options.timeout', 0)
        self._timeout = timeout if timeout > 0 else None

    def set_references(
        self,
        counters: Optional[Counters] = None,
        discovery: Optional[Discovery] = None,
        credential_store: Optional[CredentialStore] = None,
    ) -> None:
        if counters is not None:
            self._counters = counters
        self._resolver.set_references(discovery=discovery, credential_store=credential_store)

    def instrument(self, trace_id: Optional[str], name: str) -> Timing:
        """
        Start timing a method call.

        Args:
            trace_id: Transaction id used to trace execution through the call chain
            name: Method name, used as the counter prefix

        Returns:
            Timing to end when the call completes
        """
        logger.debug(f"Executing {name} method", extra={"trace_id": trace_id})
        return self._counters.begin_timing(name + '.exec_time')

    def is_open(self) -> bool:
        return self._opened

    def open(self, trace_id: Optional[str], client: Any = None) -> None:
        """
        Resolve the connection and create the Lambda client.

        Args:
            trace_id: Transaction id used to trace execution through the call chain
            client: Optional preconfigured boto3 lambda client

        Raises:
            ConfigurationError: If the connection cannot be resolved
        """
        if self._opened:
            return

        self._connection = self._resolver.resolve(trace_id)
        self._client = client or create_client('lambda', self._connection, self._connect_timeout, self._timeout)
        self._opened = True

        logger.debug("Lambda client connected", extra={
            "trace_id": trace_id,
            "arn": self._connection.arn,
        })

    def close(self, trace_id: Optional[str]) -> None:
        self._opened = False
        self._client = None

    @tracer.capture_method
    def invoke(
        self,
        invocation_type: str,
        cmd: Optional[str],
        trace_id: Optional[str],
        args: Optional[Dict[str, Any]],
        raise_errors: bool = True,
    ) -> Any:
        """
        Invoke the remote Lambda function.

        Args:
            invocation_type: "RequestResponse" or "Event"
            cmd: Action name to call
            trace_id: Transaction id used to trace execution through the call chain
            args: Action arguments
            raise_errors: Whether transport failures raise; when False they are logged

        Returns:
            Decoded result of the function, or None when the payload is empty

        Raises:
            InvalidActionError: If cmd is missing
            NotOpenedError: If the client is not opened
            InvocationError: If the call or the remote function fails
            DeserializationError: If the result payload is not valid JSON
        """
        if not cmd:
            raise InvalidActionError(
                message="Missing command to call",
                error_code="NO_COMMAND",
                trace_id=trace_id,
            )

        if not self._opened or self._client is None:
            raise NotOpenedError('LambdaClient', trace_id=trace_id)

        payload = dict(args or {})
        payload['cmd'] = cmd
        payload['correlationId'] = trace_id or uuid.uuid4().hex

        tracer.put_annotation("command", cmd)
        tracer.put_annotation("invocation_type", invocation_type)

        try:
            response = self._client.invoke(
                FunctionName=self._connection.arn,
                InvocationType=invocation_type,
                LogType='None',
                Payload=json.dumps(payload, default=str),
            )
        except (ClientError, BotoCoreError) as e:
            metrics.add_metric(name="LambdaInvocationFailures", unit=MetricUnit.Count, value=1)
            if not raise_errors:
                logger.error("Failed to invoke lambda function", extra={
                    "trace_id": trace_id,
                    "command": cmd,
                    "error": str(e),
                })
                return None
            raise InvocationError(
                message="Failed to invoke lambda function",
                error_code="CALL_FAILED",
                trace_id=trace_id,
                details={"arn": self._connection.arn, "command": cmd},
                cause=e,
            ) from e

        metrics.add_metric(name="LambdaInvocations", unit=MetricUnit.Count, value=1)

        result = self._decode_payload(response.get('Payload'), cmd, trace_id)

        if response.get('FunctionError'):
            raise InvocationError(
                message=f"Lambda function failed to execute {cmd}",
                error_code="FUNCTION_FAILED",
                trace_id=trace_id,
                details={"command": cmd, "function_error": response['FunctionError'], "payload": result},
            )

        if isinstance(result, dict) and isinstance(result.get('error'), dict) and len(result) == 1:
            raise error_from_dict(result['error'])

        return result

    def _decode_payload(self, payload: Any, cmd: str, trace_id: Optional[str]) -> Any:
        """Decode a JSON result payload. Empty payloads decode to None."""
        if payload is None:
            return None
        if hasattr(payload, 'read'):
            payload = payload.read()
        if not isinstance(payload, (str, bytes, bytearray)):
            return payload

        try:
            if isinstance(payload, (bytes, bytearray)):
                payload = payload.decode('utf-8')
            if not payload.strip():
                return None
            return json.loads(payload)
        except ValueError as e:
            raise DeserializationError(
                message="Failed to deserialize lambda function result",
                error_code="DESERIALIZATION_FAILED",
                trace_id=trace_id,
                details={"command": cmd},
                cause=e,
            ) from e

    def call(self, cmd: str, trace_id: Optional[str], params: Optional[Dict[str, Any]] = None) -> Any:
        """Call the remote function and wait for its result."""
        return self.invoke(REQUEST_RESPONSE, cmd, trace_id, params)

    def call_one_way(
        self,
        cmd: str,
        trace_id: Optional[str],
        params: Optional[Dict[str, Any]] = None,
        raise_errors: bool = True,
    ) -> None:
        """Call the remote function asynchronously without waiting for a result."""
        self.invoke(EVENT, cmd, trace_id, params, raise_errors=raise_errors)
