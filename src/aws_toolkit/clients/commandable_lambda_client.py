"""
Lambda client for functions that host a CommandableLambdaFunction.
"""

from typing import Any, Dict, Optional

from aws_toolkit.clients.lambda_client import LambdaClient
from aws_toolkit.connect.connection_resolver import AwsConnectionResolver
from aws_toolkit.count.counters import Counters


class CommandableLambdaClient(LambdaClient):
    """
    Calls commands of a remote commandable Lambda function by name.

    Example:
        class DummyLambdaClient(CommandableLambdaClient):
            def __init__(self):
                super().__init__('dummies')

            def get_dummy_by_id(self, trace_id, dummy_id):
                return self.call_command('get_dummy_by_id', trace_id, {'dummy_id': dummy_id})
    """

    def __init__(
        self,
        name: str,
        resolver: Optional[AwsConnectionResolver] = None,
        counters: Optional[Counters] = None,
    ):
        super().__init__(resolver=resolver, counters=counters)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def call_command(self, cmd: str, trace_id: Optional[str], params: Optional[Dict[str, Any]] = None) -> Any:
        """Call a remote command, timing it as ``<name>.<cmd>``."""
        timing = self.instrument(trace_id, f"{self._name}.{cmd}")
        try:
            return self.call(cmd, trace_id, params)
        finally:
            timing.end_timing()
