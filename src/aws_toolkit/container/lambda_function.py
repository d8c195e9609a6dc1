"""
Lambda function container.

LambdaFunction hosts named actions inside an AWS Lambda function and routes
each invocation to the action named by its ``cmd`` field. Configuration is
read and components are opened lazily on the first invocation.
"""

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel

from aws_toolkit.commands.command import Action, validate_args
from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.config.env_vars import get_toolkit_env_vars
from aws_toolkit.count.counters import CachedCounters, Counters, NullCounters, Timing
from aws_toolkit.utils.errors import (
    BadRequestError,
    ConfigurationError,
    format_error_response,
    log_error_metrics,
    wrap_error,
)
from aws_toolkit.utils.observability import logger, metrics

DEFAULT_CONFIG_PATH = './config/config.yml'

# Lambda entry point: (event, context) -> result
Handler = Callable[[Dict[str, Any], Any], Any]


class LambdaFunction(ABC):
    """
    Abstract Lambda function that dispatches invocations to registered actions.

    Every event must carry ``cmd`` with the action name and may carry
    ``correlationId`` with the trace id of the caller. Errors never leave
    the entry point: they are returned as ``{"error": {...}}`` results.

    Example:
        class MyLambdaFunction(LambdaFunction):
            def __init__(self):
                super().__init__('mygroup', 'MyGroup lambda function')

            def register(self):
                self.register_action('get_mydata', None, self._get_mydata)

            def _get_mydata(self, trace_id, args):
                return {'id': args.get('id')}

        lambda_handler = MyLambdaFunction().get_handler()
    """

    def __init__(self, name: str, description: Optional[str] = None):
        self.name = name
        self.description = description
        self._config_path = DEFAULT_CONFIG_PATH
        self._config = ConfigParams()
        self._counters: Counters = NullCounters()
        self._components: List[Tuple[Any, Optional[str]]] = []
        self._opened_components: List[Any] = []
        self._actions: Dict[str, Action] = {}
        self._opened = False
        self._init_lock = threading.RLock()

    @property
    def config(self) -> ConfigParams:
        return self._config

    def get_config_path(self) -> str:
        """Configuration file path, taken from CONFIG_PATH when it is set."""
        return get_toolkit_env_vars().CONFIG_PATH or self._config_path

    def read_config(self, trace_id: Optional[str] = None) -> ConfigParams:
        """Read the YAML configuration file. A missing file yields an empty configuration."""
        path = Path(self.get_config_path())
        if not path.is_file():
            logger.info("Configuration file not found, using defaults", extra={
                "trace_id": trace_id,
                "config_path": str(path),
            })
            return ConfigParams()

        try:
            return ConfigParams.from_file(path)
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                message=f"Cannot read configuration from {path}",
                error_code="CANNOT_READ_CONFIG",
                trace_id=trace_id,
                details={"config_path": str(path)},
                cause=e,
            ) from e

    def add_component(self, component: Any, section: Optional[str] = None) -> None:
        """
        Add a component that is configured, opened and closed with the function.

        Args:
            component: Component with configure/open/close methods, e.g. a
                CloudWatchLogger or CloudWatchCounters
            section: Optional configuration section passed to the component
        """
        self._components.append((component, section))
        if isinstance(component, CachedCounters) and isinstance(self._counters, NullCounters):
            self._counters = component

    def set_counters(self, counters: Counters) -> None:
        self._counters = counters

    def configure(self, config: ConfigParams) -> None:
        self._config = config
        for component, section in self._components:
            if hasattr(component, 'configure'):
                component.configure(config.get_section(section) if section else config)

    @abstractmethod
    def register(self) -> None:
        """Register all actions of the function with ``register_action``."""

    def register_action(self, cmd: str, schema: Optional[Type[BaseModel]], action: Action) -> None:
        """
        Register an action under a command name.

        Args:
            cmd: Command name
            schema: Optional pydantic model that validates the event before the action runs
            action: Callable receiving (trace_id, args)

        Raises:
            ConfigurationError: If cmd is empty or action is missing or not callable
        """
        if not cmd:
            raise ConfigurationError(message="Missing command", error_code="NO_COMMAND")
        if action is None:
            raise ConfigurationError(
                message="Missing action", error_code="NO_ACTION", details={"command": cmd}
            )
        if not callable(action):
            raise ConfigurationError(
                message="Action is not a function", error_code="ACTION_NOT_FUNCTION", details={"command": cmd}
            )

        def validated_action(trace_id: Optional[str], args: Dict[str, Any]) -> Any:
            validate_args(schema, args, trace_id)
            return action(trace_id, args)

        self._actions[cmd] = validated_action

    def instrument(self, trace_id: Optional[str], name: str) -> Timing:
        """Start timing an action; end the returned Timing when it completes."""
        logger.debug(f"Executing {name} method", extra={"trace_id": trace_id})
        return self._counters.begin_timing(name + '.exec_time')

    def is_open(self) -> bool:
        return self._opened

    def open(self, trace_id: Optional[str]) -> None:
        """Open all components in the order they were added."""
        if self._opened:
            return

        try:
            for component, _ in self._components:
                if hasattr(component, 'open'):
                    component.open(trace_id)
                self._opened_components.append(component)
        except Exception:
            self._close_components(trace_id)
            raise

        self._opened = True
        logger.info("Lambda function opened", extra={"trace_id": trace_id, "function": self.name})

    def close(self, trace_id: Optional[str]) -> None:
        """Close opened components in reverse order."""
        self._close_components(trace_id)
        self._opened = False

    def _close_components(self, trace_id: Optional[str]) -> None:
        while self._opened_components:
            component = self._opened_components.pop()
            if not hasattr(component, 'close'):
                continue
            try:
                component.close(trace_id)
            except Exception:
                logger.exception("Failed to close component", extra={
                    "trace_id": trace_id,
                    "component": type(component).__name__,
                })

    def initialize(self, trace_id: Optional[str] = None) -> None:
        """
        Read configuration, register actions and open components once.

        Raises:
            ConfigurationError: If the configuration or a registration is invalid
        """
        with self._init_lock:
            if self._opened:
                return

            trace_id = trace_id or self.name
            self.configure(self.read_config(trace_id))
            self.register()
            self.open(trace_id)

    @staticmethod
    def get_trace_id(event: Dict[str, Any]) -> Optional[str]:
        return event.get('correlationId') or event.get('correlation_id')

    def execute(self, event: Dict[str, Any]) -> Any:
        """
        Route an event to the action named by its ``cmd`` field.

        Returns:
            Result of the action

        Raises:
            BadRequestError: If cmd is missing or no action is registered for it
        """
        cmd = event.get('cmd')
        trace_id = self.get_trace_id(event)

        if not cmd:
            raise BadRequestError(
                message="Cmd parameter is missing",
                error_code="NO_COMMAND",
                trace_id=trace_id,
            )

        action = self._actions.get(cmd)
        if action is None:
            raise BadRequestError(
                message=f"Action {cmd} was not found",
                error_code="NO_ACTION",
                trace_id=trace_id,
            ).with_details("command", cmd)

        return action(trace_id, event)

    def handle(self, event: Dict[str, Any]) -> Any:
        """Dispatch an event on an initialized function."""
        return self.execute(event)

    def get_handler(self) -> Handler:
        """
        Get the Lambda runtime entry point.

        The entry point initializes the function on its first call and turns
        every failure into an ``{"error": {...}}`` result.
        """

        @metrics.log_metrics
        def handler(event: Dict[str, Any], context: Any = None) -> Any:
            event = event or {}
            trace_id = self.get_trace_id(event)
            try:
                if not self._opened:
                    self.initialize(trace_id)
                return self.handle(event)
            except Exception as e:
                error = wrap_error(e, trace_id)
                log_error_metrics(error)
                return format_error_response(error)

        return handler

    def act(self, params: Dict[str, Any]) -> Any:
        """Call the entry point directly, for testing."""
        return self.get_handler()(params, None)
