"""
Lambda function that exposes the command set of a controller.
"""

from typing import Any, Dict, Optional

from aws_toolkit.commands.command import Action, Command
from aws_toolkit.commands.command_set import Commandable
from aws_toolkit.container.lambda_function import LambdaFunction
from aws_toolkit.utils.errors import ConfigurationError


class CommandableLambdaFunction(LambdaFunction):
    """
    Registers one action for every command of a Commandable controller.

    Each action runs inside ``instrument(trace_id, '<name>.<command>')``.

    Example:
        class DummyLambdaFunction(CommandableLambdaFunction):
            def __init__(self):
                super().__init__('dummy', 'Dummy lambda function', DummyController())

        lambda_handler = DummyLambdaFunction().get_handler()
    """

    def __init__(self, name: str, description: Optional[str] = None, controller: Optional[Commandable] = None):
        super().__init__(name, description)
        self._controller = controller

    @property
    def controller(self) -> Optional[Commandable]:
        return self._controller

    def set_controller(self, controller: Commandable) -> None:
        self._controller = controller

    def _wrap_command(self, command: Command) -> Action:
        def action(trace_id: Optional[str], args: Dict[str, Any]) -> Any:
            timing = self.instrument(trace_id, f"{self.name}.{command.name}")
            try:
                return command.execute(trace_id, args)
            finally:
                timing.end_timing()

        return action

    def register(self) -> None:
        """
        Register the controller's commands as actions.

        Raises:
            ConfigurationError: If no controller is set
        """
        if self._controller is None:
            raise ConfigurationError(
                message=f"Controller is not set for lambda function {self.name}",
                error_code="NO_CONTROLLER",
            )

        # Command.execute validates against the command schema
        for command in self._controller.get_command_set().get_commands():
            self.register_action(command.name, None, self._wrap_command(command))
