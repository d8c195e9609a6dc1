"""
Command sets group the commands a controller exposes.
"""

from typing import Any, Dict, List, Optional, Protocol, Type, runtime_checkable

from pydantic import BaseModel

from aws_toolkit.commands.command import Action, Command
from aws_toolkit.utils.errors import BadRequestError, ConfigurationError


class CommandSet:
    """Named commands with lookup and execution by name."""

    def __init__(self):
        self._commands: List[Command] = []
        self._commands_by_name: Dict[str, Command] = {}

    def get_commands(self) -> List[Command]:
        return list(self._commands)

    def find_command(self, name: str) -> Optional[Command]:
        return self._commands_by_name.get(name)

    def add_command(self, command: Command) -> None:
        """
        Add a command to the set.

        Raises:
            ConfigurationError: If a command with the same name is already registered
        """
        if command.name in self._commands_by_name:
            raise ConfigurationError(
                message=f"Command {command.name} is already registered",
                error_code="DUPLICATE_COMMAND",
                details={"command": command.name},
            )

        self._commands.append(command)
        self._commands_by_name[command.name] = command

    def add_commands(self, commands: List[Command]) -> None:
        for command in commands:
            self.add_command(command)

    def add_command_set(self, command_set: "CommandSet") -> None:
        self.add_commands(command_set.get_commands())

    def command(self, name: str, schema: Optional[Type[BaseModel]] = None):
        """
        Decorator that registers a function as a command.

        Example:
            @command_set.command('get_dummies')
            def get_dummies(trace_id, args):
                ...
        """
        def decorator(function: Action) -> Action:
            self.add_command(Command(name, schema, function))
            return function

        return decorator

    def execute(self, trace_id: Optional[str], name: str, args: Dict[str, Any]) -> Any:
        """
        Execute a command by name.

        Raises:
            BadRequestError: If no command with that name exists
        """
        command = self.find_command(name)
        if command is None:
            raise BadRequestError(
                message=f"Requested command does not exist: {name}",
                error_code="CMD_NOT_FOUND",
                trace_id=trace_id,
                details={"command": name},
            )

        return command.execute(trace_id, args)


@runtime_checkable
class Commandable(Protocol):
    """A controller that exposes its operations as a command set."""

    def get_command_set(self) -> CommandSet:
        ...
