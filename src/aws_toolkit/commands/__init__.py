"""Commands, command sets and the Commandable protocol."""

from aws_toolkit.commands.command import Action, Command, validate_args
from aws_toolkit.commands.command_set import Commandable, CommandSet

__all__ = [
    "Action",
    "Command",
    "CommandSet",
    "Commandable",
    "validate_args",
]
