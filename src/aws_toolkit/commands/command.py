"""
Commands: named, optionally schema-validated operations of a controller.
"""

from typing import Any, Callable, Dict, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from aws_toolkit.utils.errors import InvocationError, ToolkitError, ValidationError

# Signature of a command or action: (trace_id, args) -> result
Action = Callable[[Optional[str], Dict[str, Any]], Any]


def validate_args(
    schema: Optional[Type[BaseModel]],
    args: Dict[str, Any],
    trace_id: Optional[str] = None,
) -> None:
    """
    Validate arguments against a pydantic model.

    Args:
        schema: Pydantic model class, or None to skip validation
        args: Arguments to validate
        trace_id: Transaction id used to trace execution through the call chain

    Raises:
        ValidationError: If the arguments do not match the schema
    """
    if schema is None:
        return

    try:
        schema.model_validate(args)
    except PydanticValidationError as e:
        field_errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in e.errors()
        ]
        raise ValidationError(
            message="Request validation failed",
            field_errors=field_errors,
            trace_id=trace_id,
        ) from e


class Command:
    """A named operation with an optional argument schema."""

    def __init__(self, name: str, schema: Optional[Type[BaseModel]], function: Action):
        if not name:
            raise ValueError("Command name cannot be empty")
        if not callable(function):
            raise ValueError("Command function must be callable")

        self.name = name
        self.schema = schema
        self.function = function

    def validate(self, args: Dict[str, Any], trace_id: Optional[str] = None) -> None:
        validate_args(self.schema, args, trace_id)

    def execute(self, trace_id: Optional[str], args: Dict[str, Any]) -> Any:
        """
        Validate the arguments and run the command.

        Args:
            trace_id: Transaction id used to trace execution through the call chain
            args: Command arguments

        Returns:
            Result of the command function

        Raises:
            ValidationError: If the arguments do not match the schema
            InvocationError: If the function fails with a non-toolkit error
        """
        self.validate(args, trace_id)

        try:
            return self.function(trace_id, args)
        except ToolkitError:
            raise
        except Exception as e:
            raise InvocationError(
                message=f"Execution of command {self.name} failed: {e}",
                error_code="EXEC_FAILED",
                trace_id=trace_id,
                details={"command": self.name},
                cause=e,
            ) from e
