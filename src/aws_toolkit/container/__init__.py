"""Lambda function containers and process shutdown hooks."""

from aws_toolkit.container.commandable_lambda_function import CommandableLambdaFunction
from aws_toolkit.container.lambda_function import DEFAULT_CONFIG_PATH, LambdaFunction
from aws_toolkit.container.shutdown_hooks import ShutdownHooks

__all__ = [
    "CommandableLambdaFunction",
    "DEFAULT_CONFIG_PATH",
    "LambdaFunction",
    "ShutdownHooks",
]
