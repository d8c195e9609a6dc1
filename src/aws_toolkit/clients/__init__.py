"""Clients for AWS Lambda functions."""

from aws_toolkit.clients.commandable_lambda_client import CommandableLambdaClient
from aws_toolkit.clients.lambda_client import EVENT, REQUEST_RESPONSE, LambdaClient

__all__ = [
    "CommandableLambdaClient",
    "EVENT",
    "LambdaClient",
    "REQUEST_RESPONSE",
]
