"""
AWS connection and credential resolution.

Shared by the Lambda client, the Lambda container and the CloudWatch sinks.
"""

from aws_toolkit.connect.arn import Arn
from aws_toolkit.connect.client_factory import create_client
from aws_toolkit.connect.connection_params import AwsConnectionParams
from aws_toolkit.connect.connection_resolver import AwsConnectionResolver
from aws_toolkit.connect.discovery import (
    CredentialStore,
    Discovery,
    MemoryCredentialStore,
    MemoryDiscovery,
)
from aws_toolkit.connect.secrets_credential_store import SecretsManagerCredentialStore

__all__ = [
    "Arn",
    "AwsConnectionParams",
    "AwsConnectionResolver",
    "CredentialStore",
    "Discovery",
    "MemoryCredentialStore",
    "MemoryDiscovery",
    "SecretsManagerCredentialStore",
    "create_client",
]
