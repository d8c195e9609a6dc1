"""
boto3 client factory for resolved AWS connections.
"""

from typing import Any, Optional

import boto3
from botocore.config import Config

from aws_toolkit.connect.connection_params import AwsConnectionParams


def get_boto3_config(connect_timeout: int, timeout: Optional[int] = None) -> Config:
    """
    Get botocore configuration with the component timeouts.

    Args:
        connect_timeout: Connection timeout in milliseconds
        timeout: Optional read timeout in milliseconds; botocore's default when None

    Returns:
        botocore Config instance
    """
    options: dict[str, Any] = {'connect_timeout': connect_timeout / 1000.0}
    if timeout is not None and timeout > 0:
        options['read_timeout'] = timeout / 1000.0
    return Config(**options)


def create_client(
    service_name: str,
    connection: AwsConnectionParams,
    connect_timeout: int,
    timeout: Optional[int] = None,
) -> Any:
    """Create a boto3 client for a service using resolved connection parameters."""
    return boto3.client(
        service_name,
        region_name=connection.region,
        aws_access_key_id=connection.access_id,
        aws_secret_access_key=connection.access_key,
        config=get_boto3_config(connect_timeout, timeout),
    )
