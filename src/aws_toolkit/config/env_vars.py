"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for environment variables read by the
Lambda container when it bootstraps, providing type safety and validation.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import BaseModel, get_environment_variables
from pydantic import Field


class ToolkitEnvVars(BaseModel):
    """Environment variables for toolkit containers."""

    # Path to the container configuration file
    CONFIG_PATH: Annotated[Optional[str], Field(
        default=None,
        description='Path to the YAML container configuration (overrides the built-in default)'
    )] = None

    # Log level for AWS Powertools Logger
    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'(?i)^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    # Service name for observability
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='aws-toolkit',
        description='Service name for AWS Powertools'
    )] = 'aws-toolkit'

    # Metrics namespace
    POWERTOOLS_METRICS_NAMESPACE: Annotated[str, Field(
        default='AwsToolkit',
        description='Namespace for CloudWatch metrics'
    )] = 'AwsToolkit'

    # Enable/disable X-Ray tracing
    POWERTOOLS_TRACE_DISABLED: Annotated[str, Field(
        default='false',
        description='Disable X-Ray tracing (true/false)',
        pattern=r'^(true|false|True|False)$'
    )] = 'false'

    @property
    def tracing_enabled(self) -> bool:
        """Check if X-Ray tracing is enabled."""
        return self.POWERTOOLS_TRACE_DISABLED.lower() == 'false'


def get_toolkit_env_vars() -> ToolkitEnvVars:
    """
    Get typed environment variables for toolkit containers.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=ToolkitEnvVars)
