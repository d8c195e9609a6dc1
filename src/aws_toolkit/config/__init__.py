"""Configuration: flat config params and the process environment model."""

from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.config.env_vars import ToolkitEnvVars, get_toolkit_env_vars

__all__ = [
    "ConfigParams",
    "ToolkitEnvVars",
    "get_toolkit_env_vars",
]
