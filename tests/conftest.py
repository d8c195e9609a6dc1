"""
Pytest configuration and shared fixtures for the AWS toolkit.

This module provides common test fixtures and configuration used across
unit and integration tests.
"""

import os
import pytest
from typing import Any, Dict
from unittest.mock import Mock

import boto3
from moto import mock_aws

from aws_toolkit.config import ConfigParams


LAMBDA_ARN = "arn:aws:lambda:us-east-1:123456789012:function:myFunc"


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "test",
        "AWS_SECRET_ACCESS_KEY": "test",
        "POWERTOOLS_SERVICE_NAME": "test-aws-toolkit",
        "POWERTOOLS_METRICS_NAMESPACE": "TestAwsToolkit",
        "LOG_LEVEL": "DEBUG",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    })
    os.environ.pop("CONFIG_PATH", None)


@pytest.fixture(autouse=True)
def reset_env_cache():
    """Clear the cached environment model between tests."""
    from aws_lambda_env_modeler import modeler_impl

    cached_parse = getattr(modeler_impl, "__parse_model_with_cache")
    cached_parse.cache_clear()
    yield
    cached_parse.cache_clear()


# AWS fixtures
@pytest.fixture
def aws_mock():
    """Mock all AWS services for the duration of a test."""
    with mock_aws():
        yield


@pytest.fixture
def logs_client(aws_mock):
    """Create a mocked CloudWatch Logs client."""
    return boto3.client("logs", region_name="us-east-1")


@pytest.fixture
def cloudwatch_client(aws_mock):
    """Create a mocked CloudWatch client."""
    return boto3.client("cloudwatch", region_name="us-east-1")


@pytest.fixture
def secretsmanager_client(aws_mock):
    """Create a mocked Secrets Manager client."""
    return boto3.client("secretsmanager", region_name="us-east-1")


# Configuration fixtures
@pytest.fixture
def lambda_config() -> ConfigParams:
    """Configuration for a Lambda client with explicit credentials."""
    return ConfigParams.from_tuples(
        "connection.arn", LAMBDA_ARN,
        "credential.access_id", "A",
        "credential.access_key", "B",
    )


@pytest.fixture
def sink_config() -> ConfigParams:
    """Connection configuration shared by the CloudWatch sinks."""
    return ConfigParams.from_tuples(
        "connection.region", "us-east-1",
        "connection.service", "logs",
        "connection.account", "123456789012",
        "connection.resource", "test-group",
        "credential.access_id", "test",
        "credential.access_key", "test",
    )


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-lambda-function"
    context.function_version = "1"
    context.invoked_function_arn = LAMBDA_ARN
    context.memory_limit_in_mb = "512"
    context.remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-lambda-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


@pytest.fixture
def lambda_response():
    """Build a boto3 lambda invoke response."""
    from io import BytesIO

    from botocore.response import StreamingBody

    def create_response(payload: bytes, function_error: str = None) -> Dict[str, Any]:
        response: Dict[str, Any] = {
            "StatusCode": 200,
            "Payload": StreamingBody(BytesIO(payload), len(payload)),
        }
        if function_error:
            response["FunctionError"] = function_error
        return response

    return create_response


# Error simulation fixtures
@pytest.fixture
def mock_client_error():
    """Mock AWS client errors for testing error handling."""
    from botocore.exceptions import ClientError

    def create_error(error_code: str, message: str = "Test error", **extra: Any):
        error_response: Dict[str, Any] = {
            "Error": {
                "Code": error_code,
                "Message": message,
            }
        }
        error_response.update(extra)
        return ClientError(
            error_response=error_response,
            operation_name="TestOperation"
        )

    return create_error


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow running tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Add markers based on test location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
