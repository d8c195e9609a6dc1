"""
Unit tests for ARN parsing and composition.
"""

import pytest

from aws_toolkit.connect import Arn
from aws_toolkit.utils.errors import ConfigurationError


class TestArnParse:
    """Test cases for Arn.parse."""

    def test_parse_type_colon_resource(self):
        """Test parsing an ARN with a type:resource part."""
        arn = Arn.parse("arn:aws:lambda:us-east-1:123456789012:function:myFunc")

        assert arn.partition == "aws"
        assert arn.service == "lambda"
        assert arn.region == "us-east-1"
        assert arn.account == "123456789012"
        assert arn.resource_type == "function"
        assert arn.resource == "myFunc"

    def test_parse_type_slash_resource(self):
        """Test parsing an ARN with a type/resource part."""
        arn = Arn.parse("arn:aws:ec2:us-west-2:123456789012:instance/i-0abc")

        assert arn.resource_type == "instance"
        assert arn.resource == "i-0abc"
        assert arn.separator == "/"

    def test_parse_bare_resource(self):
        """Test parsing an ARN without a resource type."""
        arn = Arn.parse("arn:aws:s3:::my-bucket")

        assert arn.service == "s3"
        assert arn.region == ""
        assert arn.account == ""
        assert arn.resource_type is None
        assert arn.resource == "my-bucket"

    def test_parse_keeps_colons_after_type(self):
        """Test that colons after the resource type belong to the resource."""
        arn = Arn.parse("arn:aws:lambda:us-east-1:123456789012:function:myFunc:prod")

        assert arn.resource_type == "function"
        assert arn.resource == "myFunc:prod"

    def test_parse_slash_resource_with_colon(self):
        """Test that a type/resource part keeps colons inside the resource."""
        arn = Arn.parse("arn:aws:ecs:us-east-1:123456789012:task-definition/web:3")

        assert arn.resource_type == "task-definition"
        assert arn.resource == "web:3"
        assert arn.separator == "/"

    @pytest.mark.parametrize("text", [
        "arn:aws:lambda:us-east-1:123456789012:function:myFunc",
        "arn:aws:ec2:us-west-2:123456789012:instance/i-0abc",
        "arn:aws:s3:::my-bucket",
        "arn:aws-cn:logs:cn-north-1:123456789012:log-group:my-group:*",
        "arn:aws:ecs:us-east-1:123456789012:task-definition/web:3",
    ])
    def test_round_trip(self, text):
        """Test that parsing and formatting returns the original text."""
        assert str(Arn.parse(text)) == text

    @pytest.mark.parametrize("text", [
        None,
        "",
        "not-an-arn",
        "arn:aws:lambda",
        "urn:aws:lambda:us-east-1:123456789012:function:myFunc",
    ])
    def test_parse_malformed(self, text):
        """Test that malformed text raises a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            Arn.parse(text)

        assert exc_info.value.error_code == "INVALID_ARN"


class TestArnCompose:
    """Test cases for composing ARNs from parts."""

    def test_compose_with_type(self):
        """Test composing an ARN with a resource type."""
        arn = Arn(
            service="lambda",
            region="us-east-1",
            account="123456789012",
            resource_type="function",
            resource="myFunc",
        )

        assert arn.to_string() == "arn:aws:lambda:us-east-1:123456789012:function:myFunc"

    def test_compose_without_type_ignores_separator(self):
        """Test that a bare resource always uses the colon separator."""
        arn = Arn(service="s3", resource="my-bucket", separator="/")

        assert arn.separator == ":"
        assert arn.to_string() == "arn:aws:s3:::my-bucket"

    def test_compose_rejects_colon_in_header(self):
        """Test that header segments cannot contain colons."""
        with pytest.raises(ValueError):
            Arn(service="lam:bda", resource="x")

    def test_arn_is_immutable(self):
        """Test that parsed ARNs are frozen."""
        arn = Arn.parse("arn:aws:s3:::my-bucket")

        with pytest.raises(ValueError):
            arn.resource = "other"
