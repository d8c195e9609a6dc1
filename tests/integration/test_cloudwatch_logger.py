"""
Integration tests for the CloudWatch Logs logger.

This module runs the logger against CloudWatch Logs mocked with moto.
"""

import pytest

from aws_toolkit.log import CloudWatchLogger, LogLevel


@pytest.mark.integration
class TestCloudWatchLogger:
    """Integration tests for CloudWatchLogger."""

    @pytest.fixture
    def cloudwatch_logger(self, logs_client, sink_config):
        logger = CloudWatchLogger()
        logger.configure(sink_config.override({
            "group": "test-group",
            "stream": "test-stream",
            "source": "orders",
            "level": "debug",
        }))
        yield logger
        logger.close(None)

    def test_open_creates_group_and_stream(self, cloudwatch_logger, logs_client):
        """Test that opening creates the log group and stream."""
        cloudwatch_logger.open("123")

        groups = logs_client.describe_log_groups(logGroupNamePrefix="test-group")["logGroups"]
        streams = logs_client.describe_log_streams(logGroupName="test-group")["logStreams"]
        assert [group["logGroupName"] for group in groups] == ["test-group"]
        assert [stream["logStreamName"] for stream in streams] == ["test-stream"]

    def test_open_with_existing_group_and_stream(self, cloudwatch_logger, logs_client):
        """Test that existing resources are reused."""
        logs_client.create_log_group(logGroupName="test-group")
        logs_client.create_log_stream(logGroupName="test-group", logStreamName="test-stream")

        cloudwatch_logger.open("123")

        assert cloudwatch_logger.is_open()

    def test_messages_written_on_dump(self, cloudwatch_logger, logs_client):
        """Test that buffered messages reach the log stream."""
        cloudwatch_logger.open("123")

        cloudwatch_logger.info("123", "Order %s created", "A1")
        cloudwatch_logger.debug(None, "details")
        cloudwatch_logger.dump()

        events = logs_client.get_log_events(logGroupName="test-group", logStreamName="test-stream")["events"]
        assert [event["message"] for event in events] == [
            "[orders:123:INFO] Order A1 created",
            "[orders:---:DEBUG] details",
        ]

    def test_repeated_writes(self, cloudwatch_logger, logs_client):
        """Test several writes to the same stream."""
        cloudwatch_logger.open("123")

        for index in range(3):
            cloudwatch_logger.warn("123", "warning %d", index)
            cloudwatch_logger.dump()

        events = logs_client.get_log_events(logGroupName="test-group", logStreamName="test-stream")["events"]
        assert len(events) == 3

    def test_close_flushes_buffer(self, cloudwatch_logger, logs_client):
        """Test that closing writes the remaining messages."""
        cloudwatch_logger.open("123")
        cloudwatch_logger.error("123", "shutting down")

        cloudwatch_logger.close("123")

        events = logs_client.get_log_events(logGroupName="test-group", logStreamName="test-stream")["events"]
        assert [event["message"] for event in events] == ["[orders:123:ERROR] shutting down"]

    def test_level_filtering(self, cloudwatch_logger, logs_client):
        """Test that filtered messages are never written."""
        cloudwatch_logger.level = LogLevel.ERROR
        cloudwatch_logger.open("123")

        cloudwatch_logger.info("123", "ignored")
        cloudwatch_logger.dump()

        events = logs_client.get_log_events(logGroupName="test-group", logStreamName="test-stream")["events"]
        assert events == []
