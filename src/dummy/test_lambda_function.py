import pytest
from lambda_function import Dummy, DummyController, DummyLambdaFunction, lambda_handler


@pytest.fixture
def function():
    return DummyLambdaFunction()


class TestDummyController:
    """Test cases for the in-memory dummy controller."""

    def test_crud_operations(self):
        """Test create, read, update and delete."""
        controller = DummyController()

        created = controller.create_dummy("123", Dummy(key="key 1", content="content 1"))
        assert created.id is not None

        assert controller.get_dummy_by_id("123", created.id) == created
        assert controller.get_dummies("123") == [created]
        assert controller.get_dummies("123", key="other") == []

        updated = controller.update_dummy("123", created.model_copy(update={"content": "content 2"}))
        assert updated.content == "content 2"

        deleted = controller.delete_dummy_by_id("123", created.id)
        assert deleted.id == created.id
        assert controller.get_dummy_by_id("123", created.id) is None

    def test_update_missing(self):
        """Test updating a dummy that does not exist."""
        controller = DummyController()

        assert controller.update_dummy("123", Dummy(id="missing", key="key")) is None


class TestDummyLambdaFunction:
    """Test cases for the dummy Lambda function."""

    def test_crud_through_handler(self, function):
        """Test all commands through the Lambda entry point."""
        created = function.act({
            "cmd": "create_dummy",
            "correlationId": "123",
            "dummy": {"key": "key 1", "content": "content 1"},
        })
        assert created["key"] == "key 1"

        listed = function.act({"cmd": "get_dummies", "correlationId": "123"})
        assert [item["id"] for item in listed["data"]] == [created["id"]]

        created["content"] = "content 2"
        updated = function.act({"cmd": "update_dummy", "correlationId": "123", "dummy": created})
        assert updated["content"] == "content 2"

        fetched = function.act({"cmd": "get_dummy_by_id", "correlationId": "123", "dummy_id": created["id"]})
        assert fetched == updated

        deleted = function.act({"cmd": "delete_dummy_by_id", "correlationId": "123", "dummy_id": created["id"]})
        assert deleted["id"] == created["id"]

        missing = function.act({"cmd": "get_dummy_by_id", "correlationId": "123", "dummy_id": created["id"]})
        assert missing is None

    def test_invalid_arguments(self, function):
        """Test that command schemas reject bad arguments."""
        result = function.act({"cmd": "create_dummy", "correlationId": "123", "dummy": {"content": "x"}})

        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_command(self, function):
        """Test calling a command the controller does not expose."""
        result = function.act({"cmd": "drop_dummies", "correlationId": "123"})

        assert result["error"]["code"] == "NO_ACTION"
        assert result["error"]["details"] == {"command": "drop_dummies"}

    def test_module_handler(self):
        """Test the module-level Lambda handler."""
        result = lambda_handler({"cmd": "get_dummies", "correlationId": "123"}, None)

        assert result == {"data": []}
