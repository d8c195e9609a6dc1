"""
Dummy Lambda Function - sample commandable Lambda function.

Hosts an in-memory dummy controller behind a CommandableLambdaFunction, so
each controller command is callable through the Lambda payload
``{"cmd": "<command>", "correlationId": "...", ...}``.
"""

import os
import sys
import threading
import uuid
from typing import Any, Dict, List, Optional

# Add the toolkit package to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from pydantic import BaseModel, Field

from aws_toolkit.commands import Command, CommandSet
from aws_toolkit.container import CommandableLambdaFunction


class Dummy(BaseModel):
    """Dummy entity."""

    id: Optional[str] = None
    key: str = Field(min_length=1)
    content: Optional[str] = None


class DummyIdArgs(BaseModel):
    dummy_id: str = Field(min_length=1)


class DummyArgs(BaseModel):
    dummy: Dummy


class GetDummiesArgs(BaseModel):
    key: Optional[str] = None


class DummyController:
    """In-memory dummy persistence exposed as commands."""

    def __init__(self):
        self._items: Dict[str, Dummy] = {}
        self._lock = threading.Lock()
        self._command_set: Optional[CommandSet] = None

    def get_dummies(self, trace_id: Optional[str], key: Optional[str] = None) -> List[Dummy]:
        with self._lock:
            items = list(self._items.values())
        if key is not None:
            items = [item for item in items if item.key == key]
        return items

    def get_dummy_by_id(self, trace_id: Optional[str], dummy_id: str) -> Optional[Dummy]:
        with self._lock:
            return self._items.get(dummy_id)

    def create_dummy(self, trace_id: Optional[str], dummy: Dummy) -> Dummy:
        item = dummy.model_copy(update={"id": dummy.id or uuid.uuid4().hex})
        with self._lock:
            self._items[item.id] = item
        return item

    def update_dummy(self, trace_id: Optional[str], dummy: Dummy) -> Optional[Dummy]:
        with self._lock:
            if dummy.id is None or dummy.id not in self._items:
                return None
            self._items[dummy.id] = dummy
        return dummy

    def delete_dummy_by_id(self, trace_id: Optional[str], dummy_id: str) -> Optional[Dummy]:
        with self._lock:
            return self._items.pop(dummy_id, None)

    def get_command_set(self) -> CommandSet:
        if self._command_set is None:
            self._command_set = self._create_command_set()
        return self._command_set

    def _create_command_set(self) -> CommandSet:
        command_set = CommandSet()

        command_set.add_command(Command(
            'get_dummies',
            GetDummiesArgs,
            lambda trace_id, args: {
                "data": [item.model_dump() for item in self.get_dummies(trace_id, args.get('key'))]
            },
        ))
        command_set.add_command(Command(
            'get_dummy_by_id',
            DummyIdArgs,
            lambda trace_id, args: _dump(self.get_dummy_by_id(trace_id, args['dummy_id'])),
        ))
        command_set.add_command(Command(
            'create_dummy',
            DummyArgs,
            lambda trace_id, args: _dump(self.create_dummy(trace_id, Dummy.model_validate(args['dummy']))),
        ))
        command_set.add_command(Command(
            'update_dummy',
            DummyArgs,
            lambda trace_id, args: _dump(self.update_dummy(trace_id, Dummy.model_validate(args['dummy']))),
        ))
        command_set.add_command(Command(
            'delete_dummy_by_id',
            DummyIdArgs,
            lambda trace_id, args: _dump(self.delete_dummy_by_id(trace_id, args['dummy_id'])),
        ))

        return command_set


def _dump(dummy: Optional[Dummy]) -> Optional[Dict[str, Any]]:
    return dummy.model_dump() if dummy is not None else None


class DummyLambdaFunction(CommandableLambdaFunction):
    """Dummy controller hosted as a Lambda function."""

    def __init__(self, controller: Optional[DummyController] = None):
        super().__init__('dummy', 'Dummy lambda function', controller or DummyController())


function = DummyLambdaFunction()
lambda_handler = function.get_handler()
