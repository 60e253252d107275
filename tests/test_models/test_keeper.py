"""Tests for Keeper models and description strategy descriptors."""

import pytest
from pydantic import ValidationError

from slack_keeper.models.keeper import (
    DEFAULT_DESCRIPTION_STRATEGIES,
    AuthToken,
    ClientRecord,
    DescriptionStrategy,
    Task,
    as_keeper_id,
)


def test_client_record_requires_id_and_name():
    """ClientRecord without a name is rejected."""
    with pytest.raises(ValidationError):
        ClientRecord(id="1")


def test_auth_token_valid_before_margin():
    """Token is valid while now is before expiry minus margin."""
    token = AuthToken(value="t", expires_at=1000.0)
    assert token.is_valid(now=939.0, safety_margin=60.0)


def test_auth_token_invalid_inside_margin():
    """Token is invalid once inside the safety margin."""
    token = AuthToken(value="t", expires_at=1000.0)
    assert not token.is_valid(now=940.0, safety_margin=60.0)
    assert not token.is_valid(now=1001.0, safety_margin=60.0)


def test_task_optional_fields_default_none():
    """Task only needs client id and title."""
    task = Task(client_id="7", title="Call back")
    assert task.id is None
    assert task.assignee_id is None
    assert task.description is None
    assert task.due_date is None
    assert task.description_strategy is None


def test_as_keeper_id_numeric_becomes_int():
    """Digit-only ids are sent as numbers, others untouched."""
    assert as_keeper_id("42") == 42
    assert as_keeper_id("abc-42") == "abc-42"


def test_patch_strategy_builds_request():
    """A PATCH strategy targets the task path with a single field."""
    strategy = DescriptionStrategy(
        name="patch_description",
        method="patch",
        path="/api/non-closing-tasks/{task_id}",
        field="description",
    )
    method, path, body = strategy.build("99", "hello")
    assert method == "PATCH"
    assert path == "/api/non-closing-tasks/99"
    assert body == {"description": "hello"}


def test_flat_note_strategy_includes_task_id():
    """A flat note strategy carries the task id in the body."""
    strategy = DescriptionStrategy(
        name="flat_note", method="POST", path="/api/notes", field="text", task_id_field="taskId"
    )
    method, path, body = strategy.build("99", "hello")
    assert (method, path) == ("POST", "/api/notes")
    assert body == {"text": "hello", "taskId": 99}


def test_default_strategy_order():
    """Default order: three field updates, then nested note, then flat note."""
    names = [s.name for s in DEFAULT_DESCRIPTION_STRATEGIES]
    assert names == [
        "patch_description",
        "patch_subtext",
        "patch_notes",
        "nested_note",
        "flat_note",
    ]
    fields = [s.field for s in DEFAULT_DESCRIPTION_STRATEGIES[:3]]
    assert fields == ["description", "subText", "notes"]


def test_strategy_is_frozen():
    """Strategies are immutable descriptors."""
    strategy = DEFAULT_DESCRIPTION_STRATEGIES[0]
    with pytest.raises(ValidationError):
        strategy.field = "other"
