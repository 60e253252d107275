"""Keeper records, credentials, and description persistence strategies."""

from pydantic import BaseModel, ConfigDict


class ClientRecord(BaseModel):
    """A Keeper client from the directory listing. Both fields are always non-empty."""

    id: str
    name: str


class KeeperUser(BaseModel):
    """A Keeper user that tasks can be assigned to."""

    id: str
    name: str


class AuthToken(BaseModel):
    """Bearer credential with its absolute expiry on the cache clock."""

    value: str
    expires_at: float

    def is_valid(self, now: float, safety_margin: float) -> bool:
        """True while now is before the expiry minus the safety margin."""
        return now < self.expires_at - safety_margin


class Task(BaseModel):
    """A task created in Keeper from a Slack submission."""

    id: str | None = None  # None if the create response carried no id
    client_id: str
    assignee_id: str | None = None
    title: str
    description: str | None = None
    due_date: str | None = None  # YYYY-MM-DD as delivered by the Slack datepicker
    description_strategy: str | None = None  # Strategy that persisted the description


class DescriptionStrategy(BaseModel):
    """One candidate way of attaching a description to an existing task.

    Pure descriptor: ``build`` turns it into a concrete request without
    performing any I/O. ``path`` may reference ``{task_id}``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    method: str  # "PATCH" or "POST"
    path: str
    field: str
    task_id_field: str | None = None  # Body key for the task id on flat endpoints

    def build(self, task_id: str, text: str) -> tuple[str, str, dict]:
        """Return (method, path, json body) for this attempt."""
        body: dict = {self.field: text}
        if self.task_id_field:
            body[self.task_id_field] = as_keeper_id(task_id)
        return self.method.upper(), self.path.format(task_id=task_id), body


def as_keeper_id(value: str) -> int | str:
    """Send purely numeric ids as numbers; Keeper ids are integers on most tenants."""
    return int(value) if value.isdigit() else value


# Order matters: the writer stops at the first strategy that does not raise.
DEFAULT_DESCRIPTION_STRATEGIES: tuple[DescriptionStrategy, ...] = (
    DescriptionStrategy(
        name="patch_description",
        method="PATCH",
        path="/api/non-closing-tasks/{task_id}",
        field="description",
    ),
    DescriptionStrategy(
        name="patch_subtext",
        method="PATCH",
        path="/api/non-closing-tasks/{task_id}",
        field="subText",
    ),
    DescriptionStrategy(
        name="patch_notes",
        method="PATCH",
        path="/api/non-closing-tasks/{task_id}",
        field="notes",
    ),
    DescriptionStrategy(
        name="nested_note",
        method="POST",
        path="/api/non-closing-tasks/{task_id}/notes",
        field="text",
    ),
    DescriptionStrategy(
        name="flat_note",
        method="POST",
        path="/api/notes",
        field="text",
        task_id_field="taskId",
    ),
)
