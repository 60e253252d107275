"""Task creation with best-effort description persistence.

Keeper tenants disagree on which field holds a task's description, and the
create endpoint rejects unknown fields on some of them. Tasks are therefore
created with only the universally accepted fields, and the description is
attached afterwards by walking an ordered list of DescriptionStrategy
descriptors until one request succeeds. Attach failures are logged and
never fail the task creation itself.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from slack_keeper.keeper.client import KeeperClient
from slack_keeper.models.keeper import (
    DEFAULT_DESCRIPTION_STRATEGIES,
    DescriptionStrategy,
    Task,
    as_keeper_id,
)

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/non-closing-tasks"
TITLE_MAX_LENGTH = 255
DEFAULT_TITLE = "Task from Slack"


def build_title(title: str | None, description: str | None) -> str:
    """Pick the task title: the given one, else the description's first line, else a default.

    Always truncated to TITLE_MAX_LENGTH.
    """
    raw_title = (title or "").strip()
    if raw_title:
        return raw_title[:TITLE_MAX_LENGTH]
    lines = (description or "").strip().splitlines()
    fallback = lines[0].strip() if lines else ""
    return (fallback or DEFAULT_TITLE)[:TITLE_MAX_LENGTH]


def _extract_task_id(response: Any) -> str | None:
    """Read the created task id from ``id``, ``taskId`` or ``data.id``."""
    if not isinstance(response, dict):
        return None
    data = response.get("data")
    nested = data.get("id") if isinstance(data, dict) else None
    for candidate in (response.get("id"), response.get("taskId"), nested):
        if candidate is not None and candidate != "":
            return str(candidate)
    return None


class TaskWriter:
    """Creates Keeper tasks and attaches descriptions via fallback strategies."""

    def __init__(
        self,
        client: KeeperClient,
        strategies: Sequence[DescriptionStrategy] = DEFAULT_DESCRIPTION_STRATEGIES,
    ) -> None:
        self._client = client
        self._strategies = tuple(strategies)

    async def create_task(
        self,
        client_id: str | int,
        assignee_id: str | int | None,
        title: str | None,
        description: str | None = None,
        due_date: str | None = None,
    ) -> Task:
        """Create a task, then attach its description on a best-effort basis.

        Errors from the create request propagate. Description attach errors
        are logged only.
        """
        text = (description or "").strip()
        task_title = build_title(title, text)
        client_key = str(client_id)
        assignee_key = str(assignee_id) if assignee_id not in (None, "") else None

        body: dict = {
            "clientId": as_keeper_id(client_key),
            "taskName": task_title,
            "priority": False,
        }
        if assignee_key:
            body["assignedTo"] = as_keeper_id(assignee_key)
        if due_date:
            body["dueDate"] = due_date

        response = await self._client.post(TASKS_PATH, body)
        task_id = _extract_task_id(response)
        logger.info(
            "Created Keeper task",
            extra={"task_id": task_id, "client_id": client_key, "title": task_title},
        )

        strategy_name = None
        if text and task_id:
            strategy_name = await self.attach_description(task_id, text)
        elif text:
            logger.warning("Create response carried no task id, description not attached")

        return Task(
            id=task_id,
            client_id=client_key,
            assignee_id=assignee_key,
            title=task_title,
            description=text or None,
            due_date=due_date or None,
            description_strategy=strategy_name,
        )

    async def attach_description(self, task_id: str, text: str) -> str | None:
        """Try each strategy in order; return the name of the first that succeeds.

        Returns None if every strategy fails.
        """
        for strategy in self._strategies:
            method, path, body = strategy.build(task_id, text)
            try:
                await self._client.request(method, path, body)
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning(
                    "Description strategy %s failed for task %s: %s",
                    strategy.name,
                    task_id,
                    exc,
                )
                continue
            logger.info(
                "Attached description to task %s via %s", task_id, strategy.name
            )
            return strategy.name

        logger.error(
            "All description strategies failed, task %s saved without description",
            task_id,
            extra={"strategies": [s.name for s in self._strategies]},
        )
        return None
