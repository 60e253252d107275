"""Slack interactivity dispatch: message shortcut, select options, and task modal submissions."""

import json
import logging

from fastapi import BackgroundTasks
from fastapi.responses import JSONResponse, Response
from slack_sdk.errors import SlackApiError

from slack_keeper.keeper import get_entity_cache, get_keeper_client, get_task_writer, get_users
from slack_keeper.models.slack import MessageShortcut, TaskSubmission
from slack_keeper.slack.client import get_name_resolver, get_slack_client
from slack_keeper.slack.views import (
    ASSIGNEE_ACTION,
    CLIENT_ACTION,
    CREATE_TASK_CALLBACK,
    build_task_modal,
)
from slack_keeper.text import normalize

logger = logging.getLogger(__name__)

SEND_TO_KEEPER_CALLBACK = "send_to_keeper"

# Slack caps external_select responses at 100 options of 75 chars each.
MAX_OPTIONS = 100
MAX_OPTION_TEXT = 75


async def handle_interaction(payload: dict, background_tasks: BackgroundTasks) -> Response:
    """Dispatch a Slack interaction payload based on its type.

    - message_action (send to Keeper shortcut): acknowledge, open the modal in background
    - block_suggestion: return external_select options
    - view_submission (create task modal): acknowledge, create the task in background
    - anything else: acknowledge with 200
    """
    interaction = payload.get("type")

    if interaction == "message_action":
        if payload.get("callback_id") != SEND_TO_KEEPER_CALLBACK:
            return Response(status_code=200)
        shortcut = parse_shortcut(payload)
        if shortcut is None:
            logger.warning("Message shortcut arrived without a trigger_id")
            return Response(status_code=200)
        background_tasks.add_task(open_task_modal, shortcut)
        return Response(status_code=200)

    if interaction == "block_suggestion":
        return JSONResponse(await build_options(payload))

    if interaction == "view_submission":
        view = payload.get("view") or {}
        if view.get("callback_id") != CREATE_TASK_CALLBACK:
            return Response(status_code=200)
        submission = parse_submission(view)
        if submission is None:
            return JSONResponse(
                {
                    "response_action": "errors",
                    "errors": {"client_block": "Pick a client"},
                }
            )
        logger.info(
            "Dispatching task creation for client %s from user %s",
            submission.client_id,
            (payload.get("user") or {}).get("id"),
        )
        background_tasks.add_task(process_task_submission, submission)
        return Response(status_code=200)

    return JSONResponse({"ok": True})


def _option(text: str, value: str) -> dict:
    return {"text": {"type": "plain_text", "text": text[:MAX_OPTION_TEXT]}, "value": value}


async def build_options(payload: dict) -> dict:
    """Build the options response for an external_select query.

    Any failure yields an empty option list so the picker stays usable.
    """
    action_id = payload.get("action_id")
    query = str(payload.get("value") or "")

    try:
        if action_id == CLIENT_ACTION:
            clients = await get_entity_cache().search(query)
            options = [_option(c.name, c.id) for c in clients]
        elif action_id == ASSIGNEE_ACTION:
            users = await get_users(get_keeper_client())
            needle = query.strip().lower()
            options = [_option(u.name, u.id) for u in users if needle in u.name.lower()]
        else:
            options = []
    except Exception:
        logger.error("Failed to build options for %s", action_id, exc_info=True)
        options = []

    return {"options": options[:MAX_OPTIONS]}


def message_text(message: dict) -> str:
    """Source message text, falling back to the first block's text."""
    text = message.get("text")
    if text:
        return str(text)
    blocks = message.get("blocks") or []
    first = blocks[0] if blocks and isinstance(blocks[0], dict) else {}
    block_text = first.get("text")
    if isinstance(block_text, dict):
        return str(block_text.get("text") or "")
    return ""


def parse_shortcut(payload: dict) -> MessageShortcut | None:
    """Extract the message shortcut fields. Returns None without a trigger_id."""
    trigger_id = payload.get("trigger_id")
    if not trigger_id:
        return None
    message = payload.get("message") or {}
    channel = payload.get("channel")
    channel_id = channel.get("id") if isinstance(channel, dict) else channel
    return MessageShortcut(
        trigger_id=trigger_id,
        channel_id=channel_id,
        message_ts=message.get("ts"),
        text=message_text(message),
    )


async def open_task_modal(shortcut: MessageShortcut) -> None:
    """Open the create-task modal prefilled with the normalized source message.

    The message location goes into private_metadata so the submission can
    link back to it. Runs after Slack has been acknowledged; failures are
    logged rather than raised.
    """
    try:
        resolver = await get_name_resolver()
        description = await normalize(shortcut.text, resolver)
        metadata = json.dumps({"channel": shortcut.channel_id, "ts": shortcut.message_ts})

        client = await get_slack_client()
        await client.views_open(
            trigger_id=shortcut.trigger_id,
            view=build_task_modal(description, metadata),
        )
        logger.info(
            "Opened Keeper task modal",
            extra={"channel_id": shortcut.channel_id, "message_ts": shortcut.message_ts},
        )
    except Exception as exc:
        logger.error("Error opening Keeper task modal: %s", exc, exc_info=True)


def _selected_value(state: dict, block_id: str, action_id: str, key: str) -> str | None:
    """Read one input value from view.state.values; None when absent."""
    element = (state.get(block_id) or {}).get(action_id) or {}
    value = element.get(key)
    if isinstance(value, dict):
        value = value.get("value")
    return str(value) if value not in (None, "") else None


def parse_submission(view: dict) -> TaskSubmission | None:
    """Extract the create-task modal values. Returns None if no client was picked."""
    state = (view.get("state") or {}).get("values") or {}

    client_id = _selected_value(state, "client_block", CLIENT_ACTION, "selected_option")
    if client_id is None:
        return None

    try:
        meta = json.loads(view.get("private_metadata") or "{}")
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed private_metadata on task modal")
        meta = {}
    if not isinstance(meta, dict):
        meta = {}

    return TaskSubmission(
        client_id=client_id,
        assignee_id=_selected_value(state, "assignee_block", ASSIGNEE_ACTION, "selected_option"),
        title=_selected_value(state, "task_title_block", "task_title_action", "value"),
        description=_selected_value(state, "description_block", "description_action", "value"),
        due_date=_selected_value(state, "due_date_block", "due_date_action", "selected_date"),
        channel_id=meta.get("channel"),
        message_ts=meta.get("ts"),
    )


async def fetch_permalink(channel_id: str | None, message_ts: str | None) -> str | None:
    """Return the permalink of the source message, or None if unavailable."""
    if not channel_id or not message_ts:
        return None
    try:
        client = await get_slack_client()
        response = await client.chat_getPermalink(channel=channel_id, message_ts=message_ts)
    except SlackApiError:
        logger.warning("Failed to fetch permalink for %s/%s", channel_id, message_ts, exc_info=True)
        return None
    return response.get("permalink")


async def process_task_submission(submission: TaskSubmission) -> None:
    """Normalize the description, append the permalink, and create the Keeper task.

    Runs as a background task after Slack has been acknowledged, so failures
    are logged rather than raised.
    """
    try:
        resolver = await get_name_resolver()
        # Re-clean in case the user typed formatting into the modal
        description = await normalize(submission.description, resolver)

        permalink = await fetch_permalink(submission.channel_id, submission.message_ts)
        if permalink:
            link_line = f"Slack message: {permalink}"
            description = f"{description}\n\n{link_line}" if description else link_line

        task = await get_task_writer().create_task(
            submission.client_id,
            submission.assignee_id,
            submission.title,
            description,
            submission.due_date,
        )
        logger.info(
            "Task submission complete",
            extra={"task_id": task.id, "description_strategy": task.description_strategy},
        )
    except Exception as exc:
        logger.error("Error creating task in Keeper: %s", exc, exc_info=True)
