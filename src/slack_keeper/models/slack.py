"""Slack interaction models with extracted fields (no raw payload)."""

from pydantic import BaseModel


class TaskSubmission(BaseModel):
    """Values submitted from the create-task modal."""

    client_id: str
    assignee_id: str | None = None
    title: str | None = None
    description: str | None = None
    due_date: str | None = None  # YYYY-MM-DD from the datepicker
    channel_id: str | None = None  # Source message location, for the permalink
    message_ts: str | None = None


class MessageShortcut(BaseModel):
    """The "Send to Keeper" message shortcut: the source message and where it lives."""

    trigger_id: str
    channel_id: str | None = None
    message_ts: str | None = None
    text: str = ""  # Raw mrkdwn of the source message
