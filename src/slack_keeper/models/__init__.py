"""Data models for the Slack to Keeper integration."""

from slack_keeper.models.keeper import (
    DEFAULT_DESCRIPTION_STRATEGIES,
    AuthToken,
    ClientRecord,
    DescriptionStrategy,
    KeeperUser,
    Task,
)
from slack_keeper.models.slack import MessageShortcut, TaskSubmission
from slack_keeper.models.text import MentionKind, MentionToken

__all__ = [
    "AuthToken",
    "ClientRecord",
    "DEFAULT_DESCRIPTION_STRATEGIES",
    "DescriptionStrategy",
    "KeeperUser",
    "MentionKind",
    "MentionToken",
    "MessageShortcut",
    "Task",
    "TaskSubmission",
]
