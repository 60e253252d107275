"""Mention token model extracted from Slack mrkdwn."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class MentionKind(str, Enum):
    """What a mention token points at."""

    USER = "user"
    CHANNEL = "channel"
    BROADCAST = "broadcast"


class MentionToken(BaseModel):
    """A mention fragment found in raw message text, e.g. <@U123> or <!here>."""

    model_config = ConfigDict(frozen=True)

    kind: MentionKind
    id: str  # User/channel id, or the broadcast keyword ("here", "channel", "everyone")
