"""Mention token extraction and user mention expansion.

User mentions appear as ``<@U123>`` (optionally ``<@U123|name>``) or, in text
copied out of Slack, as a bare ``@U0123ABCD`` id. Resolution is a separate
async stage: the pipeline collects the ids, asks a NameResolver for names in
one batch, then substitutes synchronously with ``expand_user_mentions``.
"""

import re
from typing import Protocol

from slack_keeper.models.text import MentionKind, MentionToken

USER_MENTION = re.compile(r"<@([UW][A-Z0-9]+)(?:\|[^<>]*)?>")
BARE_USER_MENTION = re.compile(r"(?<![A-Za-z0-9._%+-])@([UW][A-Z0-9]{8,})\b")
_CHANNEL_TOKEN = re.compile(r"<#([A-Z0-9]+)(?:\|[^<>]*)?>")
_BROADCAST_TOKEN = re.compile(r"<!(here|channel|everyone)(?:\|[^<>]*)?>")


class NameResolver(Protocol):
    """Anything that maps user ids to display names without raising."""

    async def resolve(self, ids: set[str]) -> dict[str, str]: ...


class StaticResolver:
    """NameResolver backed by a fixed mapping; unknown ids resolve to themselves."""

    def __init__(self, names: dict[str, str] | None = None) -> None:
        self._names = dict(names or {})

    async def resolve(self, ids: set[str]) -> dict[str, str]:
        return {user_id: self._names.get(user_id) or user_id for user_id in ids}


def extract_mentions(text: str) -> list[MentionToken]:
    """Return distinct mention tokens in order of first appearance."""
    found: list[tuple[int, MentionToken]] = []
    for pattern, kind in (
        (USER_MENTION, MentionKind.USER),
        (BARE_USER_MENTION, MentionKind.USER),
        (_CHANNEL_TOKEN, MentionKind.CHANNEL),
        (_BROADCAST_TOKEN, MentionKind.BROADCAST),
    ):
        for match in pattern.finditer(text):
            found.append((match.start(), MentionToken(kind=kind, id=match.group(1))))

    tokens: list[MentionToken] = []
    seen: set[MentionToken] = set()
    for _, token in sorted(found, key=lambda item: item[0]):
        if token not in seen:
            seen.add(token)
            tokens.append(token)
    return tokens


def user_ids(text: str) -> set[str]:
    """Distinct user ids referenced by the text."""
    return {token.id for token in extract_mentions(text) if token.kind is MentionKind.USER}


def expand_user_mentions(text: str, names: dict[str, str]) -> str:
    """Replace user mentions with ``@name``; ids missing from names become ``@id``."""

    def _replace(match: re.Match) -> str:
        user_id = match.group(1)
        return f"@{names.get(user_id) or user_id}"

    text = USER_MENTION.sub(_replace, text)
    return BARE_USER_MENTION.sub(_replace, text)
