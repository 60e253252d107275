"""Slack user id -> display name resolution.

Each distinct id gets one users.info lookup; lookups run concurrently and a
failed lookup (unknown user, rate limit, network error) resolves the id to
itself. resolve() never raises.
"""

import asyncio
import logging

from slack_sdk.web.async_client import AsyncWebClient

logger = logging.getLogger(__name__)


def select_display_name(user: dict, fallback: str) -> str:
    """Pick the best human-readable name from a users.info ``user`` object.

    Priority: normalized display name, display name, real name, account name,
    then the fallback (the raw id).
    """
    profile = user.get("profile") or {}
    for candidate in (
        profile.get("display_name_normalized"),
        profile.get("display_name"),
        user.get("real_name"),
        profile.get("real_name"),
        user.get("name"),
    ):
        if candidate and str(candidate).strip():
            return str(candidate).strip()
    return fallback


class SlackNameResolver:
    """NameResolver backed by the Slack users.info API."""

    def __init__(self, client: AsyncWebClient) -> None:
        self._client = client

    async def resolve(self, ids: set[str]) -> dict[str, str]:
        """Resolve every id to a display name, falling back to the id itself."""
        ordered = sorted(ids)
        results = await asyncio.gather(
            *[self._lookup(user_id) for user_id in ordered],
            return_exceptions=True,
        )

        names: dict[str, str] = {}
        for user_id, result in zip(ordered, results):
            if isinstance(result, str):
                names[user_id] = result
            else:
                logger.warning("Failed to resolve Slack user %s: %s", user_id, result)
                names[user_id] = user_id
        return names

    async def _lookup(self, user_id: str) -> str:
        response = await self._client.users_info(user=user_id)
        return select_display_name(response.get("user") or {}, user_id)
