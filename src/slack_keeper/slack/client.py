"""Async Slack client and name resolver singletons.

Creates a cached AsyncWebClient configured with the bot token from application
settings, and a SlackNameResolver on top of it. Follows the lazy-init pattern
used for the Keeper client.
"""

from slack_sdk.web.async_client import AsyncWebClient

from slack_keeper.config import get_settings
from slack_keeper.slack.resolver import SlackNameResolver

_client: AsyncWebClient | None = None
_resolver: SlackNameResolver | None = None


async def get_slack_client() -> AsyncWebClient:
    """Return a cached async Slack client instance.

    Creates the client on first call using slack_bot_token from settings.
    Subsequent calls return the cached instance.
    """
    global _client
    if _client is None:
        settings = get_settings()
        _client = AsyncWebClient(token=settings.slack_bot_token)
    return _client


async def get_name_resolver() -> SlackNameResolver:
    """Return the cached resolver bound to the cached Slack client."""
    global _resolver
    if _resolver is None:
        _resolver = SlackNameResolver(await get_slack_client())
    return _resolver


def reset_client() -> None:
    """Reset the cached client and resolver. Used for testing."""
    global _client, _resolver
    _client = None
    _resolver = None
