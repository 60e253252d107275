"""Keeper user listing with a short TTL cache.

Users change rarely but the assignee picker asks for them on every modal,
so the list is cached for 5 minutes.
"""

from cachetools import TTLCache

from slack_keeper.keeper.client import KeeperClient
from slack_keeper.keeper.directory import pick_list
from slack_keeper.models.keeper import KeeperUser

USERS_PATH = "/api/users"

_user_cache: TTLCache = TTLCache(maxsize=1, ttl=300)  # 5-minute TTL
_USER_CACHE_KEY = "users"


async def get_users(client: KeeperClient) -> list[KeeperUser]:
    """Return Keeper users, fetching on first call or after TTL expiry.

    Entries without an id or name are dropped.
    """
    cached = _user_cache.get(_USER_CACHE_KEY)
    if cached is not None:
        return cached

    response = await client.get(USERS_PATH)
    users = [
        KeeperUser(id=str(raw["id"]), name=str(raw["name"]).strip())
        for raw in pick_list(response)
        if isinstance(raw, dict)
        and raw.get("id") is not None
        and str(raw.get("name") or "").strip()
    ]
    _user_cache[_USER_CACHE_KEY] = users
    return users


def invalidate_user_cache() -> None:
    """Clear the user cache. Used for testing."""
    _user_cache.clear()
