"""Keeper output: credentials, client directory, users, and task creation."""

from slack_keeper.keeper.auth import TokenCache
from slack_keeper.keeper.cache import EntityCache
from slack_keeper.keeper.client import KeeperClient, close_client, get_keeper_client, reset_client
from slack_keeper.keeper.directory import DirectoryFetcher, map_client, pick_list
from slack_keeper.keeper.errors import CredentialExchangeError, DirectoryFetchError, KeeperError
from slack_keeper.keeper.service import get_entity_cache, get_task_writer, reset_services
from slack_keeper.keeper.tasks import TaskWriter, build_title
from slack_keeper.keeper.users import get_users, invalidate_user_cache

__all__ = [
    "build_title",
    "close_client",
    "CredentialExchangeError",
    "DirectoryFetcher",
    "DirectoryFetchError",
    "EntityCache",
    "get_entity_cache",
    "get_keeper_client",
    "get_task_writer",
    "get_users",
    "invalidate_user_cache",
    "KeeperClient",
    "KeeperError",
    "map_client",
    "pick_list",
    "reset_client",
    "reset_services",
    "TaskWriter",
    "TokenCache",
]
