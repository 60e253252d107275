"""Process-scoped Keeper services wired from settings.

The entity cache and task writer are built lazily around the shared
KeeperClient, following the same lazy-init pattern as the API clients.
"""

from slack_keeper.config import get_settings
from slack_keeper.keeper.cache import EntityCache
from slack_keeper.keeper.client import get_keeper_client
from slack_keeper.keeper.directory import DirectoryFetcher
from slack_keeper.keeper.tasks import TaskWriter

_entity_cache: EntityCache | None = None
_task_writer: TaskWriter | None = None


def get_entity_cache() -> EntityCache:
    """Return the process-wide client directory cache."""
    global _entity_cache
    if _entity_cache is None:
        settings = get_settings()
        fetcher = DirectoryFetcher(get_keeper_client(), page_size=settings.keeper_page_size)
        _entity_cache = EntityCache(fetcher)
    return _entity_cache


def get_task_writer() -> TaskWriter:
    """Return the task writer using the configured description strategies."""
    global _task_writer
    if _task_writer is None:
        settings = get_settings()
        _task_writer = TaskWriter(
            get_keeper_client(), strategies=settings.keeper_description_strategies
        )
    return _task_writer


def reset_services() -> None:
    """Drop the cached cache and writer instances. Used for testing."""
    global _entity_cache, _task_writer
    _entity_cache = None
    _task_writer = None
