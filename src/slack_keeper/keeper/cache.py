"""In-memory snapshot of the Keeper client directory.

The snapshot is an immutable tuple replaced wholesale after each successful
fetch, so readers never observe a partially-populated list. Background and
on-demand refreshes may race; whichever finishes last wins.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from slack_keeper.keeper.directory import DirectoryFetcher
from slack_keeper.models.keeper import ClientRecord

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 100
DEFAULT_LIMIT = 50


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntityCache:
    """Latest full directory snapshot plus a substring search over it."""

    def __init__(
        self,
        fetcher: DirectoryFetcher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._fetcher = fetcher
        self._clock = clock
        self._snapshot: tuple[ClientRecord, ...] = ()
        self.last_refreshed_at: datetime | None = None

    @property
    def records(self) -> tuple[ClientRecord, ...]:
        return self._snapshot

    @property
    def is_empty(self) -> bool:
        """True until the first successful refresh, even if that refresh found no clients."""
        return self.last_refreshed_at is None

    async def refresh(self) -> int:
        """Fetch the full directory and swap it in. Returns the new record count.

        On failure the previous snapshot is kept and the error propagates.
        """
        records = await self._fetcher.fetch_all()
        self._snapshot = tuple(records)
        self.last_refreshed_at = self._clock()
        logger.info("Cached %d Keeper clients", len(records))
        return len(records)

    async def search(
        self,
        query: str | None = None,
        limit: int = SEARCH_LIMIT,
        default_limit: int = DEFAULT_LIMIT,
    ) -> list[ClientRecord]:
        """Return clients whose name contains query (case-insensitive).

        A blank query returns the first ``default_limit`` clients in cache
        order. Refreshes eagerly when the cache has never been populated; if
        that refresh fails, the error is logged and the current (empty)
        snapshot is searched.
        """
        if self.is_empty:
            try:
                await self.refresh()
            except Exception:
                logger.error("Eager client directory refresh failed", exc_info=True)

        snapshot = self._snapshot
        needle = (query or "").strip().lower()
        if not needle:
            return list(snapshot[:default_limit])
        matches = [record for record in snapshot if needle in record.name.lower()]
        return matches[:limit]

    async def run_periodic(self, interval_seconds: float) -> None:
        """Refresh now and then every interval until cancelled. Failures are logged."""
        while True:
            try:
                await self.refresh()
            except Exception:
                logger.error(
                    "Periodic client directory refresh failed, keeping last snapshot",
                    exc_info=True,
                    extra={"cached_clients": len(self._snapshot)},
                )
            await asyncio.sleep(interval_seconds)
