"""Client directory listing with adaptive pagination.

Keeper deployments disagree on pagination: some honour offset-style
``skip``/``offset`` parameters, others only ``page``/``pageNumber``/``pageSize``,
and some silently ignore whichever they do not understand and keep returning
the first page. The fetcher starts offset-style and switches to page-style
for the rest of the fetch when a request fails, a body is not JSON, or a
full page brings no new ids. Response bodies may be a bare list or wrapped
under a conventional key.
"""

import logging
from typing import Any

import httpx

from slack_keeper.keeper.client import KeeperClient
from slack_keeper.keeper.errors import DirectoryFetchError
from slack_keeper.models.keeper import ClientRecord

logger = logging.getLogger(__name__)

CLIENTS_PATH = "/api/clients/summary"

_LIST_KEYS = ("items", "results", "clients", "data")
_NAME_KEYS = ("name", "clientName", "title", "companyName", "client_name", "company")


def pick_list(response: Any) -> list:
    """Return the record list from a bare-array or wrapped response body."""
    if isinstance(response, list):
        return response
    if isinstance(response, dict):
        for key in _LIST_KEYS:
            value = response.get(key)
            if isinstance(value, list):
                return value
    return []


def map_client(raw: dict) -> ClientRecord | None:
    """Map a raw directory entry to a ClientRecord. Pure function.

    The name is the first non-empty candidate field. Returns None when the
    entry has no id or no name.
    """
    raw_id = raw.get("id")
    if raw_id is None or raw_id == "":
        return None
    for key in _NAME_KEYS:
        value = raw.get(key)
        if value is not None and str(value).strip():
            return ClientRecord(id=str(raw_id), name=str(value).strip())
    return None


class DirectoryFetcher:
    """Fetches the complete, deduplicated Keeper client directory."""

    def __init__(
        self,
        client: KeeperClient,
        path: str = CLIENTS_PATH,
        page_size: int = 100,
    ) -> None:
        self._client = client
        self._path = path
        self._page_size = page_size

    def _params(self, cursor: int, use_page: bool) -> dict:
        params: dict = {"limit": self._page_size}
        if use_page:
            page = cursor + 1  # 1-based
            params.update(page=page, pageNumber=page, pageSize=self._page_size)
        else:
            offset = cursor * self._page_size
            params.update(skip=offset, offset=offset)
        return params

    async def fetch_all(self) -> list[ClientRecord]:
        """Fetch every directory page and return distinct, named clients in arrival order.

        Stops on a short page, or on a page with no new ids once page-style
        pagination is in use.

        Raises:
            DirectoryFetchError: If a page-style request fails.
        """
        records: list[ClientRecord] = []
        seen: set[str] = set()
        cursor = 0
        use_page = False

        while True:
            params = self._params(cursor, use_page)
            try:
                response = await self._client.get(self._path, params=params)
            except (httpx.HTTPError, ValueError) as exc:
                if not use_page:
                    logger.warning(
                        "Offset-style directory request failed, switching to page-style: %s",
                        exc,
                    )
                    use_page = True
                    continue
                raise DirectoryFetchError(f"Client directory request failed: {exc}") from exc

            page = pick_list(response)
            before = len(seen)

            for raw in page:
                if not isinstance(raw, dict):
                    continue
                raw_id = raw.get("id")
                if raw_id is None or raw_id == "" or str(raw_id) in seen:
                    continue
                seen.add(str(raw_id))
                record = map_client(raw)
                if record is not None:
                    records.append(record)

            if len(page) < self._page_size:
                break

            if len(seen) == before:
                if use_page:
                    logger.warning(
                        "Page-style pagination returned no new clients, stopping at page %d",
                        cursor + 1,
                    )
                    break
                logger.warning(
                    "Offset-style pagination is repeating records, switching to page-style"
                )
                use_page = True
                continue

            cursor += 1

        logger.info(
            "Fetched client directory",
            extra={"clients": len(records), "distinct_ids": len(seen), "page_style": use_page},
        )
        return records
