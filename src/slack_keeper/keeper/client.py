"""Authenticated Keeper API client and its lazy singleton.

KeeperClient wraps a shared httpx.AsyncClient and the TokenCache. A 401 on any
request invalidates the cached token and retries the request once with a
fresh one. Other HTTP errors propagate as httpx exceptions.
"""

import logging
from typing import Any

import httpx

from slack_keeper.config import get_settings
from slack_keeper.keeper.auth import TokenCache

logger = logging.getLogger(__name__)


class KeeperClient:
    """Minimal JSON client for the Keeper REST API."""

    def __init__(self, http: httpx.AsyncClient, base_url: str, tokens: TokenCache) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self.tokens = tokens

    async def get(self, path: str, params: dict | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, body: dict) -> Any:
        return await self._request("POST", path, json=body)

    async def request(self, method: str, path: str, body: dict | None = None) -> Any:
        """Send an arbitrary JSON request (used by description strategies)."""
        return await self._request(method, path, json=body)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._send(method, path, **kwargs)
        if response.status_code == 401:
            logger.warning("Keeper rejected the access token, refreshing: %s %s", method, path)
            self.tokens.invalidate()
            response = await self._send(method, path, **kwargs)
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        token = await self.tokens.get_token()
        headers = {"Authorization": f"Bearer {token}", "Accept": "application/json"}
        return await self._http.request(
            method, f"{self._base_url}{path}", headers=headers, **kwargs
        )


_http: httpx.AsyncClient | None = None
_client: KeeperClient | None = None


def get_keeper_client() -> KeeperClient:
    """Return a cached KeeperClient built from settings.

    Creates the shared HTTP client and token cache on first call.
    """
    global _http, _client
    if _client is None:
        settings = get_settings()
        _http = httpx.AsyncClient(timeout=httpx.Timeout(30.0))
        tokens = TokenCache(
            _http,
            token_url=settings.token_url,
            client_id=settings.keeper_client_id,
            client_secret=settings.keeper_client_secret,
            safety_margin=settings.keeper_token_safety_margin,
        )
        _client = KeeperClient(_http, settings.keeper_api_base, tokens)
    return _client


async def close_client() -> None:
    """Close the shared HTTP client and drop the singleton."""
    global _http, _client
    if _http is not None:
        await _http.aclose()
    _http = None
    _client = None


def reset_client() -> None:
    """Reset the cached client instance. Used for testing."""
    global _http, _client
    _http = None
    _client = None
