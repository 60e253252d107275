"""Tests for the authenticated Keeper client and its singleton."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from slack_keeper.keeper.auth import TokenCache
from slack_keeper.keeper.client import KeeperClient, get_keeper_client, reset_client

BASE = "https://keeper.test"


class FakeKeeper:
    """MockTransport handler serving the token endpoint and scripted API responses."""

    def __init__(self, api_responses: list[httpx.Response]) -> None:
        self.api_responses = list(api_responses)
        self.api_requests: list[httpx.Request] = []
        self.token_requests = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/token":
            self.token_requests += 1
            return httpx.Response(
                200, json={"access_token": f"tok-{self.token_requests}", "expires_in": 3600}
            )
        self.api_requests.append(request)
        return self.api_responses.pop(0)


def _make_client(fake: FakeKeeper) -> KeeperClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake))
    tokens = TokenCache(http, f"{BASE}/oauth/token", "cid", "secret")
    return KeeperClient(http, f"{BASE}/", tokens)


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Ensure clean singleton state for every test."""
    reset_client()
    yield
    reset_client()


@pytest.mark.asyncio
async def test_get_sends_bearer_and_params():
    """GET carries the bearer token and query parameters."""
    fake = FakeKeeper([httpx.Response(200, json=[{"id": 1}])])
    client = _make_client(fake)

    result = await client.get("/api/clients/summary", params={"limit": 100, "skip": 0})

    assert result == [{"id": 1}]
    request = fake.api_requests[0]
    assert request.headers["Authorization"] == "Bearer tok-1"
    assert request.url.path == "/api/clients/summary"
    assert request.url.params["limit"] == "100"
    assert request.url.params["skip"] == "0"


@pytest.mark.asyncio
async def test_post_sends_json_body():
    """POST encodes the body as JSON."""
    fake = FakeKeeper([httpx.Response(201, json={"id": 5})])
    client = _make_client(fake)

    result = await client.post("/api/non-closing-tasks", {"taskName": "x"})

    assert result == {"id": 5}
    assert fake.api_requests[0].method == "POST"
    assert json.loads(fake.api_requests[0].content) == {"taskName": "x"}


@pytest.mark.asyncio
async def test_empty_body_returns_none():
    """204 responses yield None instead of a JSON decode error."""
    fake = FakeKeeper([httpx.Response(204)])
    client = _make_client(fake)

    assert await client.request("PATCH", "/api/non-closing-tasks/1", {"notes": "x"}) is None


@pytest.mark.asyncio
async def test_unauthorized_refreshes_token_once():
    """A 401 invalidates the token and retries with a fresh one."""
    fake = FakeKeeper([httpx.Response(401), httpx.Response(200, json={"ok": True})])
    client = _make_client(fake)

    result = await client.get("/api/users")

    assert result == {"ok": True}
    assert fake.token_requests == 2
    assert fake.api_requests[1].headers["Authorization"] == "Bearer tok-2"


@pytest.mark.asyncio
async def test_http_error_propagates():
    """Non-2xx responses raise httpx.HTTPStatusError."""
    fake = FakeKeeper([httpx.Response(404)])
    client = _make_client(fake)

    with pytest.raises(httpx.HTTPStatusError):
        await client.get("/api/missing")


@patch("slack_keeper.keeper.client.get_settings")
def test_get_keeper_client_returns_cached(mock_get_settings: MagicMock):
    """Second call returns the same object (singleton)."""
    settings = MagicMock()
    settings.keeper_api_base = BASE
    settings.token_url = f"{BASE}/oauth/token"
    settings.keeper_token_safety_margin = 60.0
    mock_get_settings.return_value = settings

    first = get_keeper_client()
    second = get_keeper_client()

    assert isinstance(first, KeeperClient)
    assert first is second


@patch("slack_keeper.keeper.client.get_settings")
def test_reset_client_clears_cache(mock_get_settings: MagicMock):
    """After reset_client(), a new instance is created."""
    settings = MagicMock()
    settings.keeper_api_base = BASE
    settings.token_url = f"{BASE}/oauth/token"
    settings.keeper_token_safety_margin = 60.0
    mock_get_settings.return_value = settings

    first = get_keeper_client()
    reset_client()
    second = get_keeper_client()

    assert first is not second
