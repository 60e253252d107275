"""Tests for the Keeper OAuth token cache."""

from urllib.parse import parse_qs

import httpx
import pytest
from tenacity import wait_none

from slack_keeper.keeper.auth import TokenCache
from slack_keeper.keeper.errors import CredentialExchangeError

TOKEN_URL = "https://keeper.test/oauth/token"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _make_cache(handler, clock: FakeClock | None = None) -> TokenCache:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TokenCache(
        http,
        token_url=TOKEN_URL,
        client_id="cid",
        client_secret="secret",
        safety_margin=60.0,
        clock=clock or FakeClock(),
    )


def _token_handler(requests: list, expires_in: int | None = 3600):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        body = {"access_token": f"tok-{len(requests)}"}
        if expires_in is not None:
            body["expires_in"] = expires_in
        return httpx.Response(200, json=body)

    return handler


@pytest.fixture(autouse=True)
def _no_retry_wait():
    """Make tenacity retries immediate."""
    original = TokenCache._exchange.retry.wait
    TokenCache._exchange.retry.wait = wait_none()
    yield
    TokenCache._exchange.retry.wait = original


@pytest.mark.asyncio
async def test_get_token_exchanges_client_credentials():
    """First call posts a form-encoded client-credentials grant."""
    requests: list = []
    cache = _make_cache(_token_handler(requests))

    token = await cache.get_token()

    assert token == "tok-1"
    assert len(requests) == 1
    sent = parse_qs(requests[0].content.decode())
    assert sent == {
        "grant_type": ["client_credentials"],
        "client_id": ["cid"],
        "client_secret": ["secret"],
    }
    assert str(requests[0].url) == TOKEN_URL


@pytest.mark.asyncio
async def test_token_reused_within_margin():
    """Two calls before the safety margin return the same token with one exchange."""
    requests: list = []
    clock = FakeClock()
    cache = _make_cache(_token_handler(requests), clock)

    first = await cache.get_token()
    clock.now += 3539  # 1s before the 60s safety margin starts
    second = await cache.get_token()

    assert first == second == "tok-1"
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_token_refreshed_inside_margin():
    """Once inside the safety margin a new exchange happens."""
    requests: list = []
    clock = FakeClock()
    cache = _make_cache(_token_handler(requests), clock)

    await cache.get_token()
    clock.now += 3541
    token = await cache.get_token()

    assert token == "tok-2"
    assert len(requests) == 2


@pytest.mark.asyncio
async def test_default_ttl_when_expires_in_missing():
    """Missing expires_in defaults to one hour."""
    requests: list = []
    clock = FakeClock(now=0.0)
    cache = _make_cache(_token_handler(requests, expires_in=None), clock)

    await cache.get_token()

    assert cache.token is not None
    assert cache.token.expires_at == 3600.0


@pytest.mark.asyncio
async def test_invalidate_forces_new_exchange():
    """invalidate() drops the cached token."""
    requests: list = []
    cache = _make_cache(_token_handler(requests))

    await cache.get_token()
    cache.invalidate()
    token = await cache.get_token()

    assert token == "tok-2"


@pytest.mark.asyncio
async def test_client_error_raises_without_retry():
    """A 401 from the token endpoint is permanent: one attempt, then CredentialExchangeError."""
    calls: list = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(401, json={"error": "invalid_client"})

    cache = _make_cache(handler)

    with pytest.raises(CredentialExchangeError):
        await cache.get_token()
    assert len(calls) == 1
    assert cache.token is None


@pytest.mark.asyncio
async def test_server_error_retried_then_succeeds():
    """A 503 is retried and the following success is cached."""
    calls: list = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(503)
        return httpx.Response(200, json={"access_token": "fresh", "expires_in": 600})

    cache = _make_cache(handler)

    assert await cache.get_token() == "fresh"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_persistent_server_error_raises_after_retries():
    """Retries stop after three attempts and the failure propagates."""
    calls: list = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502)

    cache = _make_cache(handler)

    with pytest.raises(CredentialExchangeError):
        await cache.get_token()
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_missing_access_token_raises():
    """A 200 without access_token is an exchange failure."""
    cache = _make_cache(lambda request: httpx.Response(200, json={"token_type": "bearer"}))

    with pytest.raises(CredentialExchangeError):
        await cache.get_token()
