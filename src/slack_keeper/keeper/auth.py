"""OAuth2 client-credentials token cache for the Keeper API.

Holds a single bearer token and re-exchanges it once it enters the safety
margin before expiry. Concurrent callers during a miss may each perform an
exchange; the last result overwrites the slot. Exchanges are idempotent, so
this race only costs an extra request.
"""

import logging
import time
from collections.abc import Callable

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from slack_keeper.keeper.errors import CredentialExchangeError
from slack_keeper.models.keeper import AuthToken

logger = logging.getLogger(__name__)

_DEFAULT_TTL_SECONDS = 3600


def _is_retryable(error: BaseException) -> bool:
    """Transport errors, 5xx and 429 are transient; other 4xx are not."""
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return status >= 500 or status == 429
    return isinstance(error, httpx.TransportError)


class TokenCache:
    """Process-scoped slot for the Keeper bearer token."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        token_url: str,
        client_id: str,
        client_secret: str,
        safety_margin: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._http = http
        self._token_url = token_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._safety_margin = safety_margin
        self._clock = clock
        self._token: AuthToken | None = None

    @property
    def token(self) -> AuthToken | None:
        return self._token

    async def get_token(self) -> str:
        """Return a valid bearer token, exchanging credentials on a miss.

        Raises:
            CredentialExchangeError: If the exchange fails after retries or the
                response carries no access token.
        """
        token = self._token
        if token is not None and token.is_valid(self._clock(), self._safety_margin):
            return token.value

        now = self._clock()
        try:
            payload = await self._exchange()
        except (httpx.HTTPError, ValueError) as exc:
            raise CredentialExchangeError(f"Keeper token exchange failed: {exc}") from exc

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise CredentialExchangeError("Keeper token response carried no access_token")

        ttl = payload.get("expires_in") or _DEFAULT_TTL_SECONDS
        self._token = AuthToken(value=access_token, expires_at=now + float(ttl))
        logger.info("Obtained Keeper access token", extra={"expires_in": ttl})
        return access_token

    def invalidate(self) -> None:
        """Drop the cached token so the next call exchanges again."""
        self._token = None

    @retry(
        retry=retry_if_exception(_is_retryable),
        wait=wait_exponential_jitter(initial=0.5, max=5, jitter=1),
        stop=stop_after_attempt(3),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _exchange(self) -> dict:
        response = await self._http.post(
            self._token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        response.raise_for_status()
        return response.json()
