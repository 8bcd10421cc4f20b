"""Async remote token fetcher using httpx."""

import logging
from typing import Optional, Sequence

import httpx

from gog.auth._user_agent import remote_token_user_agent
from gog.auth.errors import RemoteTokenError
from gog.auth.remote_token import (
    DEFAULT_HTTP_TIMEOUT,
    Token,
    check_status,
    decode_token_response,
    encode_token_request,
)

log = logging.getLogger(__name__)


class AsyncRemoteTokenFetcher:
    """Async counterpart of :class:`gog.auth.requests.remote_token.RemoteTokenFetcher`.

    Example:
        async with httpx.AsyncClient() as client:
            fetcher = AsyncRemoteTokenFetcher(endpoint, email="user@example.com", http_client=client)
            token = await fetcher.fetch()
    """

    def __init__(
        self,
        endpoint: str,
        *,
        email: str,
        scopes: Sequence[str] = (),
        auth: Optional[str] = "",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        """
        Args:
            endpoint: Absolute http(s) URL of the token endpoint
            email: Identity to mint a token for
            scopes: Scopes requested for the token, sent in order
            auth: Bearer credential for the endpoint itself. Empty means no Authorization header.
            http_client: Client to send the request with, its own timeout applies.
                A client with ``timeout`` is created per call if omitted.
            timeout: Request timeout in seconds for the default client
        """
        self._endpoint = endpoint
        self._email = email
        self._scopes = tuple(scopes)
        self._auth = auth or ""
        self._http_client = http_client
        self._timeout = timeout

    def _headers(self) -> dict:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": remote_token_user_agent(f"python-httpx/{httpx.__version__}"),
        }
        if self._auth:
            headers["Authorization"] = f"Bearer {self._auth}"
        return headers

    async def fetch(self) -> Token:
        body = encode_token_request(self._email, self._scopes)
        log.debug("Requesting remote token from %s for email=%s", self._endpoint, self._email)

        if self._http_client is not None:
            return await self._fetch_with(self._http_client, body)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._fetch_with(client, body)

    async def _fetch_with(self, client: httpx.AsyncClient, body: bytes) -> Token:
        try:
            request = client.build_request("POST", self._endpoint, content=body, headers=self._headers())
        except httpx.InvalidURL as e:
            raise RemoteTokenError(f"remote token: request failed: {e}") from e
        except (ValueError, TypeError) as e:
            raise RemoteTokenError(f"remote token: create request: {e}") from e

        try:
            resp = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise RemoteTokenError(f"remote token: request failed: {e}") from e

        try:
            content = await resp.aread()
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise RemoteTokenError(f"remote token: read response: {e}") from e
        finally:
            await resp.aclose()

        check_status(resp.status_code, content)
        token = decode_token_response(content)
        log.debug("Got remote token for email=%s expiring at %s", self._email, token.expiry)
        return token
