"""Remote token fetcher using requests."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import requests

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

# Rejected URLs are reported like endpoints that cannot be reached
_URL_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
)


class RemoteTokenFetcher:
    """Fetches access tokens for ``email`` and ``scopes`` from a remote endpoint.

    Every call to :meth:`fetch` makes exactly one POST request. Nothing is cached
    and nothing is retried; wrap the fetcher in a refreshing layer such as
    :class:`gog.auth.requests.bearer_auth.RemoteTokenBearerAuth` to reuse tokens.

    The fetcher holds no mutable state, so ``fetch`` may be called from several
    threads as long as the supplied ``http_client`` allows it.

    Example:
        fetcher = RemoteTokenFetcher(
            "https://tokens.example.com/token",
            email="user@example.com",
            scopes=["https://www.googleapis.com/auth/drive"],
            auth="endpoint-secret",
        )
        token = fetcher.fetch()
    """

    def __init__(
        self,
        endpoint: str,
        *,
        email: str,
        scopes: Sequence[str] = (),
        auth: Optional[str] = "",
        http_client: Optional[requests.Session] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        """
        Args:
            endpoint: Absolute http(s) URL of the token endpoint
            email: Identity to mint a token for
            scopes: Scopes requested for the token, sent in order
            auth: Bearer credential for the endpoint itself. Empty means no Authorization header.
            http_client: Session to send the request with. A new session is used per call if omitted.
            timeout: Request timeout in seconds
        """
        self._endpoint = endpoint
        self._email = email
        self._scopes = tuple(scopes)
        self._auth = auth or ""
        self._http_client = http_client
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def email(self) -> str:
        return self._email

    @property
    def scopes(self) -> tuple:
        return self._scopes

    def _headers(self) -> dict:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": remote_token_user_agent(f"requests/{requests.__version__}"),
        }
        if self._auth:
            headers["Authorization"] = f"Bearer {self._auth}"
        return headers

    def fetch(self) -> Token:
        """Request a fresh token from the endpoint.

        Raises:
            RemoteTokenError: On any failure. The message contains one of the tags
                ``marshal request``, ``create request``, ``request failed``,
                ``read response``, ``endpoint returned <status>``, ``parse response``
                or ``empty access token``.
        """
        body = encode_token_request(self._email, self._scopes)
        log.debug("Requesting remote token from %s for email=%s", self._endpoint, self._email)

        if self._http_client is not None:
            return self._fetch_with(self._http_client, body)
        with requests.Session() as session:
            return self._fetch_with(session, body)

    def _fetch_with(self, session: requests.Session, body: bytes) -> Token:
        try:
            prepared = session.prepare_request(
                requests.Request("POST", self._endpoint, data=body, headers=self._headers())
            )
        except _URL_ERRORS as e:
            raise RemoteTokenError(f"remote token: request failed: {e}") from e
        except (requests.RequestException, ValueError) as e:
            raise RemoteTokenError(f"remote token: create request: {e}") from e

        try:
            # stream so that reading the body is a separate step from sending
            settings = session.merge_environment_settings(prepared.url, {}, True, None, None)
            resp = session.send(prepared, timeout=self._timeout, **settings)
        except requests.RequestException as e:
            raise RemoteTokenError(f"remote token: request failed: {e}") from e

        try:
            with resp:
                content = resp.content
        except requests.RequestException as e:
            raise RemoteTokenError(f"remote token: read response: {e}") from e

        check_status(resp.status_code, content)
        token = decode_token_response(content)
        log.debug("Got remote token for email=%s expiring at %s", self._email, token.expiry)
        return token

    __call__ = fetch
