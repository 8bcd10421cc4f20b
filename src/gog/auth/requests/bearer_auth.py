"""Bearer token auth handler for requests, backed by a remote token fetcher."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

import requests
from requests.auth import AuthBase

if TYPE_CHECKING:
    from gog.auth.remote_token import Token
    from gog.auth.requests.remote_token import RemoteTokenFetcher

# Tokens are considered expired this many seconds before their actual expiry,
# to avoid using a token that expires mid-request.
EXPIRY_MARGIN_SECONDS = 30


class RemoteTokenBearerAuth(AuthBase):
    """Injects a Bearer token from a RemoteTokenFetcher into each request.

    The token is fetched on first use and again once it is within
    EXPIRY_MARGIN_SECONDS of its expiry. A token without an expiry is reused until
    the server answers 401, which triggers one re-fetch and retry.
    """

    def __init__(self, fetcher: RemoteTokenFetcher) -> None:
        self._fetcher = fetcher
        self._token: Optional[Token] = None
        self._lock = threading.Lock()

    def _needs_refresh(self, token: Optional[Token]) -> bool:
        if token is None:
            return True
        if token.expiry is None:
            return False
        return datetime.now(tz=timezone.utc) >= token.expiry - timedelta(seconds=EXPIRY_MARGIN_SECONDS)

    def ensure_token(self) -> Token:
        with self._lock:
            if self._needs_refresh(self._token):
                self._token = self._fetcher.fetch()
            return self._token

    def invalidate_token(self) -> None:
        with self._lock:
            self._token = None

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.ensure_token().access_token}"
        r.register_hook("response", self._handle_401)
        return r

    def _handle_401(self, r: requests.Response, **kwargs) -> requests.Response:
        if r.status_code != 401:
            return r
        self.invalidate_token()
        _ = r.content  # drain socket so connection can be reused
        prep = r.request.copy()
        prep.headers["Authorization"] = f"Bearer {self.ensure_token().access_token}"
        _r = r.connection.send(prep, **kwargs)
        _r.history.append(r)
        return _r
