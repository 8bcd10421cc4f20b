"""Wire format for fetching access tokens from a remote token endpoint.

The endpoint receives ``POST {"email": ..., "scopes": [...]}`` and answers
``{"access_token": ..., "expiry": "<RFC3339>"}``. The HTTP clients live in
:mod:`gog.auth.requests.remote_token` and :mod:`gog.auth.httpx.remote_token`.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from gog.auth.errors import RemoteTokenError

DEFAULT_HTTP_TIMEOUT = 30.0

# RFC3339 allows any number of fractional digits, datetime keeps microseconds
_RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})(?:\.(?P<frac>\d+))?(?P<tz>[Zz]|[+-]\d{2}:\d{2})$"
)


@dataclass(frozen=True)
class Token:
    access_token: str
    expiry: Optional[datetime] = None


def parse_rfc3339(value: str) -> datetime:
    match = _RFC3339_RE.match(value)
    if match is None:
        raise ValueError(f"invalid RFC3339 timestamp: {value!r}")
    frac = match.group("frac") or ""
    tz = match.group("tz")
    tz = "+00:00" if tz in ("Z", "z") else tz
    text = match.group("base").replace("t", "T").replace(" ", "T")
    if frac:
        text += "." + frac[:6].ljust(6, "0")
    return datetime.fromisoformat(text + tz).astimezone(timezone.utc)


def encode_token_request(email: str, scopes: Sequence[str]) -> bytes:
    try:
        return json.dumps({"email": email, "scopes": list(scopes)}).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise RemoteTokenError(f"remote token: marshal request: {e}") from e


def check_status(status_code: int, body: bytes) -> None:
    if status_code != 200:
        text = body.decode("utf-8", errors="replace")
        raise RemoteTokenError(f"remote token: endpoint returned {status_code}: {text}")


def decode_token_response(body: bytes) -> Token:
    try:
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        access_token = data.get("access_token") or ""
        if not isinstance(access_token, str):
            raise ValueError("access_token must be a string")
        raw_expiry = data.get("expiry")
        expiry = parse_rfc3339(raw_expiry) if raw_expiry is not None else None
    except (ValueError, TypeError) as e:
        raise RemoteTokenError(f"remote token: parse response: {e}") from e

    if not access_token:
        raise RemoteTokenError("remote token: endpoint returned empty access token")

    return Token(access_token=access_token, expiry=expiry)
