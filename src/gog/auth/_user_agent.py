"""User-Agent strings sent by gog's HTTP clients."""

import platform
import sys
from typing import Optional

from gog.auth import __version__

_PY_VERSION = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

REMOTE_TOKEN_PURPOSE = "remote-token"


def get_user_agent(http_lib_version: str, purpose: Optional[str] = None) -> str:
    """Build User-Agent string for HTTP requests.

    Args:
        http_lib_version: The HTTP library and version (e.g., "requests/2.31.0")
        purpose: Optional name of what the request is for, sent in the comment

    Returns:
        User-Agent string like "gog-auth/1.0.0 (remote-token; Linux) python/3.11.0 requests/2.31.0"
    """
    comment = "; ".join(part for part in (purpose, platform.system()) if part)
    product = f"gog-auth/{__version__}"
    if comment:
        product = f"{product} ({comment})"
    return f"{product} python/{_PY_VERSION} {http_lib_version}"


def remote_token_user_agent(http_lib_version: str) -> str:
    return get_user_agent(http_lib_version, REMOTE_TOKEN_PURPOSE)
