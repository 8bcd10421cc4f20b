"""Keyring backend preference and its resolution.

The effective backend is chosen with the precedence env > config > default:

1. ``GOG_KEYRING_BACKEND`` when set to a non-empty value
2. ``keyring_backend`` from the config file
3. ``auto``
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gog.auth.config import PathLike, read_config

log = logging.getLogger(__name__)

KEYRING_BACKEND_ENV = "GOG_KEYRING_BACKEND"


class KeyringBackend(str, Enum):
    AUTO = "auto"
    KEYCHAIN = "keychain"
    FILE = "file"

    def __str__(self) -> str:
        return self.value


class BackendSource(str, Enum):
    ENV = "env"
    CONFIG = "config"
    DEFAULT = "default"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BackendInfo:
    value: KeyringBackend
    source: BackendSource


def normalize_keyring_backend(value: Optional[str]) -> str:
    """Trim and lowercase, mapping the ``default`` alias to ``auto``."""
    normalized = (value or "").strip().lower()
    if normalized == "default":
        return KeyringBackend.AUTO.value
    return normalized


def parse_keyring_backend(value: Optional[str]) -> KeyringBackend:
    normalized = normalize_keyring_backend(value)
    try:
        return KeyringBackend(normalized)
    except ValueError:
        raise ValueError(f"invalid keyring backend: {value!r} (expected auto, keychain, or file)") from None


def keyring_backend_env() -> str:
    return os.environ.get(KEYRING_BACKEND_ENV, "").strip()


def resolve_keyring_backend_info(path: Optional[PathLike] = None) -> BackendInfo:
    """Return the effective keyring backend and where it came from.

    Raises ValueError if the environment variable or the config file holds a
    value that is not a known backend.
    """
    env_value = keyring_backend_env()
    if env_value:
        try:
            backend = parse_keyring_backend(env_value)
        except ValueError:
            raise ValueError(
                f"invalid {KEYRING_BACKEND_ENV}: {env_value!r} (expected auto, keychain, or file)"
            ) from None
        log.debug("Keyring backend %s from %s", backend, KEYRING_BACKEND_ENV)
        return BackendInfo(value=backend, source=BackendSource.ENV)

    config = read_config(path)
    if config.keyring_backend.strip():
        backend = parse_keyring_backend(config.keyring_backend)
        log.debug("Keyring backend %s from config", backend)
        return BackendInfo(value=backend, source=BackendSource.CONFIG)

    return BackendInfo(value=KeyringBackend.AUTO, source=BackendSource.DEFAULT)
