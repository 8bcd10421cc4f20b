"""Open the keyring backend selected by the user's preference.

All keyring imports are lazy so the module works when keyring is not installed.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from gog.auth.config import config_dir
from gog.auth.errors import KeyringUnavailableError
from gog.auth.keyring_backend import BackendInfo, KeyringBackend, resolve_keyring_backend_info

log = logging.getLogger(__name__)

KEYRING_PASSWORD_ENV = "GOG_KEYRING_PASSWORD"
FILE_KEYRING_DIR = "keyring"


def _system_keyring():
    """Return the system keyring backend if usable, else None."""
    try:
        import keyring

        backend = keyring.get_keyring()
        if "fail" in type(backend).__name__.lower():
            return None
        return backend
    except Exception:
        log.debug("System keyring unavailable", exc_info=True)
        return None


def keychain_available() -> bool:
    return _system_keyring() is not None


# Entry EncryptedKeyring keeps to check the password on unlock
PASSWORD_REFERENCE = ("keyring-setting", "password reference")
PASSWORD_REFERENCE_VALUE = "password reference value"


def _file_keyring():
    password = os.environ.get(KEYRING_PASSWORD_ENV, "")
    if not password:
        raise KeyringUnavailableError(
            f"The file keyring backend needs a password. Set {KEYRING_PASSWORD_ENV} to unlock it."
        )
    try:
        from keyrings.alt.file import EncryptedKeyring
    except ImportError as e:
        raise KeyringUnavailableError(
            "The file keyring backend requires keyrings.alt. Install with: pip install keyrings.alt"
        ) from e

    backend = EncryptedKeyring()
    # Both are lazily computed properties on EncryptedKeyring; instance values take precedence.
    # Setting keyring_key skips the getpass prompts, so the unlock/init steps are done here.
    backend.file_path = str(config_dir() / FILE_KEYRING_DIR / EncryptedKeyring.filename)
    try:
        initialized = backend._check_file()
    except ValueError as e:
        raise KeyringUnavailableError(f"Unusable keyring file {backend.file_path}: {e}") from e

    backend.keyring_key = password
    if initialized:
        try:
            reference = backend.get_password(*PASSWORD_REFERENCE)
        except (AssertionError, ValueError):
            reference = None
        if reference != PASSWORD_REFERENCE_VALUE:
            del backend.keyring_key
            raise KeyringUnavailableError(f"incorrect {KEYRING_PASSWORD_ENV}")
        log.debug("Unlocked file keyring at %s", backend.file_path)
    else:
        backend.set_password(*PASSWORD_REFERENCE, PASSWORD_REFERENCE_VALUE)
        backend._write_config_value("keyring-setting", "scheme", backend.scheme)
        backend._write_config_value("keyring-setting", "version", backend.version)
        log.debug("Created file keyring at %s", backend.file_path)
    return backend


def open_keyring(info: Optional[BackendInfo] = None):
    """Return a keyring backend object for the effective backend preference.

    Raises:
        KeyringUnavailableError: If the selected backend cannot be used.
    """
    if info is None:
        info = resolve_keyring_backend_info()

    if info.value == KeyringBackend.FILE:
        log.debug("Opening file keyring (source=%s)", info.source)
        return _file_keyring()

    system = _system_keyring()
    if info.value == KeyringBackend.KEYCHAIN:
        if system is None:
            raise KeyringUnavailableError(
                "No usable system keychain is available. Use 'gog auth keyring file' to store secrets on disk."
            )
        log.debug("Opening system keychain (source=%s)", info.source)
        return system

    # auto
    if system is not None:
        log.debug("Auto-selected system keychain")
        return system
    log.debug("No system keychain, falling back to file keyring")
    return _file_keyring()
