"""Exceptions raised by gog.auth."""


class UsageError(Exception):
    """Bad command-line arguments. The CLI exits with ``exit_code``."""

    exit_code = 2


class RemoteTokenError(Exception):
    """A remote token fetch failed. The message carries a stable tag such as ``request failed``."""


class KeyringUnavailableError(RuntimeError):
    """The selected keyring backend cannot be opened."""
