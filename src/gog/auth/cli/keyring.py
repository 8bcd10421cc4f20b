from __future__ import annotations

import argparse
import sys

from gog.auth.cli._output import CommandContext, write_json
from gog.auth.config import config_path, read_config, write_config
from gog.auth.errors import UsageError
from gog.auth.keyring_backend import (
    KEYRING_BACKEND_ENV,
    KeyringBackend,
    keyring_backend_env,
    normalize_keyring_backend,
    resolve_keyring_backend_info,
)

COMMAND = "keyring"


def register_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        COMMAND,
        help="Show or set where secrets are stored",
        description="Without arguments, show the effective keyring backend and where it comes from. "
        f"With a backend, store it in the config file. {KEYRING_BACKEND_ENV} overrides the config file.",
    )
    parser.add_argument(
        "backend",
        nargs="?",
        default="",
        metavar="BACKEND",
        help="Keyring backend: auto|keychain|file",
    )
    parser.add_argument(
        "backend2",
        nargs="?",
        default="",
        metavar="BACKEND2",
        help="(compat) Use: gog auth keyring set <backend>",
    )
    return parser


def run(parsed: argparse.Namespace, ctx: CommandContext) -> int:
    run_keyring(ctx, parsed.backend, parsed.backend2)
    return 0


def run_keyring(ctx: CommandContext, backend: str = "", backend2: str = "") -> None:
    """Show the effective keyring backend, or persist a new one.

    Raises:
        UsageError: On a bad argument shape or an unknown backend. The config is not touched.
    """
    raw_backend, raw_backend2 = backend or "", backend2 or ""
    value = raw_backend.strip().lower()
    value2 = raw_backend2.strip().lower()

    # Backwards compat for `gog auth keyring set <backend>`
    if value == "set":
        if not value2:
            raise UsageError("missing backend: use gog auth keyring set <auto|keychain|file>")
        value, value2 = value2, ""

    if not value:
        _show(ctx)
        return

    if value2:
        raise UsageError(f"too many args: {raw_backend!r} {raw_backend2!r}")

    value = normalize_keyring_backend(value)
    if value not in {b.value for b in KeyringBackend}:
        invalid = raw_backend2 if raw_backend.strip().lower() == "set" else raw_backend
        raise UsageError(f"invalid backend: {invalid!r} (expected auto, keychain, or file)")

    _set(ctx, value)


def _show(ctx: CommandContext) -> None:
    path = config_path()
    info = resolve_keyring_backend_info()

    if ctx.mode.is_json:
        write_json(
            sys.stdout,
            {
                "keyring_backend": info.value.value,
                "source": info.source.value,
                "path": str(path),
            },
        )
        return

    if ctx.ui is None:
        return
    ctx.ui.out().printf("path\t%s", path)
    ctx.ui.out().printf("keyring_backend\t%s", info.value.value)
    ctx.ui.out().printf("source\t%s", info.source.value)
    ctx.ui.err().println("Hint: gog auth keyring <auto|keychain|file>")


def _set(ctx: CommandContext, backend: str) -> None:
    cfg = read_config()
    cfg.keyring_backend = backend
    write_config(cfg)

    path = config_path()

    # Env var wins over the config file; say so, or the new setting looks ignored
    env_value = keyring_backend_env()
    if env_value and ctx.ui is not None and not ctx.mode.is_json and not ctx.mode.is_plain:
        ctx.ui.err().printf("NOTE: %s=%s overrides config.json", KEYRING_BACKEND_ENV, env_value)

    if ctx.mode.is_json:
        write_json(sys.stdout, {"written": True, "path": str(path), "keyring_backend": backend})
        return

    if ctx.ui is None:
        return
    ctx.ui.out().println("written\ttrue")
    ctx.ui.out().printf("path\t%s", path)
    ctx.ui.out().printf("keyring_backend\t%s", backend)
