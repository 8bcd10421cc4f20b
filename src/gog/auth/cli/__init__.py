from __future__ import annotations

import argparse
import logging
import sys
from types import ModuleType

from gog.auth.cli import keyring, token
from gog.auth.cli._output import UI, CommandContext, OutputMode
from gog.auth.errors import UsageError

PROG = "gog"

_AUTH_SUBCOMMANDS: list[ModuleType] = [keyring, token]


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="gog authentication CLI",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Enable debug logging")
    parser.add_argument("-j", "--json", action="store_true", default=False, help="Write JSON to stdout")
    parser.add_argument(
        "-p", "--plain", action="store_true", default=False, help="Plain output without notes or hints"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    auth_parser = subparsers.add_parser("auth", help="Authentication and credential settings")
    auth_subparsers = auth_parser.add_subparsers(dest="auth_command", help="Available auth commands")
    for subcommand in _AUTH_SUBCOMMANDS:
        subcommand.register_parser(auth_subparsers)

    return parser


def _configure_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logging.getLogger("gog.auth").addHandler(handler)
    logging.getLogger("gog.auth").setLevel(logging.DEBUG if verbose else logging.WARNING)


def main(args: list[str] | None = None) -> int:
    parser = create_parser()
    parsed = parser.parse_args(args)
    _configure_logging(verbose=parsed.verbose)

    ctx = CommandContext(
        mode=OutputMode.from_flags(json_flag=parsed.json, plain_flag=parsed.plain),
        ui=UI(),
    )

    for subcommand in _AUTH_SUBCOMMANDS:
        if parsed.command == "auth" and parsed.auth_command == subcommand.COMMAND:
            try:
                return subcommand.run(parsed, ctx)
            except UsageError as e:
                print(f"{PROG}: {e}", file=sys.stderr)
                return e.exit_code
            except (OSError, ValueError) as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
