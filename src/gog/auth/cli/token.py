from __future__ import annotations

import argparse
import os
import sys

from gog.auth.cli._output import CommandContext, write_json
from gog.auth.errors import RemoteTokenError, UsageError
from gog.auth.remote_token import DEFAULT_HTTP_TIMEOUT
from gog.auth.requests.remote_token import RemoteTokenFetcher

COMMAND = "token"

ENDPOINT_ENV = "GOG_REMOTE_TOKEN_ENDPOINT"
AUTH_ENV = "GOG_REMOTE_TOKEN_AUTH"


def register_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        COMMAND,
        help="Fetch an access token from a remote token endpoint",
    )
    parser.add_argument(
        "--endpoint",
        default=None,
        help=f"Token endpoint URL (default: ${ENDPOINT_ENV})",
    )
    parser.add_argument(
        "--email",
        default=None,
        help="Identity to fetch a token for",
    )
    parser.add_argument(
        "--scope",
        dest="scopes",
        action="append",
        default=[],
        metavar="SCOPE",
        help="Scope to request. May be given several times.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_HTTP_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_HTTP_TIMEOUT:g})",
    )
    return parser


def make_fetcher(parsed: argparse.Namespace) -> RemoteTokenFetcher:
    endpoint = parsed.endpoint or os.environ.get(ENDPOINT_ENV, "").strip()
    if not endpoint:
        raise UsageError(f"missing token endpoint: pass --endpoint or set {ENDPOINT_ENV}")
    if not parsed.email:
        raise UsageError("missing --email")
    return RemoteTokenFetcher(
        endpoint,
        email=parsed.email,
        scopes=parsed.scopes,
        auth=os.environ.get(AUTH_ENV, "").strip(),
        timeout=parsed.timeout,
    )


def run(parsed: argparse.Namespace, ctx: CommandContext) -> int:
    fetcher = make_fetcher(parsed)
    try:
        token = fetcher.fetch()
    except RemoteTokenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if ctx.mode.is_json:
        write_json(
            sys.stdout,
            {
                "access_token": token.access_token,
                "expiry": token.expiry.isoformat().replace("+00:00", "Z") if token.expiry else None,
            },
        )
        return 0

    print(token.access_token)
    return 0
