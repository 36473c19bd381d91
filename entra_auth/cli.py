"""Command line token acquisition for Entra ID.

Usage:
    entra-auth device-login --scope User.Read
    entra-auth password-login --username user@contoso.com
    echo "$REFRESH_TOKEN" | entra-auth refresh --scope User.Read

Client ID, tenant and authority host come from ENTRA_* environment variables
or a .env file. Tokens are only printed with --show-tokens.
"""

import argparse
import asyncio
import getpass
import json
import logging
import sys

from .core.config import Settings
from .logging_config import setup_logging
from .oauth.application import PublicClientApplication
from .oauth.device_flow import format_device_instructions, poll_device_flow
from .oauth.models import UserToken
from .utils.errors import MsalError

logger = logging.getLogger(__name__)


def summarize_token(token: UserToken, show_tokens: bool = False) -> dict:
    """Build a printable summary of a UserToken."""
    summary = {
        "token_type": token.token_type,
        "scope": token.scope,
        "expires_in": token.expires_in,
        "name": token.id_token.name,
        "preferred_username": token.id_token.preferred_username,
        "tid": token.id_token.tid,
        "uid": str(token.client_info.uid) if token.client_info.uid else None,
        "utid": str(token.client_info.utid) if token.client_info.utid else None,
    }
    if show_tokens:
        summary["access_token"] = token.access_token
        summary["refresh_token"] = token.refresh_token
    return summary


async def device_login(app: PublicClientApplication, scopes: list[str]) -> UserToken:
    flow = await app.initiate_device_flow(scopes)
    print(format_device_instructions(flow), file=sys.stderr)
    print("\nWaiting for user authorization...", file=sys.stderr)
    return await poll_device_flow(app, flow)


async def password_login(
    app: PublicClientApplication, username: str, scopes: list[str]
) -> UserToken:
    password = getpass.getpass(f"Password for {username}: ")
    return await app.acquire_token_by_username_password(username, password, scopes)


async def refresh(app: PublicClientApplication, scopes: list[str]) -> UserToken:
    refresh_token = sys.stdin.readline().strip()
    if not refresh_token:
        raise SystemExit("No refresh token on stdin")
    return await app.acquire_token_silent(scopes, refresh_token)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="entra-auth",
        description="Acquire Entra ID tokens for a public client application",
    )
    parser.add_argument(
        "--show-tokens",
        action="store_true",
        help="Include access and refresh tokens in the output",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override ENTRA_LOG_LEVEL",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    scope_kwargs = {
        "action": "append",
        "default": [],
        "dest": "scopes",
        "metavar": "SCOPE",
        "help": "Additional scope to request (repeatable)",
    }

    device = subparsers.add_parser("device-login", help="Sign in with the device code flow")
    device.add_argument("--scope", **scope_kwargs)

    password = subparsers.add_parser("password-login", help="Sign in with username and password")
    password.add_argument("--username", required=True, help="User principal name")
    password.add_argument("--scope", **scope_kwargs)

    silent = subparsers.add_parser("refresh", help="Redeem a refresh token read from stdin")
    silent.add_argument("--scope", **scope_kwargs)

    return parser


async def run(args: argparse.Namespace, settings: Settings) -> UserToken:
    app = PublicClientApplication.from_settings(settings)

    if args.command == "device-login":
        return await device_login(app, args.scopes)
    if args.command == "password-login":
        return await password_login(app, args.username, args.scopes)
    return await refresh(app, args.scopes)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the entra-auth command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    setup_logging(settings, level=args.log_level)

    try:
        token = asyncio.run(run(args, settings))
    except MsalError as e:
        logger.error(f"Token acquisition failed: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(json.dumps(summarize_token(token, args.show_tokens), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
