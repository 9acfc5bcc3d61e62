#!/usr/bin/env python3
"""
Issue Token Script.

Prints an access token for an existing user, signed with the configured
SECRET_KEY. Meant for local development and smoke testing.

Usage:
    uv run python auto/issue_token.py alice
    uv run python auto/issue_token.py alice --minutes 120
"""

from argparse import ArgumentParser
from asyncio import run as asyncio_run
from datetime import timedelta
from pathlib import Path
from sys import exit as sys_exit
from sys import path

# Add the project root to sys.path to allow importing 'postdesk'
path.append(f"{Path(__file__).parent.parent}")

from postdesk.db import transaction
from postdesk.managers import create_access_token
from postdesk.monitoring import configure_logging, get_logger
from postdesk.repositories import UserRepository

logger = get_logger(__name__)


async def issue(username: str, minutes: int) -> str | None:
    async with transaction() as session:
        user = await UserRepository(session).get_by_username(username)
    if user is None:
        return None
    return create_access_token(user.uuid, user.username, timedelta(minutes=minutes))


def main() -> None:
    parser = ArgumentParser(description="Print an access token for a user")
    parser.add_argument("username")
    parser.add_argument("--minutes", type=int, default=60, help="Token lifetime")
    args = parser.parse_args()

    configure_logging()
    token = asyncio_run(issue(args.username, args.minutes))
    if token is None:
        logger.error(f"User '{args.username}' not found")
        sys_exit(1)
    print(token)  # noqa: T201


if __name__ == "__main__":
    main()
