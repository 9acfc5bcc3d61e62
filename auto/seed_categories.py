#!/usr/bin/env python3
"""
Seed Categories Script.

Replaces every category with the default set (Technology, Lifestyle,
Travel, Food, Health, Business, Education, Entertainment).

Usage:
    uv run python auto/seed_categories.py
    uv run python auto/seed_categories.py --yes
"""

from argparse import ArgumentParser
from asyncio import run as asyncio_run
from pathlib import Path
from sys import exit as sys_exit
from sys import path

# Add the project root to sys.path to allow importing 'postdesk'
path.append(f"{Path(__file__).parent.parent}")

from sqlalchemy.exc import SQLAlchemyError

from postdesk.db import init_db, transaction
from postdesk.monitoring import configure_logging, get_logger
from postdesk.repositories import CategoryRepository
from postdesk.services import CategoryService

logger = get_logger(__name__)


async def seed() -> None:
    """Create the tables if needed and replace all categories."""
    await init_db()
    async with transaction() as session:
        seeded = await CategoryService(CategoryRepository(session)).seed_defaults()
    for category in seeded:
        logger.info(f"  - {category.name} ({category.slug})")


def main() -> None:
    parser = ArgumentParser(description="Replace all categories with the default set")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    configure_logging()
    if not args.yes:
        confirm = input("This deletes every existing category. Type 'yes' to continue: ")
        if confirm.lower() != "yes":
            logger.info("Operation cancelled.")
            return

    try:
        asyncio_run(seed())
    except SQLAlchemyError:
        logger.exception("Failed to seed categories")
        sys_exit(1)


if __name__ == "__main__":
    main()
