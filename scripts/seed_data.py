#!/usr/bin/env python3
# scripts/seed_data.py
"""
Create the directory tables and load the sample buildings, features and
rooms, optionally followed by generated rooms.

    python scripts/seed_data.py --database-url sqlite+aiosqlite:///rooms.db
    python scripts/seed_data.py --drop --fake-rooms 200 --seed 42
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from room_directory.config import get_settings
from room_directory.database import db_manager, init_db
from room_directory.logging_config import setup_logging
from room_directory.services.seeding import DirectorySeeder

logger = logging.getLogger("room_directory.scripts.seed_data")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load data into the room directory")
    parser.add_argument("--database-url", help="defaults to DATABASE_URL")
    parser.add_argument(
        "--drop", action="store_true", help="drop and recreate every table first"
    )
    parser.add_argument(
        "--fake-rooms",
        type=int,
        default=0,
        metavar="N",
        help="also generate N rooms across the seeded buildings",
    )
    parser.add_argument("--seed", type=int, help="random seed for generated rooms")
    return parser.parse_args(argv)


async def seed(args: argparse.Namespace) -> None:
    settings = get_settings()
    manager = await init_db(
        args.database_url or settings.DATABASE_URL,
        create_tables=not args.drop,
        **settings.engine_options,
    )
    try:
        if args.drop:
            logger.warning("Dropping all directory tables")
            await manager.drop_tables()
            await manager.create_tables()

        async with manager.transaction() as session:
            seeder = DirectorySeeder(session)
            sample = await seeder.seed_sample_directory()
            logger.info("Sample directory: %s", sample.as_dict())
            if args.fake_rooms > 0:
                generated = await seeder.seed_fake_rooms(args.fake_rooms, seed=args.seed)
                logger.info("Generated rooms: %s", generated.as_dict())
    finally:
        await db_manager.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(get_settings())
    try:
        asyncio.run(seed(args))
    except Exception:
        logger.exception("Seeding failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
