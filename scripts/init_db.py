#!/usr/bin/env python
"""Create the staff payroll tables.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --database-url postgresql+asyncpg://...
"""

import argparse
import asyncio
import logging

from staff_payroll.config import configure_logging
from staff_payroll.database import create_schema, get_engine

logger = logging.getLogger("init_db")


async def run(database_url: str | None) -> None:
    engine = get_engine(database_url)
    try:
        await create_schema(engine)
    finally:
        await engine.dispose()
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))


def main() -> None:
    parser = argparse.ArgumentParser(description="Create staff payroll tables")
    parser.add_argument(
        "--database-url",
        help="Async database URL (defaults to DATABASE_URL)",
    )
    args = parser.parse_args()

    configure_logging()
    asyncio.run(run(args.database_url))


if __name__ == "__main__":
    main()
