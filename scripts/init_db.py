#!/usr/bin/env python
"""
Script to initialize the auth service database.
Creates the users table if it does not exist.
Usage: python scripts/init_db.py
"""

import asyncio
import logging
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from authservice.core.config import get_settings
from authservice.db.session import close_db, create_engine, init_db
import authservice.models  # noqa: F401  registers the models on Base.metadata

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main() -> None:
    settings = get_settings()
    engine = create_engine(settings)
    try:
        await init_db(engine, create_tables=True)
        logger.info("✅ Database tables created")
    finally:
        await close_db(engine)


if __name__ == "__main__":
    asyncio.run(main())
