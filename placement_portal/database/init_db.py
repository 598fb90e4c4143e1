"""
database/init_db.py

Initializes the database by creating all tables defined in the SQLAlchemy models.
Used for setting up the initial schema in the connected database.

Usage:
    python -m placement_portal.database.init_db
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from placement_portal.core.logging import init_logging
from placement_portal.database import models  # noqa: F401  (registers tables on the metadata)
from placement_portal.database.base import Base
from placement_portal.database.session import engine as default_engine

logger = logging.getLogger(__name__)


async def init_db(engine: AsyncEngine = default_engine) -> None:
    """
    Creates all database tables based on SQLAlchemy models.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"[DB] Created tables: {sorted(Base.metadata.tables)}")


if __name__ == "__main__":
    init_logging()
    asyncio.run(init_db())
