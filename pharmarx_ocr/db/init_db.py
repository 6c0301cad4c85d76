from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from pharmarx_ocr.db.models import Base

logger = logging.getLogger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    """Create the order table on startup if it is missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_initialized", extra={"tables": sorted(Base.metadata.tables)})
