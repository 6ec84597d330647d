from __future__ import annotations

import logging

from codesolve.db.models import Base
from codesolve.db.session import get_engine

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Create the feedback tables if they do not exist yet."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("feedback_tables_ready")
