"""Periodic storage upkeep, run by APScheduler from the app lifespan."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from handcricket.db.engine import get_session
from handcricket.db.repository import Repository

logger = logging.getLogger(__name__)


async def purge_expired_sessions(engine: AsyncEngine) -> int:
    """Delete every session whose expiry window has lapsed."""
    async with get_session(engine) as session:
        repo = Repository(session)
        removed = await repo.purge_expired_games()
        live = await repo.count_live_games()
    if removed:
        logger.info("purge_expired removed=%d live=%d", removed, live)
    else:
        logger.debug("purge_expired removed=0 live=%d", live)
    return removed
