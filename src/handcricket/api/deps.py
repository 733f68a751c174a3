"""FastAPI dependency injection for database sessions, repository and game engine."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from handcricket.auth.deps import AuthorizerDep
from handcricket.config import Settings
from handcricket.core.engine import GameEngine
from handcricket.core.event_bus import HubOutbox
from handcricket.core.hub import EventBusHub
from handcricket.db.engine import create_session_factory
from handcricket.db.repository import Repository, SqlGameStore

OUTBOX_KEY = "hub_outbox"


async def get_db_engine(request: Request) -> AsyncEngine:
    """Get the database engine from app state."""
    return request.app.state.engine


async def get_session(
    request: Request,
    engine: Annotated[AsyncEngine, Depends(get_db_engine)],
) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session: one transaction per request.

    Hub events staged during the request ride along in ``session.info`` and
    are delivered only after the commit succeeds.
    """
    factory = create_session_factory(engine)
    outbox = HubOutbox(request.app.state.event_bus)
    async with factory() as session:
        session.info[OUTBOX_KEY] = outbox
        try:
            yield session
            await session.commit()
        except Exception:  # rollback on any error, then re-raise
            await session.rollback()
            outbox.discard()
            raise
    outbox.flush()


async def get_repo(session: Annotated[AsyncSession, Depends(get_session)]) -> Repository:
    """Get a repository instance bound to the current session."""
    return Repository(session)


RepoDep = Annotated[Repository, Depends(get_repo)]


async def get_game_engine(
    request: Request,
    repo: RepoDep,
    authorizer: AuthorizerDep,
) -> GameEngine:
    """Build a GameEngine for this request's transaction and presented grants."""
    settings: Settings = request.app.state.settings
    outbox: HubOutbox = repo.session.info[OUTBOX_KEY]
    return GameEngine(
        SqlGameStore(repo),
        authorizer,
        lambda hub_id: EventBusHub(hub_id, outbox),
        contract_id=settings.handcricket_contract_id,
        ttl_seconds=settings.handcricket_game_ttl_seconds,
    )


EngineDep = Annotated[GameEngine, Depends(get_game_engine)]
