"""Repository pattern for database access.

Wraps an SQLAlchemy async session. ``SqlGameStore`` adapts the repository to
the engine's ``GameStore`` protocol.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from handcricket.db.models import ContractStateRow, GameSessionRow
from handcricket.models.game import Game


def utcnow() -> datetime:
    """Naive UTC timestamp, the form SQLite round-trips."""
    return datetime.now(UTC).replace(tzinfo=None)


class Repository:
    """Async repository for all database operations."""

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow) -> None:
        self.session = session
        self.clock = clock

    # --- Game sessions ---

    async def get_game_row(self, session_id: int) -> GameSessionRow | None:
        """Live (unexpired) row for *session_id*, or None."""
        row = await self.session.get(GameSessionRow, session_id)
        if row is None or row.expires_at <= self.clock():
            return None
        return row

    async def save_game(self, session_id: int, game: Game) -> GameSessionRow:
        now = self.clock()
        row = await self.session.get(GameSessionRow, session_id)
        if row is None:
            row = GameSessionRow(session_id=session_id, expires_at=now)
            self.session.add(row)
        row.state = game.model_dump_json()
        row.phase = game.phase.value
        row.updated_at = now
        await self.session.flush()
        return row

    async def renew_game(self, session_id: int, ttl_seconds: int) -> None:
        row = await self.session.get(GameSessionRow, session_id)
        if row is None:
            raise KeyError(session_id)
        row.expires_at = self.clock() + timedelta(seconds=ttl_seconds)
        await self.session.flush()

    async def purge_expired_games(self) -> int:
        """Delete expired sessions. Returns how many were removed."""
        result = await self.session.execute(
            delete(GameSessionRow).where(GameSessionRow.expires_at <= self.clock())
        )
        return result.rowcount or 0

    async def count_live_games(self) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(GameSessionRow)
            .where(GameSessionRow.expires_at > self.clock())
        )
        return result.scalar_one()

    # --- Instance state ---

    async def get_state(self, key: str) -> Any:
        row = await self.session.get(ContractStateRow, key)
        return row.value if row is not None else None

    async def set_state(self, key: str, value: Any) -> None:
        row = await self.session.get(ContractStateRow, key)
        if row is None:
            self.session.add(ContractStateRow(key=key, value=value))
        else:
            row.value = value
        await self.session.flush()


class SqlGameStore:
    """``GameStore`` over a Repository; writes join the caller's transaction."""

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    async def get_game(self, session_id: int) -> Game | None:
        row = await self.repo.get_game_row(session_id)
        if row is None:
            return None
        return Game.model_validate_json(row.state)

    async def set_game(self, session_id: int, game: Game) -> None:
        await self.repo.save_game(session_id, game)

    async def renew_game(self, session_id: int, ttl_seconds: int) -> None:
        await self.repo.renew_game(session_id, ttl_seconds)

    async def get_instance(self, key: str) -> Any:
        return await self.repo.get_state(key)

    async def set_instance(self, key: str, value: Any) -> None:
        await self.repo.set_state(key, value)
