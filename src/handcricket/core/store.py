"""Keyed session storage with expiry.

The engine reads and writes sessions through ``GameStore``. Two
implementations exist: ``InMemoryGameStore`` here, and ``SqlGameStore`` in
``handcricket.db.repository``.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, Protocol

from handcricket.models.game import Game


class GameStore(Protocol):
    """Per-session entities with a renewable expiry, plus instance-level values."""

    async def get_game(self, session_id: int) -> Game | None: ...

    async def set_game(self, session_id: int, game: Game) -> None: ...

    async def renew_game(self, session_id: int, ttl_seconds: int) -> None: ...

    async def get_instance(self, key: str) -> Any: ...

    async def set_instance(self, key: str, value: Any) -> None: ...


class InMemoryGameStore:
    """Dict-backed store. Expired sessions read as absent."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._games: dict[int, tuple[str, float]] = {}
        self._instance: dict[str, Any] = {}

    async def get_game(self, session_id: int) -> Game | None:
        entry = self._games.get(session_id)
        if entry is None:
            return None
        state, expires_at = entry
        if self._clock() >= expires_at:
            return None
        return Game.model_validate_json(state)

    async def set_game(self, session_id: int, game: Game) -> None:
        # A fresh key starts already expired; renew_game sets the real deadline.
        _, expires_at = self._games.get(session_id, ("", self._clock()))
        self._games[session_id] = (game.model_dump_json(), expires_at)

    async def renew_game(self, session_id: int, ttl_seconds: int) -> None:
        state, _ = self._games[session_id]
        self._games[session_id] = (state, self._clock() + ttl_seconds)

    async def get_instance(self, key: str) -> Any:
        return self._instance.get(key)

    async def set_instance(self, key: str, value: Any) -> None:
        self._instance[key] = value

    def expires_at(self, session_id: int) -> float | None:
        entry = self._games.get(session_id)
        return entry[1] if entry else None
