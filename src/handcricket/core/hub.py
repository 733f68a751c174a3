"""Game hub: the external collaborator told when sessions start and end.

The engine only ever makes two calls on a hub. Failures propagate: the
enclosing operation aborts and nothing it did is persisted.
"""

from __future__ import annotations

import logging
from typing import Protocol

from handcricket.core.event_bus import HUB_GAME_ENDED, HUB_GAME_STARTED, HubEvent, HubOutbox

logger = logging.getLogger(__name__)


class GameHub(Protocol):
    """Two-method notification capability."""

    async def notify_start(
        self,
        game_id: str,
        session_id: int,
        player1: str,
        player2: str,
        stake1: int,
        stake2: int,
    ) -> None: ...

    async def notify_end(self, session_id: int, player1_won: bool) -> None: ...


class EventBusHub:
    """Hub whose notifications go out on the EventBus once the caller's unit of work commits.

    Notifications are staged in *outbox*; whoever owns the transaction
    flushes or discards it.
    """

    def __init__(self, hub_id: str, outbox: HubOutbox) -> None:
        self.hub_id = hub_id
        self.outbox = outbox

    async def notify_start(
        self,
        game_id: str,
        session_id: int,
        player1: str,
        player2: str,
        stake1: int,
        stake2: int,
    ) -> None:
        self.outbox.stage(
            HubEvent(
                HUB_GAME_STARTED,
                {
                    "hub_id": self.hub_id,
                    "game_id": game_id,
                    "session_id": session_id,
                    "player1": player1,
                    "player2": player2,
                    "player1_points": stake1,
                    "player2_points": stake2,
                },
            )
        )
        logger.info("hub_staged_start hub=%s session=%d", self.hub_id, session_id)

    async def notify_end(self, session_id: int, player1_won: bool) -> None:
        self.outbox.stage(
            HubEvent(
                HUB_GAME_ENDED,
                {"hub_id": self.hub_id, "session_id": session_id, "player1_won": player1_won},
            )
        )
        logger.info(
            "hub_staged_end hub=%s session=%d player1_won=%s",
            self.hub_id,
            session_id,
            player1_won,
        )
