"""Ball resolution: scoring, outs, the innings switch and the chase.

Equal revealed numbers are always out, whatever the value (zero included).
When not out, the batter scores their own revealed number.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from handcricket.models.game import Game, Phase

if TYPE_CHECKING:
    from handcricket.core.hub import GameHub

logger = logging.getLogger(__name__)


def is_out(p1_number: int, p2_number: int) -> bool:
    return p1_number == p2_number


async def _finish(game: Game, session_id: int, winner: str, hub: GameHub) -> Game:
    game.winner = winner
    game.phase = Phase.FINISHED
    await hub.notify_end(session_id, winner == game.player1)
    logger.info(
        "game_finished session=%d winner=%s score=%d-%d",
        session_id,
        winner,
        game.p1_score,
        game.p2_score,
    )
    return game


async def resolve_ball(game: Game, session_id: int, hub: GameHub) -> Game:
    """Apply one fully revealed ball to *game*."""
    if game.p1_number is None or game.p2_number is None:
        raise AssertionError("ball resolved before both numbers were revealed")
    if game.batter is None:
        raise AssertionError("ball resolved with no batter assigned")

    batter = game.batter
    bowler = game.other_player(batter)

    if is_out(game.p1_number, game.p2_number):
        if game.innings == 1:
            game.target = game.batter_score + 1
            game.innings = 2
            game.batter = bowler
            game.clear_round()
            game.phase = Phase.BALL_COMMIT
            logger.info(
                "innings_switched session=%d target=%d batter=%s",
                session_id,
                game.target,
                game.batter,
            )
            return game
        return await _finish(game, session_id, bowler, hub)

    if batter == game.player1:
        game.p1_score += game.p1_number
    else:
        game.p2_score += game.p2_number

    # Terminal: the round slots are left as they are.
    if game.innings == 2 and game.batter_score >= game.target:
        return await _finish(game, session_id, batter, hub)

    game.clear_round()
    game.phase = Phase.BALL_COMMIT
    return game
