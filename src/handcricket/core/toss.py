"""Toss: parity assignment at session start and toss resolution."""

from __future__ import annotations

import logging

from eth_utils import keccak

from handcricket.models.game import Game, Phase

logger = logging.getLogger(__name__)


def toss_seed(session_id: int, player1: str, player2: str) -> bytes:
    """Seed bytes: session id (u32, big-endian) then both player identities."""
    return session_id.to_bytes(4, "big") + player1.encode() + player2.encode()


def derive_player1_is_odd(session_id: int, player1: str, player2: str) -> bool:
    """Player1 calls "odd" when the low-order byte of the seed hash is odd."""
    digest = keccak(toss_seed(session_id, player1, player2))
    # Odd low byte: player1 is odd. Not the even-byte rule; do not invert.
    return digest[-1] % 2 == 1


def player1_wins_toss(player1_is_odd: bool, p1_number: int, p2_number: int) -> bool:
    sum_is_odd = (p1_number + p2_number) % 2 == 1
    return player1_is_odd == sum_is_odd


def resolve_toss(game: Game) -> Game:
    """Decide the toss from both revealed numbers and open the bat/bowl choice."""
    if game.p1_number is None or game.p2_number is None:
        raise AssertionError("toss resolved before both numbers were revealed")
    if player1_wins_toss(game.player1_is_odd, game.p1_number, game.p2_number):
        game.toss_winner = game.player1
    else:
        game.toss_winner = game.player2
    game.clear_round()
    game.phase = Phase.BAT_BOWL_CHOICE
    logger.info("toss_resolved winner=%s", game.toss_winner)
    return game
