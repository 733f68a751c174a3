"""Game session models: the entity the commit-reveal engine owns.

A session runs toss → bat/bowl choice → two innings of commit-reveal balls.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

COMMITMENT_LENGTH = 32
U32_MAX = 0xFFFFFFFF


class Phase(StrEnum):
    """Every phase a session can be in. Drives all transition validity."""

    TOSS_COMMIT = "TossCommit"
    TOSS_REVEAL = "TossReveal"
    BAT_BOWL_CHOICE = "BatBowlChoice"
    BALL_COMMIT = "BallCommit"
    BALL_REVEAL = "BallReveal"
    FINISHED = "Finished"


class Game(BaseModel):
    """One hand cricket session.

    Commitment slots hold raw 32-byte values; they are hex-encoded on the
    wire (``model_dump_json`` / ``model_validate_json``).
    """

    model_config = ConfigDict(ser_json_bytes="hex", val_json_bytes="hex")

    player1: str
    player2: str
    player1_points: int
    player2_points: int
    player1_is_odd: bool
    toss_winner: str | None = None
    batter: str | None = None
    p1_commitment: bytes | None = None
    p2_commitment: bytes | None = None
    p1_number: int | None = Field(default=None, ge=0, le=U32_MAX)
    p2_number: int | None = Field(default=None, ge=0, le=U32_MAX)
    p1_score: int = Field(default=0, ge=0)
    p2_score: int = Field(default=0, ge=0)
    innings: int = Field(default=1, ge=1, le=2)
    target: int = Field(default=0, ge=0)
    phase: Phase = Phase.TOSS_COMMIT
    winner: str | None = None

    def other_player(self, identity: str) -> str:
        """Return the opponent of *identity* (which must be one of the players)."""
        return self.player2 if identity == self.player1 else self.player1

    def clear_round(self) -> None:
        """Clear both commitment slots and both number slots together."""
        self.p1_commitment = None
        self.p2_commitment = None
        self.p1_number = None
        self.p2_number = None

    @property
    def batter_score(self) -> int:
        if self.batter == self.player1:
            return self.p1_score
        return self.p2_score
