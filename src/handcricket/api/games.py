"""Game API endpoints: start, commit, reveal, choose role, read.

Acting players prove who they are with ``X-Player-Grant`` headers.
"""

from __future__ import annotations

from fastapi import APIRouter, status
from pydantic import BaseModel, Field, field_validator

from handcricket.api.deps import EngineDep
from handcricket.models.game import U32_MAX, Game

router = APIRouter(prefix="/api/games", tags=["games"])


def _hex_bytes(value: str, length: int | None = None) -> bytes:
    raw = value.removeprefix("0x")
    try:
        data = bytes.fromhex(raw)
    except ValueError as exc:
        raise ValueError("must be a hex string") from exc
    if length is not None and len(data) != length:
        raise ValueError(f"must be exactly {length} bytes")
    return data


class StartRequest(BaseModel):
    session_id: int = Field(ge=0, le=U32_MAX)
    player1: str = Field(min_length=1)
    player2: str = Field(min_length=1)
    player1_points: int
    player2_points: int


class CommitRequest(BaseModel):
    player: str
    commitment: bytes  # 32 bytes, hex on the wire

    @field_validator("commitment", mode="before")
    @classmethod
    def _decode(cls, v: object) -> object:
        return _hex_bytes(v, 32) if isinstance(v, str) else v


class RevealRequest(BaseModel):
    player: str
    number: int = Field(ge=0, le=U32_MAX)
    proof: bytes  # hex on the wire, any length

    @field_validator("proof", mode="before")
    @classmethod
    def _decode(cls, v: object) -> object:
        return _hex_bytes(v) if isinstance(v, str) else v


class RoleRequest(BaseModel):
    player: str
    bat: bool


def _game_payload(session_id: int, game: Game) -> dict:
    return {"data": {"session_id": session_id, **game.model_dump(mode="json")}}


@router.post("", status_code=status.HTTP_201_CREATED)
async def start_game(body: StartRequest, engine: EngineDep) -> dict:
    """Open a session. Both players must present grants bound to (session_id, own stake)."""
    game = await engine.start(
        body.session_id,
        body.player1,
        body.player2,
        body.player1_points,
        body.player2_points,
    )
    return _game_payload(body.session_id, game)


@router.get("/{session_id}")
async def get_game(session_id: int, engine: EngineDep) -> dict:
    game = await engine.get_game(session_id)
    return _game_payload(session_id, game)


@router.post("/{session_id}/commit")
async def commit_number(session_id: int, body: CommitRequest, engine: EngineDep) -> dict:
    game = await engine.commit(session_id, body.player, body.commitment)
    return _game_payload(session_id, game)


@router.post("/{session_id}/reveal")
async def reveal_number(session_id: int, body: RevealRequest, engine: EngineDep) -> dict:
    game = await engine.reveal(session_id, body.player, body.number, body.proof)
    return _game_payload(session_id, game)


@router.post("/{session_id}/role")
async def choose_role(session_id: int, body: RoleRequest, engine: EngineDep) -> dict:
    """Toss winner chooses to bat (``bat: true``) or bowl."""
    game = await engine.choose_role(session_id, body.player, body.bat)
    return _game_payload(session_id, game)
