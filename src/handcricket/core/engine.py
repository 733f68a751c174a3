"""Commit-reveal game engine: the session state machine.

    TossCommit → TossReveal → BatBowlChoice → BallCommit ⇄ BallReveal → Finished

Every public action authenticates the caller, loads the session, validates
the phase, mutates a private copy, resolves the round when both players
have acted, and only then persists. A failure anywhere leaves the stored
session as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from handcricket.core.auth import Authorizer
from handcricket.core.hub import GameHub
from handcricket.core.innings import resolve_ball
from handcricket.core.proof import verify_proof
from handcricket.core.store import GameStore
from handcricket.core.toss import derive_player1_is_odd, resolve_toss
from handcricket.models.errors import ErrorCode, GameError
from handcricket.models.game import COMMITMENT_LENGTH, U32_MAX, Game, Phase

logger = logging.getLogger(__name__)

ADMIN_KEY = "admin"
HUB_KEY = "hub"
CODE_HASH_KEY = "code_hash"

HubFactory = Callable[[str], GameHub]


class GameEngine:
    """Hand cricket state machine over an injected store, authorizer and hub."""

    def __init__(
        self,
        store: GameStore,
        authorizer: Authorizer,
        hub_factory: HubFactory,
        *,
        contract_id: str,
        ttl_seconds: int,
    ) -> None:
        self.store = store
        self.authorizer = authorizer
        self.hub_factory = hub_factory
        self.contract_id = contract_id
        self.ttl_seconds = ttl_seconds

    # --- Instance configuration ---

    async def initialize(self, admin: str, hub: str) -> None:
        """Record the admin and hub identities. No-op once an admin exists."""
        if await self.store.get_instance(ADMIN_KEY) is not None:
            return
        await self.store.set_instance(ADMIN_KEY, admin)
        await self.store.set_instance(HUB_KEY, hub)
        logger.info("engine_initialized admin=%s hub=%s", admin, hub)

    async def _require(self, key: str) -> str:
        value = await self.store.get_instance(key)
        if value is None:
            raise RuntimeError(f"{key} not set")
        return value

    async def _hub(self) -> GameHub:
        return self.hub_factory(await self._require(HUB_KEY))

    async def _require_admin(self) -> str:
        admin = await self._require(ADMIN_KEY)
        self.authorizer.require_auth(admin)
        return admin

    # --- Session storage ---

    async def _load(self, session_id: int) -> Game:
        game = await self.store.get_game(session_id)
        if game is None:
            raise GameError(ErrorCode.GAME_NOT_FOUND, f"session {session_id}")
        return game.model_copy(deep=True)

    async def _save(self, session_id: int, game: Game) -> None:
        await self.store.set_game(session_id, game)
        await self.store.renew_game(session_id, self.ttl_seconds)

    # --- Player actions ---

    async def start(
        self,
        session_id: int,
        player1: str,
        player2: str,
        stake1: int,
        stake2: int,
    ) -> Game:
        """Open a new session in TossCommit."""
        if not 0 <= session_id <= U32_MAX:
            raise ValueError("session_id must fit in an unsigned 32-bit integer")
        if player1 == player2:
            raise GameError(ErrorCode.SELF_PLAY, player1)
        self.authorizer.require_auth_for_args(player1, (session_id, stake1))
        self.authorizer.require_auth_for_args(player2, (session_id, stake2))

        player1_is_odd = derive_player1_is_odd(session_id, player1, player2)

        hub = await self._hub()
        await hub.notify_start(self.contract_id, session_id, player1, player2, stake1, stake2)

        game = Game(
            player1=player1,
            player2=player2,
            player1_points=stake1,
            player2_points=stake2,
            player1_is_odd=player1_is_odd,
        )
        await self._save(session_id, game)
        logger.info(
            "game_started session=%d player1=%s player2=%s player1_is_odd=%s",
            session_id,
            player1,
            player2,
            player1_is_odd,
        )
        return game

    async def commit(self, session_id: int, player: str, commitment: bytes) -> Game:
        """Fill *player*'s commitment slot; advance to the reveal phase when both are in."""
        if len(commitment) != COMMITMENT_LENGTH:
            raise ValueError(f"commitment must be exactly {COMMITMENT_LENGTH} bytes")
        self.authorizer.require_auth(player)
        game = await self._load(session_id)
        if game.winner is not None:
            raise GameError(ErrorCode.GAME_ALREADY_ENDED)
        if game.phase not in (Phase.TOSS_COMMIT, Phase.BALL_COMMIT):
            raise GameError(ErrorCode.WRONG_PHASE, game.phase.value)

        if player == game.player1:
            if game.p1_commitment is not None:
                raise GameError(ErrorCode.ALREADY_COMMITTED)
            game.p1_commitment = commitment
        elif player == game.player2:
            if game.p2_commitment is not None:
                raise GameError(ErrorCode.ALREADY_COMMITTED)
            game.p2_commitment = commitment
        else:
            raise GameError(ErrorCode.NOT_PLAYER, player)

        if game.p1_commitment is not None and game.p2_commitment is not None:
            match game.phase:
                case Phase.TOSS_COMMIT:
                    game.phase = Phase.TOSS_REVEAL
                case Phase.BALL_COMMIT:
                    game.phase = Phase.BALL_REVEAL
                case _:
                    raise AssertionError(f"commit completed in phase {game.phase}")

        await self._save(session_id, game)
        logger.debug("committed session=%d player=%s phase=%s", session_id, player, game.phase)
        return game

    async def reveal(self, session_id: int, player: str, number: int, proof: bytes) -> Game:
        """Fill *player*'s number slot after checking *proof*; resolve when both are in."""
        self.authorizer.require_auth(player)
        game = await self._load(session_id)
        if game.winner is not None:
            raise GameError(ErrorCode.GAME_ALREADY_ENDED)
        if game.phase not in (Phase.TOSS_REVEAL, Phase.BALL_REVEAL):
            raise GameError(ErrorCode.WRONG_PHASE, game.phase.value)

        if player == game.player1:
            if game.p1_number is not None:
                raise GameError(ErrorCode.ALREADY_REVEALED)
            if game.p1_commitment is None:
                raise GameError(ErrorCode.COMMIT_MISSING)
            if not verify_proof(game.p1_commitment, number, proof):
                raise GameError(ErrorCode.PROOF_INVALID)
            game.p1_number = number
        elif player == game.player2:
            if game.p2_number is not None:
                raise GameError(ErrorCode.ALREADY_REVEALED)
            if game.p2_commitment is None:
                raise GameError(ErrorCode.COMMIT_MISSING)
            if not verify_proof(game.p2_commitment, number, proof):
                raise GameError(ErrorCode.PROOF_INVALID)
            game.p2_number = number
        else:
            raise GameError(ErrorCode.NOT_PLAYER, player)

        if game.p1_number is not None and game.p2_number is not None:
            match game.phase:
                case Phase.TOSS_REVEAL:
                    game = resolve_toss(game)
                case Phase.BALL_REVEAL:
                    game = await resolve_ball(game, session_id, await self._hub())
                case _:
                    raise AssertionError(f"reveal completed in phase {game.phase}")

        await self._save(session_id, game)
        return game

    async def choose_role(self, session_id: int, player: str, wants_bat: bool) -> Game:
        """Toss winner picks bat or bowl; play moves to the first ball."""
        self.authorizer.require_auth(player)
        game = await self._load(session_id)
        if game.phase != Phase.BAT_BOWL_CHOICE:
            raise GameError(ErrorCode.WRONG_PHASE, game.phase.value)
        if game.toss_winner is None:
            raise AssertionError("bat/bowl choice with no toss winner")
        if player != game.toss_winner:
            raise GameError(ErrorCode.NOT_TOSS_WINNER, player)

        game.batter = player if wants_bat else game.other_player(player)
        game.clear_round()
        game.phase = Phase.BALL_COMMIT

        await self._save(session_id, game)
        logger.info("role_chosen session=%d batter=%s", session_id, game.batter)
        return game

    async def get_game(self, session_id: int) -> Game:
        """Read-only lookup. Never writes and never renews expiry."""
        game = await self.store.get_game(session_id)
        if game is None:
            raise GameError(ErrorCode.GAME_NOT_FOUND, f"session {session_id}")
        return game

    # --- Administration ---

    async def get_admin(self) -> str:
        return await self._require(ADMIN_KEY)

    async def set_admin(self, new_admin: str) -> None:
        old = await self._require_admin()
        await self.store.set_instance(ADMIN_KEY, new_admin)
        logger.info("admin_changed old=%s new=%s", old, new_admin)

    async def get_hub(self) -> str:
        return await self._require(HUB_KEY)

    async def set_hub(self, new_hub: str) -> None:
        await self._require_admin()
        await self.store.set_instance(HUB_KEY, new_hub)
        logger.info("hub_changed new=%s", new_hub)

    async def upgrade(self, new_code_hash: bytes) -> None:
        """Record the code hash this deployment should be replaced with."""
        if len(new_code_hash) != 32:
            raise ValueError("code hash must be exactly 32 bytes")
        await self._require_admin()
        await self.store.set_instance(CODE_HASH_KEY, new_code_hash.hex())
        logger.warning("code_upgraded hash=%s", new_code_hash.hex())

    async def get_code_hash(self) -> bytes | None:
        value = await self.store.get_instance(CODE_HASH_KEY)
        return bytes.fromhex(value) if value is not None else None
