"""Tests for the Game model and error codes."""

import pytest
from pydantic import ValidationError

from handcricket.models.errors import ErrorCode, GameError
from handcricket.models.game import Game, Phase


def _game(**overrides) -> Game:
    fields = {
        "player1": "alice",
        "player2": "bob",
        "player1_points": 1,
        "player2_points": 1,
        "player1_is_odd": True,
    }
    fields.update(overrides)
    return Game(**fields)


class TestGame:
    def test_defaults(self):
        game = _game()
        assert game.phase == Phase.TOSS_COMMIT
        assert game.innings == 1
        assert game.target == 0

    def test_other_player(self):
        game = _game()
        assert game.other_player("alice") == "bob"
        assert game.other_player("bob") == "alice"

    def test_clear_round(self):
        game = _game(p1_commitment=b"\x01" * 32, p2_commitment=b"\x02" * 32, p1_number=3)
        game.clear_round()
        assert (game.p1_commitment, game.p2_commitment, game.p1_number, game.p2_number) == (
            None,
            None,
            None,
            None,
        )

    def test_json_hex_commitments(self):
        game = _game(p1_commitment=bytes(range(32)))
        data = game.model_dump(mode="json")
        assert data["p1_commitment"] == bytes(range(32)).hex()
        assert data["phase"] == "TossCommit"
        assert Game.model_validate_json(game.model_dump_json()) == game

    def test_innings_range(self):
        with pytest.raises(ValidationError):
            _game(innings=3)

    def test_negative_score_rejected(self):
        with pytest.raises(ValidationError):
            _game(p1_score=-1)


class TestErrorCodes:
    def test_stable_values(self):
        assert {code.label: int(code) for code in ErrorCode} == {
            "GameNotFound": 1,
            "NotPlayer": 2,
            "WrongPhase": 3,
            "AlreadyCommitted": 4,
            "AlreadyRevealed": 5,
            "CommitMissing": 6,
            "ProofInvalid": 7,
            "GameAlreadyEnded": 8,
            "SelfPlay": 9,
            "NotTossWinner": 10,
        }

    def test_game_error_message(self):
        err = GameError(ErrorCode.WRONG_PHASE, "TossCommit")
        assert err.code == ErrorCode.WRONG_PHASE
        assert str(err) == "WrongPhase (3): TossCommit"
