"""Tests for ball resolution: scoring, outs, the innings switch and the chase."""

import pytest

from handcricket.core.innings import is_out, resolve_ball
from handcricket.models.game import Game, Phase


def _ball(
    p1: int,
    p2: int,
    *,
    batter: str = "alice",
    innings: int = 1,
    target: int = 0,
    p1_score: int = 0,
    p2_score: int = 0,
) -> Game:
    return Game(
        player1="alice",
        player2="bob",
        player1_points=5,
        player2_points=7,
        player1_is_odd=True,
        toss_winner="alice",
        batter=batter,
        p1_commitment=b"\x01" * 32,
        p2_commitment=b"\x02" * 32,
        p1_number=p1,
        p2_number=p2,
        p1_score=p1_score,
        p2_score=p2_score,
        innings=innings,
        target=target,
        phase=Phase.BALL_REVEAL,
    )


class TestIsOut:
    @pytest.mark.parametrize("n", [0, 1, 6, 9, 2**32 - 1])
    def test_equal_is_out(self, n):
        assert is_out(n, n) is True

    def test_unequal_is_not_out(self):
        assert is_out(3, 4) is False


class TestNotOut:
    async def test_batter_scores_own_number(self, hub):
        game = await resolve_ball(_ball(4, 2, batter="alice", p1_score=3), 1, hub)
        assert game.p1_score == 7
        assert game.p2_score == 0
        assert game.phase == Phase.BALL_COMMIT
        assert game.p1_number is None and game.p1_commitment is None
        assert hub.ends == []

    async def test_player2_batting(self, hub):
        game = await resolve_ball(_ball(4, 2, batter="bob"), 1, hub)
        assert game.p2_score == 2
        assert game.p1_score == 0

    async def test_zero_run_ball(self, hub):
        game = await resolve_ball(_ball(0, 5, batter="alice"), 1, hub)
        assert game.p1_score == 0
        assert game.phase == Phase.BALL_COMMIT

    async def test_first_innings_never_finishes(self, hub):
        game = await resolve_ball(_ball(9, 1, batter="alice", p1_score=100), 1, hub)
        assert game.winner is None
        assert game.innings == 1


class TestOut:
    async def test_first_innings_out_switches(self, hub):
        game = await resolve_ball(_ball(3, 3, batter="bob", p2_score=11), 1, hub)
        assert game.target == 12
        assert game.innings == 2
        assert game.batter == "alice"
        assert game.phase == Phase.BALL_COMMIT
        assert game.p1_commitment is None and game.p2_number is None
        assert game.p2_score == 11
        assert hub.ends == []

    async def test_duck_sets_target_one(self, hub):
        game = await resolve_ball(_ball(0, 0, batter="alice"), 1, hub)
        assert game.target == 1

    async def test_second_innings_out_bowler_wins(self, hub):
        game = await resolve_ball(
            _ball(5, 5, batter="alice", innings=2, target=10, p1_score=4), 9, hub
        )
        assert game.winner == "bob"
        assert game.phase == Phase.FINISHED
        assert hub.ends == [(9, False)]

    async def test_second_innings_out_player1_bowling(self, hub):
        game = await resolve_ball(_ball(2, 2, batter="bob", innings=2, target=3), 4, hub)
        assert game.winner == "alice"
        assert hub.ends == [(4, True)]


class TestChase:
    async def test_reaching_target_wins(self, hub):
        game = await resolve_ball(
            _ball(3, 1, batter="alice", innings=2, target=5, p1_score=3), 2, hub
        )
        assert game.p1_score == 6
        assert game.winner == "alice"
        assert game.phase == Phase.FINISHED
        assert hub.ends == [(2, True)]

    async def test_exact_target_wins(self, hub):
        game = await resolve_ball(
            _ball(1, 2, batter="bob", innings=2, target=5, p2_score=3), 2, hub
        )
        assert game.p2_score == 5
        assert game.winner == "bob"
        assert hub.ends == [(2, False)]

    async def test_winning_ball_leaves_slots(self, hub):
        game = await resolve_ball(
            _ball(6, 1, batter="alice", innings=2, target=2), 2, hub
        )
        assert game.p1_number == 6
        assert game.p1_commitment is not None

    async def test_short_of_target_continues(self, hub):
        game = await resolve_ball(
            _ball(1, 2, batter="alice", innings=2, target=5, p1_score=1), 2, hub
        )
        assert game.winner is None
        assert game.phase == Phase.BALL_COMMIT
        assert game.target == 5

    async def test_hub_failure_propagates(self, hub):
        hub.fail_on_end = True
        with pytest.raises(ConnectionError):
            await resolve_ball(_ball(6, 1, batter="alice", innings=2, target=2), 2, hub)


class TestDefects:
    async def test_missing_batter(self, hub):
        game = _ball(1, 2)
        game.batter = None
        with pytest.raises(AssertionError):
            await resolve_ball(game, 1, hub)

    async def test_missing_number(self, hub):
        game = _ball(1, 2)
        game.p1_number = None
        with pytest.raises(AssertionError):
            await resolve_ball(game, 1, hub)
