"""Tests for the in-memory session store and the grant authorizer."""

import pytest

from handcricket.core.auth import Grant, GrantAuthorizer
from handcricket.core.store import InMemoryGameStore
from handcricket.models.errors import NotAuthorizedError
from handcricket.models.game import Game, Phase


def _game(**overrides) -> Game:
    fields = {
        "player1": "a",
        "player2": "b",
        "player1_points": 1,
        "player2_points": 2,
        "player1_is_odd": False,
    }
    fields.update(overrides)
    return Game(**fields)


class TestInMemoryGameStore:
    async def test_missing(self, clock):
        store = InMemoryGameStore(clock=clock)
        assert await store.get_game(1) is None

    async def test_set_and_renew(self, clock):
        store = InMemoryGameStore(clock=clock)
        await store.set_game(1, _game())
        await store.renew_game(1, 60)
        assert (await store.get_game(1)).player1 == "a"
        assert store.expires_at(1) == clock.now + 60

    async def test_unrenewed_entry_is_expired(self, clock):
        store = InMemoryGameStore(clock=clock)
        await store.set_game(1, _game())
        assert await store.get_game(1) is None

    async def test_set_keeps_existing_deadline(self, clock):
        store = InMemoryGameStore(clock=clock)
        await store.set_game(1, _game())
        await store.renew_game(1, 60)
        deadline = store.expires_at(1)
        clock.advance(5)
        await store.set_game(1, _game(phase=Phase.TOSS_REVEAL))
        assert store.expires_at(1) == deadline

    async def test_returns_copies(self, clock):
        store = InMemoryGameStore(clock=clock)
        await store.set_game(1, _game())
        await store.renew_game(1, 60)
        first = await store.get_game(1)
        first.p1_score = 99
        assert (await store.get_game(1)).p1_score == 0

    async def test_commitment_bytes_round_trip(self, clock):
        store = InMemoryGameStore(clock=clock)
        commitment = bytes(range(32))
        await store.set_game(1, _game(p1_commitment=commitment))
        await store.renew_game(1, 60)
        assert (await store.get_game(1)).p1_commitment == commitment

    async def test_instance_values(self, clock):
        store = InMemoryGameStore(clock=clock)
        assert await store.get_instance("admin") is None
        await store.set_instance("admin", "root")
        assert await store.get_instance("admin") == "root"


class TestGrantAuthorizer:
    def test_unrestricted_grant(self):
        auth = GrantAuthorizer().allow("alice")
        auth.require_auth("alice")
        auth.require_auth_for_args("alice", (1, 10))

    def test_missing_grant(self):
        with pytest.raises(NotAuthorizedError) as exc:
            GrantAuthorizer().require_auth("alice")
        assert exc.value.identity == "alice"

    def test_args_bound_grant_only_matches_args(self):
        auth = GrantAuthorizer([Grant("alice", (1, 10))])
        auth.require_auth_for_args("alice", (1, 10))
        auth.require_auth_for_args("alice", [1, 10])
        with pytest.raises(NotAuthorizedError):
            auth.require_auth_for_args("alice", (2, 10))

    def test_args_bound_grant_does_not_authorize_plain_calls(self):
        auth = GrantAuthorizer([Grant("alice", (1, 10))])
        with pytest.raises(NotAuthorizedError):
            auth.require_auth("alice")

    def test_other_identity(self):
        auth = GrantAuthorizer().allow("bob")
        with pytest.raises(NotAuthorizedError):
            auth.require_auth("alice")
