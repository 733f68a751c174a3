"""Shared test fixtures."""

import pytest

from handcricket.config import Settings
from handcricket.core.auth import GrantAuthorizer
from handcricket.core.engine import GameEngine
from handcricket.core.store import InMemoryGameStore

ALICE = "alice"
BOB = "bob"
ADMIN = "root-admin"
HUB = "hub-1"
TTL = 3600


class FakeClock:
    """Monotonic clock the test can move by hand."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingHub:
    """Hub double that records every notification."""

    def __init__(self, hub_id: str = HUB) -> None:
        self.hub_id = hub_id
        self.starts: list[tuple] = []
        self.ends: list[tuple[int, bool]] = []
        self.fail_on_end = False
        self.fail_on_start = False

    async def notify_start(self, game_id, session_id, player1, player2, stake1, stake2) -> None:
        if self.fail_on_start:
            raise ConnectionError("hub unreachable")
        self.starts.append((game_id, session_id, player1, player2, stake1, stake2))

    async def notify_end(self, session_id: int, player1_won: bool) -> None:
        if self.fail_on_end:
            raise ConnectionError("hub unreachable")
        self.ends.append((session_id, player1_won))


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(handcricket_env="development", database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryGameStore:
    return InMemoryGameStore(clock=clock)


@pytest.fixture
def hub() -> RecordingHub:
    return RecordingHub()


@pytest.fixture
def authorizer() -> GrantAuthorizer:
    return GrantAuthorizer().allow(ALICE, BOB)


@pytest.fixture
async def engine(
    store: InMemoryGameStore, authorizer: GrantAuthorizer, hub: RecordingHub
) -> GameEngine:
    hubs = {HUB: hub}
    eng = GameEngine(
        store,
        authorizer,
        lambda hub_id: hubs.setdefault(hub_id, RecordingHub(hub_id)),
        contract_id="hand-cricket",
        ttl_seconds=TTL,
    )
    await eng.initialize(ADMIN, HUB)
    return eng
