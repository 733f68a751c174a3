"""Hub event delivery: an in-process bus plus a per-transaction outbox.

``EventBusHub`` never writes to the bus directly. It stages each
notification in a ``HubOutbox``; the outbox releases them onto the
``EventBus`` only after the transaction that produced them has committed,
and drops them if it rolled back. SSE clients subscribe to the bus.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

HUB_GAME_STARTED = "hub.game_started"
HUB_GAME_ENDED = "hub.game_ended"
HUB_EVENT_TYPES: frozenset[str] = frozenset({HUB_GAME_STARTED, HUB_GAME_ENDED})


def _check_event_type(event_type: str) -> None:
    if event_type not in HUB_EVENT_TYPES:
        raise ValueError(
            f"Unknown hub event type {event_type!r}. Valid values: {sorted(HUB_EVENT_TYPES)}"
        )


@dataclass(frozen=True)
class HubEvent:
    """One hub notification: a session started or a session ended."""

    type: str
    data: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_event_type(self.type)

    @property
    def session_id(self) -> int | None:
        return self.data.get("session_id")

    def to_sse(self) -> str:
        payload = json.dumps({"type": self.type, "data": self.data})
        return f"event: {self.type}\ndata: {payload}\n\n"


class EventBus:
    """Fans committed hub events out to live subscribers.

    Subscribers either name one event type or pass ``None`` for both. A
    subscriber whose queue is full misses the event; nothing blocks.
    """

    def __init__(self) -> None:
        self._queues: dict[str | None, list[asyncio.Queue[HubEvent]]] = defaultdict(list)

    def deliver(self, event: HubEvent) -> int:
        """Hand *event* to every matching subscriber. Returns how many took it."""
        delivered = 0
        for queue in (*self._queues.get(event.type, ()), *self._queues.get(None, ())):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(
                    "hub_event_dropped type=%s session=%s", event.type, event.session_id
                )
            else:
                delivered += 1
        return delivered

    def subscribe(self, event_type: str | None = None, max_size: int = 100) -> Subscription:
        """Open a subscription; use it as an async context manager.

        Raises ValueError for anything other than a hub event type or None.
        """
        if event_type is not None:
            _check_event_type(event_type)
        return Subscription(self, event_type, max_size)

    @property
    def subscriber_count(self) -> int:
        return sum(len(queues) for queues in self._queues.values())


class Subscription:
    """Registered with the bus for the duration of its ``async with`` block."""

    def __init__(self, bus: EventBus, event_type: str | None, max_size: int) -> None:
        self._bus = bus
        self.event_type = event_type
        self._queue: asyncio.Queue[HubEvent] = asyncio.Queue(maxsize=max_size)

    async def __aenter__(self) -> Subscription:
        self._bus._queues[self.event_type].append(self._queue)
        return self

    async def __aexit__(self, *args: object) -> None:
        with contextlib.suppress(ValueError):
            self._bus._queues[self.event_type].remove(self._queue)

    async def get(self, timeout: float | None = None) -> HubEvent | None:
        """Next event, or None on timeout."""
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except TimeoutError:
            return None


class HubOutbox:
    """Hub events staged by one unit of work, held back until it commits."""

    def __init__(self, bus: EventBus) -> None:
        self.bus = bus
        self._pending: list[HubEvent] = []

    @property
    def pending(self) -> tuple[HubEvent, ...]:
        return tuple(self._pending)

    def stage(self, event: HubEvent) -> None:
        self._pending.append(event)

    def flush(self) -> int:
        """Deliver staged events in order and empty the outbox."""
        events, self._pending = self._pending, []
        for event in events:
            self.bus.deliver(event)
        return len(events)

    def discard(self) -> int:
        dropped = len(self._pending)
        self._pending.clear()
        if dropped:
            logger.info("hub_events_discarded count=%d", dropped)
        return dropped

    @contextlib.asynccontextmanager
    async def transaction(self) -> AsyncIterator[HubOutbox]:
        """Flush on clean exit; discard if the block raises."""
        try:
            yield self
        except Exception:
            self.discard()
            raise
        self.flush()
