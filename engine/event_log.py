"""
Critters - Event Log
Fixed-capacity ring buffer of game events with per-consumer read cursors.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from shared.constants import EVENT_LOG_CAPACITY
from shared.messages import GameEvent, GameEventType, create_event

logger = logging.getLogger(__name__)


class EventLog:
    """
    Broadcast log polled independently by every agent.

    Each consumer has a cursor holding the id of the last event it has
    seen. Polling returns everything newer than the cursor, oldest first,
    and moves the cursor forward. Cursors are created lazily at 0 and never
    move backwards; one consumer's poll never touches another's cursor.

    The log keeps only the newest ``capacity`` events. A consumer that
    falls further behind than that silently misses the overwritten events.
    That loss is expected and is not reported.

    Usage:
        log = EventLog(capacity=50)
        log.append(GameEventType.BELL, (1.0, 0.0, 2.0))

        for event in log.poll(creature_id):
            handle(event)
    """

    def __init__(self, capacity: int = EVENT_LOG_CAPACITY) -> None:
        """
        Initialize the event log.

        Args:
            capacity: Number of events kept before the oldest is overwritten
        """
        if capacity < 1:
            raise ValueError(f"Event log capacity must be >= 1, got {capacity}")

        self._capacity = capacity
        self._events: deque[GameEvent] = deque(maxlen=capacity)
        self._cursors: dict[str, int] = {}

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def latest_id(self) -> int:
        """Id of the newest stored event, 0 if the log is empty."""
        return self._events[-1].id if self._events else 0

    def append(self, event_type: GameEventType, position: Any) -> GameEvent:
        """
        Create and store a new event.

        Overwrites the oldest event when the log is full.

        Args:
            event_type: Kind of event
            position: Where it happened

        Returns:
            The stored event
        """
        event = create_event(event_type, position)
        self._events.append(event)
        logger.debug(f"Appended {event}")
        return event

    def poll(self, consumer_id: str) -> list[GameEvent]:
        """
        Get every event the consumer has not seen yet, in id order.

        Args:
            consumer_id: Identifier of the polling consumer

        Returns:
            New events, possibly empty
        """
        cursor = self._cursors.setdefault(consumer_id, 0)

        # Appends happen in id order, so the deque is already sorted
        new_events = [event for event in self._events if event.id > cursor]
        if new_events:
            self._cursors[consumer_id] = new_events[-1].id

        return new_events

    def cursor(self, consumer_id: str) -> int:
        """Last event id seen by a consumer (0 if it never polled)."""
        return self._cursors.get(consumer_id, 0)

    def forget(self, consumer_id: str) -> bool:
        """
        Drop a consumer's cursor.

        A consumer that polls again afterwards starts over from 0.

        Returns:
            True if the consumer had a cursor
        """
        return self._cursors.pop(consumer_id, None) is not None

    def consumers(self) -> list[str]:
        return list(self._cursors)

    def get_state(self) -> dict[str, Any]:
        """Get serializable state for debugging."""
        return {
            "capacity": self._capacity,
            "stored": len(self._events),
            "latest_id": self.latest_id,
            "cursors": dict(self._cursors),
        }

    def __len__(self) -> int:
        return len(self._events)

    def __str__(self) -> str:
        return f"EventLog({len(self._events)}/{self._capacity}, consumers={len(self._cursors)})"
