"""
Critters - Game Event Types
Events broadcast by the game world and polled by every agent.

Ids come from a single process-wide counter, so they increase strictly
across all events ever created, whichever log they end up in.
"""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

import numpy as np

from shared.geometry import as_position


# =============================================================================
# ENUMS
# =============================================================================


class GameEventType(IntEnum):
    """Kind of game event."""

    NONE = 0  # Default for objects that do not emit anything
    BELL = 1  # A bell was rung at a position
    FOOD = 2  # Food appeared at a position


# =============================================================================
# EVENTS
# =============================================================================


_event_ids = itertools.count(1)


def next_event_id() -> int:
    """Reserve the next global event id."""
    return next(_event_ids)


@dataclass(frozen=True, eq=False)
class GameEvent:
    """A single game event with a globally unique, increasing id."""

    event_type: GameEventType
    position: np.ndarray
    id: int
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.event_type.name.lower(),
            "position": [float(c) for c in self.position],
            "id": self.id,
            "timestamp_ms": self.timestamp_ms,
        }

    def __str__(self) -> str:
        x, y, z = self.position
        return f"GameEvent(#{self.id} {self.event_type.name} at ({x:.2f}, {y:.2f}, {z:.2f}))"


# =============================================================================
# FACTORY HELPERS
# =============================================================================


def create_event(event_type: GameEventType, position: Any) -> GameEvent:
    """Create an event with the next global id."""
    return GameEvent(
        event_type=event_type,
        position=as_position(position),
        id=next_event_id(),
    )


def create_bell(position: Any) -> GameEvent:
    """Create a bell event."""
    return create_event(GameEventType.BELL, position)


def create_food(position: Any) -> GameEvent:
    """Create a food event."""
    return create_event(GameEventType.FOOD, position)
