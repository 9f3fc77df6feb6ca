"""
Critters - Game Events
Event definitions shared by the world and its agents.
"""

from .types import (
    GameEvent,
    GameEventType,
    create_bell,
    create_event,
    create_food,
    next_event_id,
)

__all__ = [
    "GameEvent",
    "GameEventType",
    "create_bell",
    "create_event",
    "create_food",
    "next_event_id",
]
