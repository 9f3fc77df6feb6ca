"""
Critters - World Configuration
Centralized configuration for the game world and its host loop.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from creatures.config import parse_range
from shared.constants import (
    BOUNDS_MAX,
    BOUNDS_MIN,
    DEFAULT_CREATURE_VISUALS,
    EVENT_LOG_CAPACITY,
    FRUIT_RESPAWN_SECONDS,
    REVEAL_RADIUS,
    TICK_MS,
)


@dataclass
class WorldConfig:
    """Configuration for the game world with sensible defaults."""

    # Timing
    tick_ms: float = TICK_MS  # host frame interval

    # Events
    event_log_capacity: int = EVENT_LOG_CAPACITY

    # Play area
    bounds_min: tuple[float, float] = BOUNDS_MIN  # x, z
    bounds_max: tuple[float, float] = BOUNDS_MAX  # x, z
    reveal_radius: float = REVEAL_RADIUS

    # Agents
    initial_creatures: int = 3
    respawn_seconds: tuple[float, float] = FRUIT_RESPAWN_SECONDS
    creature_visuals: tuple[str, ...] = field(default_factory=lambda: DEFAULT_CREATURE_VISUALS)

    @classmethod
    def from_env(cls) -> WorldConfig:
        """
        Load configuration from environment variables.

        Environment variables:
            CRITTERS_TICK_MS: Host frame interval (ms)
            CRITTERS_EVENT_LOG_CAPACITY: Events kept before overwriting
            CRITTERS_BOUNDS_MIN: Play area minimum corner as "x,z"
            CRITTERS_BOUNDS_MAX: Play area maximum corner as "x,z"
            CRITTERS_REVEAL_RADIUS: Tile reveal radius
            CRITTERS_INITIAL_CREATURES: Creatures spawned at startup
            CRITTERS_RESPAWN_SECONDS: Fruit regrowth timer as "min,max"
            CRITTERS_CREATURE_VISUALS: Comma-separated creature looks
        """
        visuals = os.getenv("CRITTERS_CREATURE_VISUALS")
        return cls(
            tick_ms=float(os.getenv("CRITTERS_TICK_MS", str(TICK_MS))),
            event_log_capacity=int(os.getenv("CRITTERS_EVENT_LOG_CAPACITY", str(EVENT_LOG_CAPACITY))),
            bounds_min=parse_range(os.getenv("CRITTERS_BOUNDS_MIN"), BOUNDS_MIN),
            bounds_max=parse_range(os.getenv("CRITTERS_BOUNDS_MAX"), BOUNDS_MAX),
            reveal_radius=float(os.getenv("CRITTERS_REVEAL_RADIUS", str(REVEAL_RADIUS))),
            initial_creatures=int(os.getenv("CRITTERS_INITIAL_CREATURES", "3")),
            respawn_seconds=parse_range(os.getenv("CRITTERS_RESPAWN_SECONDS"), FRUIT_RESPAWN_SECONDS),
            creature_visuals=(
                tuple(v.strip() for v in visuals.split(",") if v.strip())
                if visuals is not None
                else DEFAULT_CREATURE_VISUALS
            ),
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.tick_ms <= 0:
            errors.append("tick_ms must be positive")
        if self.event_log_capacity < 1:
            errors.append("event_log_capacity must be >= 1")
        if any(high <= low for low, high in zip(self.bounds_min, self.bounds_max)):
            errors.append("bounds_max must be greater than bounds_min on both axes")
        if self.reveal_radius < 0:
            errors.append("reveal_radius cannot be negative")
        if self.initial_creatures < 0:
            errors.append("initial_creatures cannot be negative")
        low, high = self.respawn_seconds
        if low < 0 or high < low:
            errors.append(f"respawn_seconds must be a range 0 <= min <= max, got ({low}, {high})")
        if not self.creature_visuals:
            errors.append("creature_visuals cannot be empty")

        return errors

    def is_valid(self) -> bool:
        return len(self.validate()) == 0

    @classmethod
    def from_dict(cls, data: dict) -> WorldConfig:
        """Create config from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)
