"""
Critters - Creature Configuration
Tunable creature parameters with environment variable support.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from shared.constants import (
    EGG_SECONDS,
    FOOD_VALUE,
    HOP_HEIGHT,
    HOP_MS,
    HOP_PAUSE_MS,
    HUNGER_PER_SECOND,
    HUNGRY_SECONDS,
    IDLE_SECONDS,
    ROTATION_MS,
    STEP_DISTANCE,
    WANDER_RADIUS,
)


def parse_range(value: str | None, default: tuple[float, float]) -> tuple[float, float]:
    """Parse a "min,max" string into a float pair."""
    if not value:
        return default
    low, high = (float(part) for part in value.split(","))
    return (low, high)


@dataclass
class CreatureConfig:
    """Configuration for a creature with sensible defaults."""

    # Movement
    step_distance: float = STEP_DISTANCE  # world units per full hop
    rotation_ms: float = ROTATION_MS  # turn-to-face duration
    hop_ms: float = HOP_MS  # duration of one hop
    pause_ms: float = HOP_PAUSE_MS  # rest between hops
    hop_height: float = HOP_HEIGHT  # peak of the hop arc
    wander_radius: float = WANDER_RADIUS  # reach of a random wander

    # State timers, seconds [min, max]
    egg_seconds: tuple[float, float] = EGG_SECONDS
    idle_seconds: tuple[float, float] = IDLE_SECONDS
    hungry_seconds: tuple[float, float] = HUNGRY_SECONDS

    # Hunger
    hunger_per_second: float = HUNGER_PER_SECOND  # meter fill rate
    food_value: float = FOOD_VALUE  # hunger removed per meal

    @classmethod
    def from_env(cls) -> CreatureConfig:
        """
        Load configuration from environment variables.

        Environment variables:
            CRITTERS_STEP_DISTANCE: Distance covered by one hop
            CRITTERS_ROTATION_MS: Turn duration (ms)
            CRITTERS_HOP_MS: Hop duration (ms)
            CRITTERS_HOP_PAUSE_MS: Pause between hops (ms)
            CRITTERS_HOP_HEIGHT: Peak height of a hop
            CRITTERS_WANDER_RADIUS: Max distance of a random wander
            CRITTERS_EGG_SECONDS: Hatch timer as "min,max"
            CRITTERS_IDLE_SECONDS: Idle timer as "min,max"
            CRITTERS_HUNGRY_SECONDS: Hungry timer as "min,max"
            CRITTERS_HUNGER_PER_SECOND: How fast hunger builds up
            CRITTERS_FOOD_VALUE: Hunger removed by one meal
        """
        return cls(
            step_distance=float(os.getenv("CRITTERS_STEP_DISTANCE", str(STEP_DISTANCE))),
            rotation_ms=float(os.getenv("CRITTERS_ROTATION_MS", str(ROTATION_MS))),
            hop_ms=float(os.getenv("CRITTERS_HOP_MS", str(HOP_MS))),
            pause_ms=float(os.getenv("CRITTERS_HOP_PAUSE_MS", str(HOP_PAUSE_MS))),
            hop_height=float(os.getenv("CRITTERS_HOP_HEIGHT", str(HOP_HEIGHT))),
            wander_radius=float(os.getenv("CRITTERS_WANDER_RADIUS", str(WANDER_RADIUS))),
            egg_seconds=parse_range(os.getenv("CRITTERS_EGG_SECONDS"), EGG_SECONDS),
            idle_seconds=parse_range(os.getenv("CRITTERS_IDLE_SECONDS"), IDLE_SECONDS),
            hungry_seconds=parse_range(os.getenv("CRITTERS_HUNGRY_SECONDS"), HUNGRY_SECONDS),
            hunger_per_second=float(
                os.getenv("CRITTERS_HUNGER_PER_SECOND", str(HUNGER_PER_SECOND))
            ),
            food_value=float(os.getenv("CRITTERS_FOOD_VALUE", str(FOOD_VALUE))),
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.step_distance <= 0:
            errors.append("step_distance must be positive")
        if self.rotation_ms < 0:
            errors.append("rotation_ms cannot be negative")
        if self.hop_ms <= 0:
            errors.append("hop_ms must be positive")
        if self.pause_ms < 0:
            errors.append("pause_ms cannot be negative")
        if self.wander_radius < 0:
            errors.append("wander_radius cannot be negative")
        if self.hunger_per_second < 0:
            errors.append("hunger_per_second cannot be negative")
        if self.food_value < 0:
            errors.append("food_value cannot be negative")

        for name in ("egg_seconds", "idle_seconds", "hungry_seconds"):
            low, high = getattr(self, name)
            if low < 0 or high < low:
                errors.append(f"{name} must be a range 0 <= min <= max, got ({low}, {high})")

        return errors

    @classmethod
    def from_dict(cls, data: dict) -> CreatureConfig:
        """Create config from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)
