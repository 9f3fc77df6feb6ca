"""
Critters - Geometry Helpers
Positions are numpy float vectors (x, y, z) with y pointing up.
Rotations are scipy Rotation objects; +z is forward.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from scipy.spatial.transform import Rotation, Slerp

UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, 1.0])


def as_position(value: Any) -> np.ndarray:
    """
    Convert a sequence into a fresh 3-component float vector.

    Raises:
        ValueError: If the value does not have exactly 3 components
    """
    position = np.array(value, dtype=float).reshape(-1)
    if position.shape != (3,):
        raise ValueError(f"Position needs 3 components, got {position.shape[0]}")
    return position


def distance(start: np.ndarray, end: np.ndarray) -> float:
    """Straight-line distance between two positions."""
    return float(np.linalg.norm(end - start))


def lerp(start: np.ndarray, end: np.ndarray, progress: float) -> np.ndarray:
    """Linear interpolation between two positions."""
    return start + (end - start) * progress


def arc_offset(progress: float, height: float = 1.0) -> float:
    """
    Vertical offset of a hop at the given progress.

    Parabola through 0 at both ends, peaking at ``height`` at progress 0.5.
    """
    return height * (-4.0 * (progress - 0.5) ** 2 + 1.0)


def hop_position(
    start: np.ndarray,
    end: np.ndarray,
    progress: float,
    height: float = 1.0,
) -> np.ndarray:
    """Point along a hop: the straight lerp lifted by the arc offset."""
    return lerp(start, end, progress) + UP * arc_offset(progress, height)


def look_rotation(direction: np.ndarray) -> Rotation | None:
    """
    Yaw-only rotation that points +z along ``direction``.

    Returns None when the direction has no horizontal component.
    """
    dx, _, dz = direction
    if math.hypot(dx, dz) < 1e-9:
        return None
    return Rotation.from_euler("y", math.atan2(dx, dz))


def slerp_rotation(start: Rotation, end: Rotation, progress: float) -> Rotation:
    """Spherical interpolation between two rotations."""
    progress = max(0.0, min(1.0, progress))
    return Slerp([0.0, 1.0], Rotation.concatenate([start, end]))(progress)


@dataclass
class Transform:
    """Mutable pose of an agent in the world."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: Rotation = field(default_factory=Rotation.identity)

    def __post_init__(self) -> None:
        self.position = as_position(self.position)

    @property
    def forward(self) -> np.ndarray:
        """Unit vector the agent is facing."""
        return self.rotation.apply(FORWARD)

    @property
    def yaw_degrees(self) -> float:
        """Heading around the up axis, in degrees."""
        return float(self.rotation.as_euler("yxz", degrees=True)[0])

    def get_state(self) -> dict[str, Any]:
        return {
            "position": [round(float(c), 3) for c in self.position],
            "yaw": round(self.yaw_degrees, 1),
        }
