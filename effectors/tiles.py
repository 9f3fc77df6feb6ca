"""
Critters - Tile Environment
Rectangular play area made of hidden ground tiles that agents uncover.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from shared.constants import BOUNDS_MAX, BOUNDS_MIN, REVEAL_RADIUS

from .base import Environment

logger = logging.getLogger(__name__)


class TileEnvironment(Environment):
    """
    Flat play area on the x/z plane covered by a grid of tiles.

    Tiles start hidden. Revealing a point uncovers every tile whose center
    lies within ``reveal_radius`` of it; revealing a path uncovers every
    tile within that radius of the segment. Valid points are clamped into
    the rectangular bounds at ground height.
    """

    def __init__(
        self,
        bounds_min: tuple[float, float] = BOUNDS_MIN,
        bounds_max: tuple[float, float] = BOUNDS_MAX,
        reveal_radius: float = REVEAL_RADIUS,
        tile_size: float = 1.0,
        ground_y: float = 0.0,
    ) -> None:
        """
        Initialize the environment.

        Args:
            bounds_min: Minimum (x, z) corner of the play area
            bounds_max: Maximum (x, z) corner of the play area
            reveal_radius: Tiles within this distance are revealed
            tile_size: Edge length of one tile
            ground_y: Height of the ground plane
        """
        self._min = np.array(bounds_min, dtype=float)
        self._max = np.array(bounds_max, dtype=float)
        if np.any(self._max <= self._min):
            raise ValueError(f"Invalid bounds: min={bounds_min}, max={bounds_max}")
        if tile_size <= 0:
            raise ValueError("tile_size must be positive")

        self._reveal_radius = reveal_radius
        self._ground_y = ground_y

        # Tile centers as an (N, 2) array of x/z coordinates
        xs = np.arange(self._min[0] + tile_size / 2, self._max[0], tile_size)
        zs = np.arange(self._min[1] + tile_size / 2, self._max[1], tile_size)
        grid_x, grid_z = np.meshgrid(xs, zs, indexing="ij")
        self._centers = np.column_stack([grid_x.ravel(), grid_z.ravel()])
        self._revealed = np.zeros(len(self._centers), dtype=bool)

        logger.debug(f"TileEnvironment initialized with {len(self._centers)} tiles")

    @property
    def tile_count(self) -> int:
        return len(self._centers)

    @property
    def revealed_count(self) -> int:
        return int(self._revealed.sum())

    @property
    def revealed_fraction(self) -> float:
        return self.revealed_count / self.tile_count if self.tile_count else 0.0

    def reveal_point(self, position: np.ndarray) -> None:
        offsets = self._centers - np.array([position[0], position[2]])
        self._reveal(np.linalg.norm(offsets, axis=1) <= self._reveal_radius)

    def reveal_path(self, start: np.ndarray, end: np.ndarray) -> None:
        a = np.array([start[0], start[2]])
        b = np.array([end[0], end[2]])
        segment = b - a
        length_sq = float(segment @ segment)

        if length_sq < 1e-12:
            self.reveal_point(start)
            return

        # Project every tile center onto the segment, clamped to its ends
        t = np.clip((self._centers - a) @ segment / length_sq, 0.0, 1.0)
        closest = a + t[:, None] * segment
        self._reveal(np.linalg.norm(self._centers - closest, axis=1) <= self._reveal_radius)

    def closest_valid_point(self, position: np.ndarray) -> np.ndarray:
        x = float(np.clip(position[0], self._min[0], self._max[0]))
        z = float(np.clip(position[2], self._min[1], self._max[1]))
        return np.array([x, self._ground_y, z])

    def is_revealed(self, position: np.ndarray) -> bool:
        """Check whether the tile under a position has been revealed."""
        offsets = self._centers - np.array([position[0], position[2]])
        return bool(self._revealed[int(np.argmin(np.linalg.norm(offsets, axis=1)))])

    def _reveal(self, mask: np.ndarray) -> None:
        newly_revealed = mask & ~self._revealed
        count = int(newly_revealed.sum())
        if count:
            self._revealed |= newly_revealed
            logger.debug(f"Revealed {count} tiles ({self.revealed_count}/{self.tile_count})")

    def get_state(self) -> dict[str, Any]:
        """Get serializable state for debugging."""
        return {
            "bounds_min": self._min.tolist(),
            "bounds_max": self._max.tolist(),
            "tiles": self.tile_count,
            "revealed": self.revealed_count,
        }
