"""
Critters - Hop Movement
Moves an agent to a target as a series of fixed-length, arced hops.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

import numpy as np

from effectors.base import Environment
from engine.scheduler import TickScheduler
from shared.geometry import Transform, as_position, hop_position, look_rotation, slerp_rotation

from .config import CreatureConfig

logger = logging.getLogger(__name__)

# Tolerance for distances that should be exact multiples of the step
DISTANCE_EPSILON = 1e-6


@dataclass
class MoveResult:
    """
    Outcome of one move.

    Attributes:
        hops: Full-length hops completed
        partial_hop: Whether the final shorter hop ran
        interrupted: Whether the interrupt check cut the move short
        position: Where the agent ended up
        cancelled: Whether the scheduler was closed mid-move
    """

    hops: int
    partial_hop: bool
    interrupted: bool
    position: np.ndarray
    cancelled: bool = False

    @property
    def completed(self) -> bool:
        return not (self.interrupted or self.cancelled)


class HopMover:
    """
    Segment-wise movement with interrupt checks between hops.

    A move first turns to face the target, then covers the distance in
    ``floor(distance / step_distance)`` full hops followed by one shorter
    hop for the remainder. The interrupt predicate is checked before each
    hop starts and never during one, so the reaction latency is bounded by
    one hop. The turn is never interrupted.

    Every hop reveals the ground along its path, follows a parabolic arc
    and snaps to its exact end point when done. Closing the scheduler ends
    the move where it stands, with no snapping and no further reveals.
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        environment: Environment,
        config: CreatureConfig | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._environment = environment
        self._config = config or CreatureConfig()

    async def move_to(
        self,
        transform: Transform,
        target: np.ndarray,
        should_interrupt: Callable[[], bool],
    ) -> MoveResult:
        """
        Turn toward the target, then hop to it.

        Args:
            transform: Pose of the moving agent, updated in place
            target: Destination position
            should_interrupt: Checked before each hop; True aborts the move

        Returns:
            MoveResult describing what happened
        """
        target = as_position(target)
        if not await self.rotate_to(transform, target):
            return MoveResult(0, False, False, transform.position.copy(), cancelled=True)
        return await self.translate_to(transform, target, should_interrupt)

    async def rotate_to(self, transform: Transform, target: np.ndarray) -> bool:
        """
        Turn in place to face the target.

        Returns:
            False if the scheduler was closed before the turn finished
        """
        end = look_rotation(target - transform.position)
        if end is None:
            return True

        start = transform.rotation

        def apply(progress: float) -> None:
            transform.rotation = slerp_rotation(start, end, progress)

        return await self._scheduler.run_timed(self._config.rotation_ms, apply)

    async def translate_to(
        self,
        transform: Transform,
        target: np.ndarray,
        should_interrupt: Callable[[], bool],
    ) -> MoveResult:
        """Hop to the target without turning first."""
        step = self._config.step_distance
        origin = transform.position.copy()
        to_target = target - origin
        total = float(np.linalg.norm(to_target))

        full_hops = int(math.floor(total / step + DISTANCE_EPSILON))
        has_partial = total - full_hops * step > DISTANCE_EPSILON
        direction = to_target / total if total > 0 else np.zeros(3)

        hops = 0
        for i in range(full_hops):
            if should_interrupt():
                logger.debug(f"Move interrupted after {hops}/{full_hops} hops")
                return MoveResult(hops, False, True, transform.position.copy())

            # Measured from the origin, not from the previous end
            segment_end = origin + direction * (step * (i + 1))
            if not await self._hop(transform, transform.position.copy(), segment_end):
                return self._cancelled(hops, transform)
            hops += 1

            if i < full_hops - 1 or has_partial:
                if not await self._scheduler.wait(self._config.pause_ms):
                    return self._cancelled(hops, transform)

        if has_partial:
            if should_interrupt():
                logger.debug(f"Move interrupted before the final hop ({hops} hops done)")
                return MoveResult(hops, False, True, transform.position.copy())
            if not await self._hop(transform, transform.position.copy(), target):
                return self._cancelled(hops, transform)

        return MoveResult(hops, has_partial, False, transform.position.copy())

    def _cancelled(self, hops: int, transform: Transform) -> MoveResult:
        logger.debug(f"Move cancelled by teardown after {hops} hops")
        return MoveResult(hops, False, False, transform.position.copy(), cancelled=True)

    async def _hop(self, transform: Transform, start: np.ndarray, end: np.ndarray) -> bool:
        """Run one hop; False if the scheduler closed before it landed."""
        if self._scheduler.is_closed:
            return False

        self._environment.reveal_path(start, end)

        height = self._config.hop_height

        def apply(progress: float) -> None:
            transform.position = hop_position(start, end, progress, height)

        if not await self._scheduler.run_timed(self._config.hop_ms, apply):
            return False

        transform.position = end.copy()
        return True
