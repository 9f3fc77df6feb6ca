"""
Critters - Creatures
Agents built on the engine: creatures, their states and movement, fruit trees.
"""

from .config import CreatureConfig
from .creature import Creature
from .fruit_tree import FruitTree, LadenState, RespawnFruitState
from .movement import HopMover, MoveResult
from .states import CreatureHungryState, CreatureIdleState, CreatureMoveState, EggState

__all__ = [
    "CreatureConfig",
    "Creature",
    "FruitTree",
    "LadenState",
    "RespawnFruitState",
    "HopMover",
    "MoveResult",
    "CreatureHungryState",
    "CreatureIdleState",
    "CreatureMoveState",
    "EggState",
]
