"""
Critters - World
Game host that ticks creatures and trees against shared effectors.
"""

from .config import WorldConfig
from .game import GameWorld

__all__ = ["WorldConfig", "GameWorld"]
