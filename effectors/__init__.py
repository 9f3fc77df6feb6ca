"""
Critters - Effectors
Environment and presentation interfaces plus in-process implementations.
"""

from .base import Environment, Presentation
from .presentation import LoggingPresentation, ScopedPresentation
from .tiles import TileEnvironment

__all__ = [
    "Environment",
    "Presentation",
    "LoggingPresentation",
    "ScopedPresentation",
    "TileEnvironment",
]
