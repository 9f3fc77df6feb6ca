"""
Critters - Effector Base Classes
Abstract interfaces for the collaborators the behavior core calls into.
"""

from abc import ABC, abstractmethod

import numpy as np


class Environment(ABC):
    """
    The world terrain as seen by agents.

    Agents reveal the ground they walk over and ask for valid
    destinations. Implementations own whatever rendering or physics sits
    behind these calls.
    """

    @abstractmethod
    def reveal_point(self, position: np.ndarray) -> None:
        """
        Reveal the terrain around a point.

        Args:
            position: World position to reveal around
        """
        pass

    @abstractmethod
    def reveal_path(self, start: np.ndarray, end: np.ndarray) -> None:
        """
        Reveal the terrain along a straight path.

        Args:
            start: Path start position
            end: Path end position
        """
        pass

    @abstractmethod
    def closest_valid_point(self, position: np.ndarray) -> np.ndarray:
        """
        Get the nearest position an agent may stand on.

        Args:
            position: Desired position

        Returns:
            A valid position, equal to the input if it is already valid
        """
        pass


class Presentation(ABC):
    """
    Visual and audio side of the game.

    Fire-and-forget: no return values and no error channel.
    """

    @abstractmethod
    def set_visible(self, object_id: str, visible: bool) -> None:
        """
        Show or hide a presentation object.

        Args:
            object_id: Object identifier (e.g. "egg", "hungry_icon")
            visible: True to show, False to hide
        """
        pass

    @abstractmethod
    def play_cue(self, cue_name: str) -> None:
        """
        Play a named audio/visual cue.

        Args:
            cue_name: Cue identifier (e.g. "hatch", "bell_heard")
        """
        pass
