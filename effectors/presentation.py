"""
Critters - Presentation Effectors
In-process presentation that records visibility flags and cues.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from .base import Presentation

logger = logging.getLogger(__name__)


class LoggingPresentation(Presentation):
    """
    Presentation without a renderer.

    Tracks which objects are visible and which cues were played, and logs
    every call. Used headless and in tests.
    """

    def __init__(self, max_history: int = 200) -> None:
        self._visibility: dict[str, bool] = {}
        self._cues: deque[str] = deque(maxlen=max_history)

    def set_visible(self, object_id: str, visible: bool) -> None:
        self._visibility[object_id] = visible
        logger.debug(f"{'Show' if visible else 'Hide'} {object_id}")

    def play_cue(self, cue_name: str) -> None:
        self._cues.append(cue_name)
        logger.debug(f"Play cue {cue_name}")

    def is_visible(self, object_id: str) -> bool:
        """Visibility of an object; objects never toggled count as hidden."""
        return self._visibility.get(object_id, False)

    @property
    def cue_history(self) -> list[str]:
        return list(self._cues)

    def get_state(self) -> dict[str, Any]:
        return {
            "visible": sorted(k for k, v in self._visibility.items() if v),
            "recent_cues": list(self._cues)[-10:],
        }


class ScopedPresentation(Presentation):
    """
    Prefixes object and cue ids with an owner id.

    Lets several agents share one presentation without their objects
    colliding, e.g. "creature-1a2b:hungry_icon".
    """

    def __init__(self, presentation: Presentation, owner_id: str) -> None:
        self._presentation = presentation
        self._owner_id = owner_id

    @property
    def owner_id(self) -> str:
        return self._owner_id

    def scoped(self, name: str) -> str:
        return f"{self._owner_id}:{name}"

    def set_visible(self, object_id: str, visible: bool) -> None:
        self._presentation.set_visible(self.scoped(object_id), visible)

    def play_cue(self, cue_name: str) -> None:
        self._presentation.play_cue(self.scoped(cue_name))
