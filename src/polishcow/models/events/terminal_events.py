"""Terminal and playback events"""

from dataclasses import dataclass
from typing import Optional

from polishcow.models.enums import PauseReason
from polishcow.models.events.base import Event
from polishcow.models.events.types import EventType
from polishcow.models.events.sources import EventSource
from polishcow.models.frame import TerminalGeometry


@dataclass(init=False)
class TerminalResizeEvent(Event):
    """Terminal geometry changed"""
    geometry: TerminalGeometry

    def __init__(self, geometry: TerminalGeometry):
        super().__init__(
            type=EventType.TERMINAL_RESIZE,
            source=EventSource.TERMINAL,
        )
        self.geometry = geometry


@dataclass(init=False)
class PlaybackPausedEvent(Event):
    """Size or aspect-ratio gate failed"""
    reason: PauseReason
    geometry: Optional[TerminalGeometry]

    def __init__(self, reason: PauseReason, geometry: Optional[TerminalGeometry]):
        super().__init__(
            type=EventType.PLAYBACK_PAUSED,
            source=EventSource.RESIZE_COORDINATOR,
        )
        self.reason = reason
        self.geometry = geometry


@dataclass(init=False)
class PlaybackResumedEvent(Event):
    """Gates pass again after a pause"""
    geometry: TerminalGeometry

    def __init__(self, geometry: TerminalGeometry):
        super().__init__(
            type=EventType.PLAYBACK_RESUMED,
            source=EventSource.RESIZE_COORDINATOR,
        )
        self.geometry = geometry
