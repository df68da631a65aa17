"""
Event system for Polish Cow

Terminal device events and playback state notifications.
"""

from polishcow.models.events.types import EventType
from polishcow.models.events.base import Event
from polishcow.models.events.sources import EventSource

from polishcow.models.events.terminal_events import (
    TerminalResizeEvent,
    PlaybackPausedEvent,
    PlaybackResumedEvent,
)

__all__ = [
    "EventType",
    "Event",
    "EventSource",
    "TerminalResizeEvent",
    "PlaybackPausedEvent",
    "PlaybackResumedEvent",
]
