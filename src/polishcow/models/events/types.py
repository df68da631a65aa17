from enum import Enum, auto


class EventType(Enum):
    # Terminal device
    TERMINAL_RESIZE = auto()

    # Playback
    PLAYBACK_PAUSED = auto()
    PLAYBACK_RESUMED = auto()
