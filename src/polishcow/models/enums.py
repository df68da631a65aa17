"""
Enums for the Polish Cow playback engine
"""

from enum import Enum, auto


class LogLevel(Enum):
    """Log levels for filtering"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    TERMINAL = auto()    # Terminal device: geometry, cursor, title
    FRAMES = auto()      # Frame discovery and conversion
    CACHE = auto()       # Frame set cache hits, builds, evictions
    ANIMATION = auto()   # Animation ticks, pause/resume
    AUDIO = auto()       # Audio loop scheduling
    RESIZE = auto()      # Resize handling and gates
    EVENT = auto()       # Event bus events and handling
    SYSTEM = auto()      # Startup, shutdown, errors

    SHUTDOWN = auto()
    TASK = auto()
    TOOLS = auto()


class PauseReason(Enum):
    """Why the animation is currently paused"""
    TOO_SMALL = auto()      # Below configured minimum columns/rows
    ASPECT_RATIO = auto()   # columns / rows below configured minimum


class TickOutcome(Enum):
    """What a single animation tick did"""
    RENDERED = auto()   # Frame rendered, cursor advanced
    PAUSED = auto()     # Warning rendered, cursor unchanged
    WAITING = auto()    # Frame set still building, nothing rendered


class AudioLoopState(Enum):
    """Audio loop state machine"""
    IDLE = auto()          # Not started yet / stopped
    PLAYING = auto()       # Clip started, restart timer armed
    RESTART_DUE = auto()   # Restart timer fired, clip about to start again


class FitMode(Enum):
    """How a source image is scaled into the target cell box"""
    BOX = auto()       # Fit inside width x height, keep aspect ratio
    WIDTH = auto()     # Use full width, height follows aspect ratio (clamped)
    HEIGHT = auto()    # Use full height, width follows aspect ratio (clamped)
    STRETCH = auto()   # Fill width x height exactly


class OutputFormat(Enum):
    """Escape sequence flavour used when rendering colored cells"""
    TRUECOLOR = auto()  # 24-bit SGR 38;2;r;g;b
    ANSI256 = auto()    # 256-color SGR 38;5;n
    PLAIN = auto()      # Characters only


class ConversionFailurePolicy(Enum):
    """What happens when a single frame fails to convert"""
    FATAL = auto()     # Abort build and terminate the process
    DISCARD = auto()   # Abort build, log, allow a fresh build later
