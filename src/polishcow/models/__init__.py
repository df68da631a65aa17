"""
Domain models: frames, session state, configuration, errors, events
"""

from .config import AppConfig, AsciiOptions
from .errors import PolishCowError, ConfigError, ConversionError, PlaybackError
from .frame import Cell, FrameGrid, FrameSet, ResolutionKey, TerminalGeometry
from .session import PlaybackSession

__all__ = [
    "AppConfig",
    "AsciiOptions",
    "PolishCowError",
    "ConfigError",
    "ConversionError",
    "PlaybackError",
    "Cell",
    "FrameGrid",
    "FrameSet",
    "ResolutionKey",
    "TerminalGeometry",
    "PlaybackSession",
]
