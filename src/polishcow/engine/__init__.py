"""
Playback engine: frame discovery, ASCII conversion, caching and the tick loop
"""

from .ascii_converter import AsciiConverter
from .frame_source import FrameSource, FRAME_EXTENSIONS, is_frame_file
from .frame_set_cache import FrameSetCache, resolution_for
from .animation_driver import AnimationDriver, pause_warning

__all__ = [
    "AsciiConverter",
    "FrameSource",
    "FRAME_EXTENSIONS",
    "is_frame_file",
    "FrameSetCache",
    "resolution_for",
    "AnimationDriver",
    "pause_warning",
]
