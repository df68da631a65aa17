"""
Terminal device layer
"""

from .terminal_device import TerminalDevice
from .window_title import format_window_title, set_window_title

__all__ = [
    "TerminalDevice",
    "format_window_title",
    "set_window_title",
]
