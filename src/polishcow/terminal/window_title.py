"""
Window title helpers

POSIX terminals take an OSC 2 escape sequence (see "OSC control sequences" in
console_codes(4)); the Windows console exposes SetConsoleTitleW instead.
"""

import sys
from typing import Optional, TextIO

from polishcow.models.frame import TerminalGeometry


def format_window_title(name: str, author: str, geometry: Optional[TerminalGeometry] = None) -> str:
    """
    Build the title bar text.

    Example:
        >>> format_window_title("Polish Cow", "Sv443", TerminalGeometry(120, 40))
        'Polish Cow - Sv443 - 120x40'
    """
    parts = [name, author]
    if geometry is not None:
        parts.append(str(geometry))
    return " - ".join(p for p in parts if p)


def set_window_title(title: str, stream: TextIO, platform: str = sys.platform) -> None:
    """Assign the terminal window title."""
    if platform != "win32":
        stream.write(f"\x1b]2;{title}\x1b\\")
        stream.flush()
        return

    import ctypes
    ctypes.windll.kernel32.SetConsoleTitleW(title)
