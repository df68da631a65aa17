"""
TerminalDevice - the output terminal as seen by the playback engine

Responsible for:
- reporting geometry (columns x rows) and interactivity
- resize notification (SIGWINCH where available, polling elsewhere)
- cursor visibility, screen clear, window title
- writing whole frames in one write call to limit flicker
"""

import asyncio
import os
import shutil
import signal
import sys
from typing import Callable, Optional, TextIO

from polishcow.lifecycle.task_registry import create_tracked_task, TaskCategory
from polishcow.models.frame import TerminalGeometry
from polishcow.terminal.window_title import set_window_title
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TERMINAL)

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[2J\x1b[3J\x1b[H"
RESET_ATTRIBUTES = "\x1b[0m"

ResizeCallback = Callable[[TerminalGeometry], None]


class TerminalDevice:
    """
    Thin wrapper around an output stream that is (hopefully) a TTY.

    Example:
        terminal = TerminalDevice(sys.stdout)
        if not terminal.is_interactive():
            raise ConfigError("Output is not a terminal")

        terminal.hide_cursor()
        terminal.watch_resize(loop, on_geometry)
        terminal.show("frame text")
    """

    def __init__(self, stream: Optional[TextIO] = None, poll_interval: float = 0.5, fallback=(80, 24)):
        self.stream = stream or sys.stdout
        self.poll_interval = poll_interval
        self.fallback = fallback
        self._watch_task: Optional[asyncio.Task] = None
        self._sigwinch_installed = False

    # === Queries ===

    def is_interactive(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def geometry(self) -> TerminalGeometry:
        """Current size of the terminal attached to the stream."""
        try:
            size = os.get_terminal_size(self.stream.fileno())
        except (AttributeError, ValueError, OSError):
            size = shutil.get_terminal_size(fallback=self.fallback)
        return TerminalGeometry(size.columns, size.lines)

    # === Output ===

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)

    def clear(self) -> None:
        self.write(CLEAR_SCREEN)

    def show(self, text: str) -> None:
        """Clear the screen and write text in a single write."""
        self.write(f"{CLEAR_SCREEN}{text}")

    def set_title(self, title: str) -> None:
        set_window_title(title, self.stream)

    def restore(self) -> None:
        """Undo cursor/attribute changes (called on shutdown)."""
        self.write(f"{RESET_ATTRIBUTES}{SHOW_CURSOR}")

    # === Resize notification ===

    def watch_resize(self, loop: asyncio.AbstractEventLoop, callback: ResizeCallback) -> None:
        """
        Call `callback(geometry)` on the event loop whenever the terminal is resized.

        Uses SIGWINCH when the platform and loop support it, otherwise polls
        geometry every `poll_interval` seconds in a tracked task.
        """
        sigwinch = getattr(signal, "SIGWINCH", None)
        if sigwinch is not None:
            try:
                loop.add_signal_handler(sigwinch, lambda: callback(self.geometry()))
                self._sigwinch_installed = True
                log.debug("Resize notification via SIGWINCH")
                return
            except (NotImplementedError, RuntimeError) as e:
                log.debug("SIGWINCH unavailable, polling geometry", reason=str(e))

        self._watch_task = create_tracked_task(
            self._poll_geometry(callback),
            category=TaskCategory.TERMINAL,
            description="Terminal geometry watcher",
            loop=loop,
        )

    def unwatch_resize(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._sigwinch_installed:
            loop.remove_signal_handler(signal.SIGWINCH)
            self._sigwinch_installed = False
        if self._watch_task and not self._watch_task.done():
            self._watch_task.cancel()

    async def _poll_geometry(self, callback: ResizeCallback) -> None:
        last = self.geometry()
        while True:
            await asyncio.sleep(self.poll_interval)
            current = self.geometry()
            if current != last:
                last = current
                callback(current)
