"""
Terminal shutdown handler.

Runs last: stops resize notification, clears attributes and shows the cursor
again so the shell is usable after exit.
"""

from __future__ import annotations

import asyncio

from polishcow.lifecycle.shutdown_protocol import IShutdownHandler
from polishcow.terminal.terminal_device import TerminalDevice
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class TerminalShutdownHandler(IShutdownHandler):

    def __init__(self, terminal: TerminalDevice, loop: asyncio.AbstractEventLoop):
        self.terminal = terminal
        self.loop = loop

    @property
    def shutdown_priority(self) -> int:
        return 10  # Shutdown last

    async def shutdown(self) -> None:
        self.terminal.unwatch_resize(self.loop)
        self.terminal.restore()
        log.debug("Terminal restored")
