from __future__ import annotations

import asyncio
from typing import Iterable, List

from polishcow.lifecycle.shutdown_protocol import IShutdownHandler
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


async def cancel_and_wait(tasks: Iterable[asyncio.Task]) -> int:
    """Cancel the unfinished tasks and wait until each has ended. Returns how many were cancelled."""
    pending = [t for t in tasks if not t.done()]
    for task in pending:
        task.cancel()
        log.debug(f"Cancelled task: {task.get_name()}")
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
    return len(pending)


class TaskCancellationHandler(IShutdownHandler):
    """
    Cancels the main loops (render, audio) after audio is stopped and
    before the terminal is restored.

    Priority: 40
    """

    shutdown_priority = 40

    def __init__(self, tasks: List[asyncio.Task]):
        self.tasks = tasks

    async def shutdown(self) -> None:
        count = await cancel_and_wait(self.tasks)
        log.info(f"Cancelled {count} of {len(self.tasks)} tasks")
