import asyncio
from typing import List, Optional

from polishcow.lifecycle.handlers.task_cancellation_handler import cancel_and_wait
from polishcow.lifecycle.shutdown_protocol import IShutdownHandler
from polishcow.lifecycle.task_registry import TaskRegistry
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class PendingTasksCancellationHandler(IShutdownHandler):
    """
    Cancels every tracked task still running (frame set requests, event
    publications) except the shutdown task itself and `exclude_tasks`.

    Priority: 30
    """

    shutdown_priority = 30

    def __init__(self, exclude_tasks: Optional[List[asyncio.Task]] = None):
        self.exclude_tasks = exclude_tasks or []

    async def shutdown(self) -> None:
        exclude = [asyncio.current_task(), *self.exclude_tasks]
        count = await cancel_and_wait(TaskRegistry.instance().get_tasks_for_shutdown(exclude=exclude))
        if count:
            log.info(f"Cancelled {count} pending tracked tasks")
        else:
            log.debug("No pending tracked tasks")
