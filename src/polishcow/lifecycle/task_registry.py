"""
Task Registry
-------------

Every long-running or fire-and-forget task goes through
`create_tracked_task()`, so that:
- failures are logged even when nobody awaits the task
- the ShutdownCoordinator can find critical tasks by category
- shutdown can cancel whatever is still pending
"""

from __future__ import annotations

import asyncio
import itertools
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional

from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


class TaskCategory(Enum):
    """What a tracked task is for."""
    RENDER = auto()      # Animation tick loop
    FRAMES = auto()      # Frame set builds requested by resize handling
    AUDIO = auto()       # Audio restart loop
    TERMINAL = auto()    # Terminal geometry watcher
    EVENTBUS = auto()    # Event publication from signal handlers
    BACKGROUND = auto()


@dataclass(frozen=True)
class TaskInfo:
    id: int
    category: TaskCategory
    description: str
    started: float  # time.monotonic()


@dataclass
class TaskRecord:
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None


class TaskRegistry:
    """
    Process-wide registry of tracked tasks.

    Finished records beyond `history_limit` are dropped oldest-first, since
    every resize adds a publish task and a frame set request. Failed records
    are kept for the ShutdownCoordinator.
    """

    _instance: Optional["TaskRegistry"] = None

    def __init__(self, history_limit: int = 200) -> None:
        self._records: Dict[asyncio.Task, TaskRecord] = {}
        self._ids = itertools.count(1)
        self._history_limit = history_limit

    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the singleton; the next instance() call starts empty."""
        cls._instance = None

    def register(self, task: asyncio.Task, category: TaskCategory, description: str) -> TaskRecord:
        info = TaskInfo(next(self._ids), category, description, time.monotonic())
        record = self._records[task] = TaskRecord(task, info)
        task.add_done_callback(self._on_done)
        log.debug(f"[Task {info.id}] {category.name}: {description}")
        return record

    def record_for(self, task: asyncio.Task) -> Optional[TaskRecord]:
        return self._records.get(task)

    def _on_done(self, task: asyncio.Task) -> None:
        record = self._records.get(task)
        if record is None:
            return

        if task.cancelled():
            record.cancelled = True
        elif task.exception() is not None:
            record.finished_with_error = task.exception()
            log.error(
                f"[Task {record.info.id}] FAILED: {record.info.description}",
                error=str(record.finished_with_error),
                error_type=type(record.finished_with_error).__name__,
                ran_for=f"{time.monotonic() - record.info.started:.2f}s",
            )

        finished = [t for t, r in self._records.items() if t.done() and r.finished_with_error is None]
        for stale in finished[:max(0, len(finished) - self._history_limit)]:
            del self._records[stale]

    # === Queries ===

    def active(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if not r.task.done()]

    def failed(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.finished_with_error is not None]

    def cancelled(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.cancelled]

    def summary(self) -> str:
        return (
            f"Tasks: total={len(self._records)}, running={len(self.active())}, "
            f"failed={len(self.failed())}, cancelled={len(self.cancelled())}"
        )

    def get_tasks_for_shutdown(self, exclude: Optional[Iterable[asyncio.Task]] = None) -> List[asyncio.Task]:
        """Unfinished tracked tasks, minus `exclude`."""
        skip = set(exclude or ())
        tasks = [r.task for r in self.active() if r.task not in skip]
        log.debug(f"Shutdown: {len(tasks)} tasks to cancel")
        return tasks


def create_tracked_task(coro, *, category: TaskCategory, description: str) -> asyncio.Task:
    """Create a task named `description` and register it."""
    task = asyncio.get_running_loop().create_task(coro, name=description)
    TaskRegistry.instance().register(task, category, description)
    return task
