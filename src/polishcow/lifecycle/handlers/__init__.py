from .audio_shutdown_handler import AudioShutdownHandler
from .pending_tasks_cancellation_handler import PendingTasksCancellationHandler
from .task_cancellation_handler import TaskCancellationHandler
from .terminal_shutdown_handler import TerminalShutdownHandler

__all__ = [
    "AudioShutdownHandler",
    "PendingTasksCancellationHandler",
    "TaskCancellationHandler",
    "TerminalShutdownHandler",
]
