"""
Graceful shutdown.

The process runs until SIGINT/SIGTERM, request_shutdown(), or the failure of
a task in a critical category. Then every registered handler runs once,
highest `shutdown_priority` first, each under its own timeout.
"""

import asyncio
import signal
from typing import FrozenSet, List, Optional

from polishcow.lifecycle.shutdown_protocol import IShutdownHandler
from polishcow.lifecycle.task_registry import TaskCategory, TaskRecord, TaskRegistry
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)

_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownCoordinator:
    """
    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(AudioShutdownHandler(audio_driver))
        coordinator.register(TaskCancellationHandler([render_task, audio_task]))
        coordinator.register(TerminalShutdownHandler(terminal, loop))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()

        if coordinator.failure is not None:
            ...  # report and exit 1
    """

    CRITICAL_CATEGORIES: FrozenSet[TaskCategory] = frozenset({
        TaskCategory.RENDER,
        TaskCategory.FRAMES,    # fails only under the fatal conversion policy
        TaskCategory.AUDIO,
        TaskCategory.TERMINAL,
    })

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0, poll_interval: float = 0.2):
        self._handlers: List[IShutdownHandler] = []
        self._event: Optional[asyncio.Event] = None
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self._poll_interval = poll_interval
        self.reason: Optional[str] = None
        self.failure: Optional[BaseException] = None

    def register(self, handler: IShutdownHandler) -> None:
        if not hasattr(handler, "shutdown_priority") or not hasattr(handler, "shutdown"):
            raise ValueError(f"{handler!r} is not a shutdown handler (needs shutdown_priority and shutdown())")
        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {type(handler).__name__}")

    # === Triggers ===

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """
        Route SIGINT and SIGTERM to request_shutdown(). Where the loop cannot
        install signal handlers (Windows) signal.signal is used and the
        request hops back onto the loop thread.
        """
        self._event = asyncio.Event()

        for sig in _SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_shutdown, sig.name)
            except NotImplementedError:
                signal.signal(sig, lambda signum, _frame: loop.call_soon_threadsafe(
                    self.request_shutdown, signal.Signals(signum).name
                ))

        log.debug("Signal handlers installed (SIGINT, SIGTERM)")

    def remove_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Give SIGINT/SIGTERM back to their default behavior."""
        for sig in _SIGNALS:
            try:
                loop.remove_signal_handler(sig)
            except NotImplementedError:
                signal.signal(sig, signal.default_int_handler if sig is signal.SIGINT else signal.SIG_DFL)

    def request_shutdown(self, reason: str) -> None:
        if self._event is None:
            raise RuntimeError("Call setup_signal_handlers() first")
        if self.reason is None:
            self.reason = reason
        log.info(f"Shutdown requested: {reason}")
        self._event.set()

    # === Waiting ===

    def _failed_critical(self) -> Optional[TaskRecord]:
        for record in TaskRegistry.instance().failed():
            if record.info.category in self.CRITICAL_CATEGORIES:
                return record
        return None

    async def wait_for_shutdown(self) -> None:
        """
        Return once shutdown was requested or a critical task failed.

        Critical tasks created while waiting (frame set requests after a
        resize) are picked up every `poll_interval`.
        """
        if self._event is None:
            raise RuntimeError("Call setup_signal_handlers() first")

        waiter = asyncio.ensure_future(self._event.wait())
        try:
            while not waiter.done():
                failed = self._failed_critical()
                if failed is not None:
                    self.reason = f"Task failure: {failed.info.description}"
                    self.failure = failed.finished_with_error
                    log.error(
                        f"Critical task failed: {failed.info.description}",
                        category=failed.info.category.name,
                        error=str(self.failure),
                    )
                    return

                critical = [
                    r.task for r in TaskRegistry.instance().active()
                    if r.info.category in self.CRITICAL_CATEGORIES
                ]
                await asyncio.wait(
                    [waiter, *critical],
                    timeout=self._poll_interval,
                    return_when=asyncio.FIRST_COMPLETED,
                )
        finally:
            waiter.cancel()

    # === Teardown ===

    async def shutdown_all(self) -> None:
        """Run every handler, highest priority first. A failing or slow handler does not stop the rest."""
        log.info("Shutting down...", reason=self.reason or "UNKNOWN")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._total_timeout

        for handler in sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True):
            name = type(handler).__name__
            if loop.time() > deadline:
                log.error(f"Shutdown took longer than {self._total_timeout}s, skipping {name} and the rest")
                break

            try:
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"✓ {name}")
            except asyncio.TimeoutError:
                log.error(f"{name} did not finish within {self._timeout_per_handler}s")
            except Exception as e:
                log.error(f"{name} failed", error=str(e))

        log.info("✓ Shutdown sequence complete")
