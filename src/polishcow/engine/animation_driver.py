"""
AnimationDriver - fixed-tick render loop over the cached frame set.

Each tick does exactly one of:
  - PAUSED:   render the size / aspect warning, cursor unchanged
  - RENDERED: render frame_set[sequence[cursor]], advance cursor (wraps to 0)
  - WAITING:  frame set for the current resolution not built yet, do nothing
"""

from __future__ import annotations

import asyncio
from typing import Dict, Optional, Tuple

from polishcow.engine.frame_set_cache import FrameSetCache
from polishcow.lifecycle.task_registry import create_tracked_task, TaskCategory
from polishcow.models.enums import OutputFormat, PauseReason, TickOutcome
from polishcow.models.events import PlaybackPausedEvent, PlaybackResumedEvent
from polishcow.models.frame import TerminalGeometry
from polishcow.models.session import PlaybackSession
from polishcow.terminal.terminal_device import TerminalDevice
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ANIMATION)

BOLD_RED = "\x1b[31m\x1b[1m"
RESET = "\x1b[0m"


def pause_warning(
    reason: PauseReason,
    min_size: Tuple[int, int],
    min_aspect_ratio: float,
    geometry: Optional[TerminalGeometry],
) -> str:
    """Text shown instead of the animation while playback is paused."""
    current = str(geometry) if geometry else "unknown"

    if reason is PauseReason.ASPECT_RATIO:
        ratio = f"{geometry.aspect_ratio:.2f}:1" if geometry else "unknown"
        return (
            f"{BOLD_RED}Window aspect ratio too narrow!{RESET}\n\n"
            f"Expected: at least {min_aspect_ratio:.2f}:1\n"
            f"Current:  {ratio} ({current})"
        )

    return (
        f"{BOLD_RED}Window size too small!{RESET}\n\n"
        f"Expected: {min_size[0]}x{min_size[1]}\n"
        f"Current:  {current}"
    )


class AnimationDriver:
    """
    Walks the animation sequence at a fixed interval.

    The driver never starts builds; it only polls `cache.peek()` for the
    session's current resolution, so a resize never blocks a tick.

    Example:
        driver = AnimationDriver(session, cache, terminal, interval=0.2)
        driver.start()
        ...
        await driver.stop()
    """

    def __init__(
        self,
        session: PlaybackSession,
        cache: FrameSetCache,
        terminal: TerminalDevice,
        interval: float = 0.2,
        min_size: Tuple[int, int] = (80, 30),
        min_aspect_ratio: float = 2.5,
        output_format: OutputFormat = OutputFormat.TRUECOLOR,
        debug: bool = False,
    ):
        if interval <= 0:
            raise ValueError("Animation interval must be positive")

        self.session = session
        self.cache = cache
        self.terminal = terminal
        self.interval = interval
        self.min_size = min_size
        self.min_aspect_ratio = min_aspect_ratio
        self.output_format = output_format
        self.debug = debug

        self.running = False
        self.render_task: Optional[asyncio.Task] = None

        # Metrics
        self.frames_rendered = 0
        self.ticks_paused = 0
        self.ticks_waiting = 0
        self.late_ticks = 0

    # === Single tick ===

    def tick(self) -> TickOutcome:
        session = self.session
        session.ticks += 1

        if session.paused:
            self.render_warning()
            self.ticks_paused += 1
            return TickOutcome.PAUSED

        frame_set = self.cache.peek(session.resolution) if session.resolution else None
        if frame_set is None:
            self.ticks_waiting += 1
            return TickOutcome.WAITING

        frame_index = session.current_frame_index()
        grid = frame_set[frame_index]

        header = ""
        if self.debug:
            sequence = " ".join(str(i) for i in session.sequence)
            header = f"Displaying frame #{frame_index} (Sequence: {sequence})\n"

        self.terminal.show(f"{header}\n\n{grid.render(self.output_format)}\n")
        session.advance()
        self.frames_rendered += 1
        return TickOutcome.RENDERED

    def render_warning(self) -> None:
        """Render the pause warning for the current pause reason (no-op when running)."""
        reason = self.session.pause_reason
        if reason is None:
            return
        self.terminal.show(
            pause_warning(reason, self.min_size, self.min_aspect_ratio, self.session.geometry)
        )

    async def on_playback_paused(self, event: PlaybackPausedEvent) -> None:
        """EventBus handler for PLAYBACK_PAUSED: show the warning without waiting for a tick."""
        self.render_warning()

    async def on_playback_resumed(self, event: PlaybackResumedEvent) -> None:
        # The next frame may still be building; do not leave the warning up
        self.terminal.clear()

    # === Loop ===

    async def run(self) -> None:
        """
        Tick forever, first tick immediately.

        Deadlines are computed from the loop clock so slow ticks do not push
        the schedule back; if a tick overruns a whole interval the missed
        deadlines are dropped instead of replayed in a burst.
        """
        loop = asyncio.get_running_loop()
        next_deadline = loop.time()

        log.info(f"Animation loop @ {self.interval * 1000:.0f}ms per tick")

        while True:
            self.tick()

            next_deadline += self.interval
            delay = next_deadline - loop.time()
            if delay < 0:
                self.late_ticks += 1
                next_deadline = loop.time()
                delay = 0
            await asyncio.sleep(delay)

    def start(self) -> asyncio.Task:
        """Start the render loop as a tracked RENDER task."""
        if self.running and self.render_task:
            log.warn("AnimationDriver already running")
            return self.render_task

        self.running = True
        self.render_task = create_tracked_task(
            self.run(),
            category=TaskCategory.RENDER,
            description="Animation render loop",
        )
        return self.render_task

    async def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        if self.render_task:
            self.render_task.cancel()
            try:
                await self.render_task
            except asyncio.CancelledError:
                pass

        log.info("AnimationDriver stopped", **self.get_metrics())

    # === Metrics ===

    def get_metrics(self) -> Dict[str, int]:
        return {
            "ticks": self.session.ticks,
            "frames_rendered": self.frames_rendered,
            "ticks_paused": self.ticks_paused,
            "ticks_waiting": self.ticks_waiting,
            "late_ticks": self.late_ticks,
        }
