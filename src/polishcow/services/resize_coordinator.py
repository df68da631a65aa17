"""Resize coordinator - gates terminal geometry and keeps the cache warm for it"""

from __future__ import annotations

import asyncio
from typing import Optional, Tuple

from polishcow.engine.frame_set_cache import FrameSetCache, resolution_for
from polishcow.models.enums import PauseReason
from polishcow.models.events import (
    PlaybackPausedEvent,
    PlaybackResumedEvent,
    TerminalResizeEvent,
)
from polishcow.models.frame import TerminalGeometry
from polishcow.models.session import PlaybackSession
from polishcow.services.event_bus import EventBus
from polishcow.terminal.terminal_device import TerminalDevice
from polishcow.terminal.window_title import format_window_title
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RESIZE)


class ResizeCoordinator:
    """
    Reacts to terminal geometry changes.

    For every new geometry:
    - hide the cursor again (some terminals show it after a resize)
    - size gate:   below min columns/rows   -> paused (TOO_SMALL), no build
    - aspect gate: columns / rows too small -> paused (ASPECT_RATIO), build anyway
    - otherwise clear the pause
    - pin and request the frame set for the new resolution (not awaited)
    - update the window title

    Pauses are announced with PLAYBACK_PAUSED (the driver renders the warning
    right away), returning to playback with PLAYBACK_RESUMED.
    """

    def __init__(
        self,
        session: PlaybackSession,
        cache: FrameSetCache,
        terminal: TerminalDevice,
        event_bus: EventBus,
        min_size: Tuple[int, int] = (80, 30),
        min_aspect_ratio: float = 2.5,
        padding: Tuple[int, int] = (0, 4),
        title_name: str = "Polish Cow",
        title_author: str = "Sv443",
    ):
        self.session = session
        self.cache = cache
        self.terminal = terminal
        self.event_bus = event_bus
        self.min_size = min_size
        self.min_aspect_ratio = min_aspect_ratio
        self.padding = padding
        self.title_name = title_name
        self.title_author = title_author

    def check_gates(self, geometry: TerminalGeometry) -> Optional[PauseReason]:
        """Pause reason for a geometry, or None when playback may run."""
        if geometry.columns < self.min_size[0] or geometry.rows < self.min_size[1]:
            return PauseReason.TOO_SMALL
        if geometry.aspect_ratio < self.min_aspect_ratio:
            return PauseReason.ASPECT_RATIO
        return None

    def apply_geometry(self, geometry: TerminalGeometry) -> Optional[asyncio.Task]:
        """
        Apply a geometry to the session. Used directly for the startup check,
        where the driver's first tick renders any warning.

        Returns the frame set request task, or None when the size gate failed.
        """
        session = self.session
        self.terminal.hide_cursor()

        reason = self.check_gates(geometry)
        session.geometry = geometry

        request = None
        if reason is not PauseReason.TOO_SMALL:
            session.resolution = resolution_for(geometry, self.padding)
            self.cache.pin(session.resolution)
            request = self.cache.request(session.resolution)

        if reason is None:
            session.resume()
        else:
            session.pause(reason)

        log.debug(
            f"Geometry {geometry}",
            aspect=f"{geometry.aspect_ratio:.2f}",
            paused=reason.name if reason else None,
            resolution=str(session.resolution) if session.resolution else None,
        )

        self.terminal.set_title(format_window_title(self.title_name, self.title_author, geometry))
        return request

    async def on_resize(self, event: TerminalResizeEvent) -> None:
        """EventBus handler for TERMINAL_RESIZE."""
        was_paused = self.session.pause_reason
        self.apply_geometry(event.geometry)
        now_paused = self.session.pause_reason

        if now_paused is not None:
            # Every paused resize: the warning shows the current size
            if was_paused != now_paused:
                log.info(f"Playback paused at {event.geometry}", reason=now_paused.name)
            await self.event_bus.publish(PlaybackPausedEvent(now_paused, event.geometry))
        elif was_paused is not None:
            log.info(f"Playback resumed at {event.geometry}")
            await self.event_bus.publish(PlaybackResumedEvent(event.geometry))
