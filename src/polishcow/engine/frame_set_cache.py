"""
FrameSetCache - converted frame sets keyed by resolution.

Guarantees:
  - at most one FrameSet or one in-flight build per ResolutionKey
  - a FrameSet is published only when every frame converted (all-or-nothing)
  - a failed build leaves nothing behind, so the next request starts fresh

Builds fan out one conversion per source frame and join them; the result is
ordered by source index, never by completion order.

Entries are kept forever unless `max_entries` is set, in which case the least
recently used resolution is evicted first. The pinned resolution (the one
currently on screen) is never evicted.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from typing import Dict, Optional, Tuple

from polishcow.engine.ascii_converter import AsciiConverter
from polishcow.engine.frame_source import FrameSource
from polishcow.lifecycle.task_registry import create_tracked_task, TaskCategory
from polishcow.models.enums import ConversionFailurePolicy
from polishcow.models.errors import ConversionError
from polishcow.models.frame import FrameSet, ResolutionKey, TerminalGeometry
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CACHE)


def resolution_for(geometry: TerminalGeometry, padding: Tuple[int, int]) -> ResolutionKey:
    """Cache key for a terminal size: columns and rows minus per-axis padding."""
    return ResolutionKey.from_geometry(geometry, padding)


def _consume_exception(task: asyncio.Task) -> None:
    # Awaiters may all have gone away; mark the exception as retrieved.
    if not task.cancelled():
        task.exception()


class FrameSetCache:
    """
    Memoizes FrameSet builds per terminal resolution.

    Example:
        cache = FrameSetCache(FrameSource("./animation"), AsciiConverter(options))

        # Awaitable lookup (builds on miss, joins an in-flight build)
        frame_set = await cache.get_or_build(ResolutionKey(120, 36))

        # Fire-and-forget from an event handler; the driver polls peek()
        cache.request(ResolutionKey(100, 30))
        cache.peek(ResolutionKey(100, 30))  # None until the build finishes
    """

    def __init__(
        self,
        frame_source: FrameSource,
        converter: AsciiConverter,
        failure_policy: ConversionFailurePolicy = ConversionFailurePolicy.FATAL,
        max_entries: Optional[int] = None,
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.frame_source = frame_source
        self.converter = converter
        self.failure_policy = failure_policy
        self.max_entries = max_entries

        self._frame_sets: "OrderedDict[ResolutionKey, FrameSet]" = OrderedDict()
        self._pending: Dict[ResolutionKey, asyncio.Task] = {}
        self.pinned: Optional[ResolutionKey] = None

        # Metrics
        self.hits = 0
        self.misses = 0
        self.builds = 0
        self.failures = 0
        self.evictions = 0

    # === Lookup ===

    def peek(self, key: ResolutionKey) -> Optional[FrameSet]:
        """Return the finished FrameSet for key, or None. Never starts a build."""
        frame_set = self._frame_sets.get(key)
        if frame_set is not None:
            self._frame_sets.move_to_end(key)
        return frame_set

    def pin(self, key: ResolutionKey) -> None:
        """Protect key from LRU eviction, releasing the previously pinned key."""
        self.pinned = key

    def is_building(self, key: ResolutionKey) -> bool:
        return key in self._pending

    def __contains__(self, key: object) -> bool:
        return key in self._frame_sets

    def __len__(self) -> int:
        return len(self._frame_sets)

    async def get_or_build(self, key: ResolutionKey) -> FrameSet:
        """
        Return the FrameSet for key, building it on a miss.

        Concurrent callers for the same key share one build. Cancelling a
        caller does not cancel the shared build.

        Raises:
            ConversionError: if any frame of the build failed to convert
            ConfigError: if the frame directory disappeared
        """
        frame_set = self.peek(key)
        if frame_set is not None:
            self.hits += 1
            log.debug("Cache hit", resolution=str(key))
            return frame_set

        task = self._pending.get(key)
        if task is None:
            self.misses += 1
            task = asyncio.get_running_loop().create_task(
                self._build(key), name=f"FrameSet build {key}"
            )
            task.add_done_callback(_consume_exception)
            self._pending[key] = task
        else:
            log.debug("Joining in-flight build", resolution=str(key))

        return await asyncio.shield(task)

    def request(self, key: ResolutionKey) -> asyncio.Task:
        """
        Make sure a FrameSet for key exists or is being built, without waiting.

        Returns the tracked task so callers may await it if they want to. Under
        the FATAL policy a conversion failure fails this task, which the
        shutdown coordinator treats as fatal.
        """
        return create_tracked_task(
            self._request(key),
            category=TaskCategory.FRAMES,
            description=f"Frame set request {key}",
        )

    async def _request(self, key: ResolutionKey) -> Optional[FrameSet]:
        try:
            return await self.get_or_build(key)
        except ConversionError as e:
            if self.failure_policy is ConversionFailurePolicy.FATAL:
                raise
            log.warn(
                "Discarded frame set build",
                resolution=str(key),
                frame=e.details.get("path"),
                reason=e.details.get("reason"),
            )
            return None

    # === Build ===

    async def _build(self, key: ResolutionKey) -> FrameSet:
        self.builds += 1
        try:
            paths = self.frame_source.list_frames()
            log.info(f"Building frame set for {key}", frames=len(paths))

            results = await asyncio.gather(
                *(self.converter.convert(path, key.width, key.height) for path in paths),
                return_exceptions=True,
            )

            for path, result in zip(paths, results):
                if isinstance(result, ConversionError):
                    self.failures += 1
                    raise result
                if isinstance(result, Exception):
                    self.failures += 1
                    raise ConversionError(path, str(result)) from result
                if isinstance(result, BaseException):
                    raise result

            frame_set = FrameSet.build(key, results)
            self._store(key, frame_set)
            log.info(f"Frame set ready for {key}", frames=len(frame_set))
            return frame_set
        finally:
            self._pending.pop(key, None)

    def _store(self, key: ResolutionKey, frame_set: FrameSet) -> None:
        self._frame_sets[key] = frame_set
        self._frame_sets.move_to_end(key)

        if self.max_entries is None:
            return
        while len(self._frame_sets) > self.max_entries:
            evicted = next(k for k in self._frame_sets if k != self.pinned)
            del self._frame_sets[evicted]
            self.evictions += 1
            log.debug("Evicted frame set", resolution=str(evicted))

    # === Metrics ===

    def stats(self) -> Dict[str, int]:
        return {
            "entries": len(self._frame_sets),
            "pending": len(self._pending),
            "hits": self.hits,
            "misses": self.misses,
            "builds": self.builds,
            "failures": self.failures,
            "evictions": self.evictions,
        }

    def __repr__(self) -> str:
        return (
            f"FrameSetCache(entries={len(self._frame_sets)}, pending={len(self._pending)}, "
            f"hits={self.hits}, misses={self.misses})"
        )
