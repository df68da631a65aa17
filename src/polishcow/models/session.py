"""
Playback session - shared mutable state of one program run.

Created once at startup and handed to AnimationDriver and ResizeCoordinator.
Everything runs on one event loop, so plain attribute writes are atomic with
respect to the animation tick.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from polishcow.models.enums import PauseReason
from polishcow.models.frame import ResolutionKey, TerminalGeometry


@dataclass
class PlaybackSession:
    """
    Shared playback state

    - pause_reason: set by ResizeCoordinator, read by AnimationDriver
    - cursor: position in the animation sequence, advanced only by AnimationDriver
    - geometry / resolution: last terminal size seen and its cache key
    """

    sequence: Tuple[int, ...]
    geometry: Optional[TerminalGeometry] = None
    resolution: Optional[ResolutionKey] = None
    pause_reason: Optional[PauseReason] = None
    cursor: int = 0
    ticks: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        if not self.sequence:
            raise ValueError("Animation sequence must not be empty")
        self.sequence = tuple(self.sequence)

    @property
    def paused(self) -> bool:
        return self.pause_reason is not None

    def pause(self, reason: PauseReason) -> None:
        self.pause_reason = reason

    def resume(self) -> None:
        self.pause_reason = None

    def current_frame_index(self) -> int:
        return self.sequence[self.cursor]

    def advance(self) -> int:
        """Move the cursor one step, wrapping to 0 past the end. Returns the new cursor."""
        self.cursor = (self.cursor + 1) % len(self.sequence)
        return self.cursor
