"""
AudioLoopDriver - restarts a sound clip forever on its own timer.

The clip length is measured once; every `duration + end_buffer` seconds the
clip is started again. The timer is independent of the animation tick, so
audio and animation drift apart slowly and are never resynchronized.

State machine:
    IDLE -> PLAYING -> RESTART_DUE -> PLAYING -> ...
    any  -> IDLE    (cancelled / stop())
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union

from polishcow.models.enums import AudioLoopState
from polishcow.models.errors import PlaybackError, PolishCowError
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.AUDIO)


class AudioPlayer(Protocol):
    """Playback primitive: report a clip's length and start it."""

    def duration(self, path: Path) -> float:
        ...

    def play(self, path: Path) -> None:
        ...

    def stop(self) -> None:
        ...


class PygameAudioPlayer:
    """AudioPlayer backed by pygame.mixer (mp3, ogg, wav)."""

    def __init__(self, volume: float = 1.0):
        self.volume = volume
        self._initialized = False

    def _ensure_mixer(self) -> None:
        # Import lazily so the module can be imported without an audio device
        import pygame

        if not self._initialized:
            pygame.mixer.init()
            self._initialized = True

    def duration(self, path: Path) -> float:
        import pygame

        self._ensure_mixer()
        return pygame.mixer.Sound(str(path)).get_length()

    def play(self, path: Path) -> None:
        import pygame

        self._ensure_mixer()
        pygame.mixer.music.load(str(path))
        pygame.mixer.music.set_volume(self.volume)
        pygame.mixer.music.play()

    def stop(self) -> None:
        if not self._initialized:
            return
        import pygame

        pygame.mixer.music.stop()
        pygame.mixer.quit()
        self._initialized = False


@dataclass(frozen=True)
class AudioClipState:
    """Measured clip; immutable once measured."""
    path: Path
    duration: float
    end_buffer: float

    @property
    def period(self) -> float:
        """Seconds between two clip starts."""
        return self.duration + self.end_buffer


class AudioLoopDriver:
    """
    Loops one clip until cancelled.

    Example:
        driver = AudioLoopDriver(PygameAudioPlayer(), end_buffer=0.4)
        task = create_tracked_task(driver.loop(Path("polishcow.mp3")),
                                   category=TaskCategory.AUDIO,
                                   description="Audio loop")
    """

    def __init__(self, player: AudioPlayer, end_buffer: float = 0.4):
        if end_buffer < 0:
            raise ValueError("end_buffer must not be negative")
        self.player = player
        self.end_buffer = end_buffer

        self.state = AudioLoopState.IDLE
        self.clip: Optional[AudioClipState] = None
        self.cycles = 0

    async def measure(self, path: Union[str, Path]) -> AudioClipState:
        """
        Measure the clip length off the event loop, rounded to milliseconds.

        Raises:
            PlaybackError: if the clip cannot be measured or has no length
        """
        path = Path(path)
        loop = asyncio.get_running_loop()
        try:
            duration = await loop.run_in_executor(None, self.player.duration, path)
        except PolishCowError:
            raise
        except Exception as e:
            raise PlaybackError(path, str(e)) from e

        duration = round(float(duration), 3)
        if duration <= 0:
            raise PlaybackError(path, f"clip has no length ({duration}s)")

        clip = AudioClipState(path=path, duration=duration, end_buffer=self.end_buffer)
        log.info(f"Measured {path.name}", duration=f"{clip.duration:.3f}s", period=f"{clip.period:.3f}s")
        return clip

    def _start_clip(self, clip: AudioClipState) -> None:
        try:
            self.player.play(clip.path)
        except Exception as e:
            raise PlaybackError(clip.path, str(e)) from e
        self.state = AudioLoopState.PLAYING
        self.cycles += 1
        log.debug(f"Clip started (cycle {self.cycles})")

    async def loop(self, path: Union[str, Path]) -> None:
        """Play the clip, wait `period`, play it again. Runs until cancelled."""
        self.clip = await self.measure(path)
        try:
            while True:
                self._start_clip(self.clip)
                await asyncio.sleep(self.clip.period)
                self.state = AudioLoopState.RESTART_DUE
        finally:
            self.state = AudioLoopState.IDLE

    def stop(self) -> None:
        """Halt playback (shutdown)."""
        self.state = AudioLoopState.IDLE
        try:
            self.player.stop()
        except Exception as e:
            log.warn("Failed to stop audio playback", error=str(e))
