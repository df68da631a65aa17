"""
Audio shutdown handler.

Stops playback first so sound never outlives the animation.
"""

from __future__ import annotations

from polishcow.lifecycle.shutdown_protocol import IShutdownHandler
from polishcow.services.audio_loop_driver import AudioLoopDriver
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class AudioShutdownHandler(IShutdownHandler):

    def __init__(self, audio_driver: AudioLoopDriver):
        self.audio_driver = audio_driver

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        log.info("Stopping audio playback...")
        self.audio_driver.stop()
        log.debug("Audio stopped", cycles=self.audio_driver.cycles)
