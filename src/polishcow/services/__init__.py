from .event_bus import EventBus
from .middleware import log_middleware
from .audio_loop_driver import AudioLoopDriver, AudioClipState, AudioPlayer, PygameAudioPlayer
from .resize_coordinator import ResizeCoordinator

__all__ = [
    "EventBus",
    "log_middleware",
    "AudioLoopDriver",
    "AudioClipState",
    "AudioPlayer",
    "PygameAudioPlayer",
    "ResizeCoordinator",
]
