"""
main_asyncio.py - Application entry point for Polish Cow
-------------------------------------------------------

Responsible for:
- loading configuration and checking startup preconditions
- wiring dependencies (session, cache, drivers, coordinator)
- starting the async main loop
- graceful shutdown on Ctrl+C or fatal errors
"""

import asyncio
import dataclasses
import sys
from pathlib import Path
from typing import Optional

from polishcow.engine import AnimationDriver, AsciiConverter, FrameSetCache, FrameSource
from polishcow.lifecycle import ShutdownCoordinator, TaskCategory, create_tracked_task, report_fatal
from polishcow.lifecycle.handlers import (
    AudioShutdownHandler,
    PendingTasksCancellationHandler,
    TaskCancellationHandler,
    TerminalShutdownHandler,
)
from polishcow.managers import ConfigManager
from polishcow.models.config import AppConfig
from polishcow.models.enums import LogCategory, LogLevel
from polishcow.models.errors import ConfigError
from polishcow.models.events import EventType, TerminalResizeEvent
from polishcow.models.frame import TerminalGeometry
from polishcow.models.session import PlaybackSession
from polishcow.services import AudioLoopDriver, EventBus, PygameAudioPlayer, ResizeCoordinator, log_middleware
from polishcow.terminal import TerminalDevice
from polishcow.utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.SYSTEM)

DEFAULT_GRACE_PERIOD = 10.0


def load_config(config_path: Optional[str], debug: bool) -> AppConfig:
    """
    Raises:
        ConfigError: if the configuration is invalid
    """
    config = ConfigManager(config_path).build()
    if debug and not config.debug:
        config = dataclasses.replace(config, debug=True)
    return config


async def check_preconditions(config: AppConfig, terminal: TerminalDevice) -> FrameSource:
    """
    Startup checks, in order. Each failure is fatal.

    Raises:
        ConfigError: naming the first failed precondition
    """
    loop = asyncio.get_running_loop()

    if not terminal.is_interactive():
        raise ConfigError("Output is not an interactive terminal.")

    sound_file = Path(config.sound_file)
    if not await loop.run_in_executor(None, sound_file.is_file):
        raise ConfigError(
            f'Sound file at path "{config.sound_file}" doesn\'t exist.',
            sound_file=str(config.sound_file),
        )

    frame_source = FrameSource(config.animation_dir)
    frames = await loop.run_in_executor(None, frame_source.list_frames)
    ConfigManager.check_sequence_covers(config, len(frames))

    log.info(f"Preconditions OK ({len(frames)} frames)")
    return frame_source


async def main(config_path: Optional[str] = None, debug: bool = False) -> int:
    """Main async entry point. Returns the process exit code."""

    # ========================================================================
    # 1. CONFIGURATION + PRECONDITIONS
    # ========================================================================

    configure_logger(LogLevel.DEBUG if debug else LogLevel.WARN)

    try:
        config = load_config(config_path, debug)
    except ConfigError as e:
        await report_fatal(e, DEFAULT_GRACE_PERIOD)
        return 1

    configure_logger(LogLevel.DEBUG if config.debug else LogLevel.WARN)
    log.info("Starting Polish Cow...")

    terminal = TerminalDevice(sys.stdout)

    try:
        frame_source = await check_preconditions(config, terminal)
    except ConfigError as e:
        await report_fatal(e, config.exit_grace_period)
        return 1

    # ========================================================================
    # 2. WIRING
    # ========================================================================

    loop = asyncio.get_running_loop()

    session = PlaybackSession(sequence=config.animation_sequence)

    event_bus = EventBus()
    event_bus.add_middleware(log_middleware)

    cache = FrameSetCache(
        frame_source,
        AsciiConverter(config.ascii),
        failure_policy=config.conversion_failure,
        max_entries=config.cache_max_entries,
    )

    driver = AnimationDriver(
        session,
        cache,
        terminal,
        interval=config.animation_interval,
        min_size=config.min_size,
        min_aspect_ratio=config.min_aspect_ratio,
        output_format=config.ascii.output_format,
        debug=config.debug,
    )

    coordinator = ResizeCoordinator(
        session,
        cache,
        terminal,
        event_bus,
        min_size=config.min_size,
        min_aspect_ratio=config.min_aspect_ratio,
        padding=config.padding,
        title_name=config.title_name,
        title_author=config.title_author,
    )
    event_bus.subscribe(EventType.TERMINAL_RESIZE, coordinator.on_resize)
    event_bus.subscribe(EventType.PLAYBACK_PAUSED, driver.on_playback_paused)
    event_bus.subscribe(EventType.PLAYBACK_RESUMED, driver.on_playback_resumed)

    audio = AudioLoopDriver(PygameAudioPlayer(), end_buffer=config.end_buffer)

    shutdown = ShutdownCoordinator()
    shutdown.setup_signal_handlers(loop)

    # ========================================================================
    # 3. START
    # ========================================================================

    terminal.hide_cursor()
    coordinator.apply_geometry(terminal.geometry())

    audio_task = create_tracked_task(
        audio.loop(config.sound_file),
        category=TaskCategory.AUDIO,
        description="Audio loop",
    )
    render_task = driver.start()

    def on_geometry(geometry: TerminalGeometry) -> None:
        create_tracked_task(
            event_bus.publish(TerminalResizeEvent(geometry)),
            category=TaskCategory.EVENTBUS,
            description=f"Publish resize {geometry}",
        )

    terminal.watch_resize(loop, on_geometry)

    # ========================================================================
    # 4. SHUTDOWN
    # ========================================================================

    shutdown.register(AudioShutdownHandler(audio))
    shutdown.register(TaskCancellationHandler([render_task, audio_task]))
    shutdown.register(PendingTasksCancellationHandler())
    shutdown.register(TerminalShutdownHandler(terminal, loop))

    log.info("Playing. Waiting for exit signal...")

    await shutdown.wait_for_shutdown()
    await shutdown.shutdown_all()
    shutdown.remove_signal_handlers(loop)

    log.debug("Cache stats", **cache.stats())

    if shutdown.failure is not None:
        terminal.clear()
        await report_fatal(shutdown.failure, config.exit_grace_period)
        return 1

    log.info("Polish Cow shut down cleanly.")
    return 0
