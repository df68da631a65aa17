"""
ResizeCoordinator gates: minimum size, minimum aspect ratio, window title.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from polishcow.engine.animation_driver import AnimationDriver
from polishcow.engine.frame_set_cache import FrameSetCache
from polishcow.engine.frame_source import FrameSource
from polishcow.models.enums import OutputFormat, PauseReason, TickOutcome
from polishcow.models.events import EventType, TerminalResizeEvent
from polishcow.models.frame import FrameGrid, FrameSet, ResolutionKey, TerminalGeometry
from polishcow.models.session import PlaybackSession
from polishcow.services.event_bus import EventBus
from polishcow.services.resize_coordinator import ResizeCoordinator


@pytest.fixture
def session():
    return PlaybackSession(sequence=(0, 1, 0, 1, 2, 3, 4, 3, 4, 2))


@pytest.fixture
def cache():
    cache = MagicMock()
    cache.peek.side_effect = lambda key: FrameSet.build(
        key, [FrameGrid.from_lines(["#" * key.width] * key.height)] * 5
    )
    return cache


@pytest.fixture
def driver(session, cache, fake_terminal):
    return AnimationDriver(session, cache, fake_terminal, output_format=OutputFormat.PLAIN)


@pytest.fixture
def event_bus(driver):
    bus = EventBus()
    bus.subscribe(EventType.PLAYBACK_PAUSED, driver.on_playback_paused)
    bus.subscribe(EventType.PLAYBACK_RESUMED, driver.on_playback_resumed)
    return bus


@pytest.fixture
def coordinator(session, cache, fake_terminal, event_bus):
    return ResizeCoordinator(
        session,
        cache,
        fake_terminal,
        event_bus,
        min_size=(80, 30),
        min_aspect_ratio=2.5,
        padding=(0, 4),
    )


def test_gates(coordinator):
    assert coordinator.check_gates(TerminalGeometry(150, 50)) is None
    assert coordinator.check_gates(TerminalGeometry(79, 30)) is PauseReason.TOO_SMALL
    assert coordinator.check_gates(TerminalGeometry(200, 29)) is PauseReason.TOO_SMALL
    assert coordinator.check_gates(TerminalGeometry(90, 50)) is PauseReason.ASPECT_RATIO


def test_startup_geometry_pins_and_requests_build_and_sets_title(coordinator, session, cache, fake_terminal):
    coordinator.apply_geometry(TerminalGeometry(120, 40))

    assert not session.paused
    assert session.resolution == ResolutionKey(120, 36)
    cache.pin.assert_called_once_with(ResolutionKey(120, 36))
    cache.request.assert_called_once_with(ResolutionKey(120, 36))
    assert fake_terminal.titles == ["Polish Cow - Sv443 - 120x40"]
    assert fake_terminal.cursor_hidden == 1


def test_too_small_pauses_without_build(coordinator, session, driver, cache, fake_terminal):
    result = coordinator.apply_geometry(TerminalGeometry(60, 20))

    assert result is None
    assert session.pause_reason is PauseReason.TOO_SMALL
    cache.request.assert_not_called()
    cache.pin.assert_not_called()

    assert driver.tick() is TickOutcome.PAUSED
    assert "Window size too small!" in fake_terminal.shown[-1]


@pytest.mark.asyncio
async def test_narrow_window_pauses_then_wide_window_resumes(
    coordinator, session, driver, cache, fake_terminal, event_bus
):
    published = []
    event_bus.subscribe(EventType.PLAYBACK_PAUSED, published.append)
    event_bus.subscribe(EventType.PLAYBACK_RESUMED, published.append)

    # 90 / 50 = 1.8 < 2.5
    await coordinator.on_resize(TerminalResizeEvent(TerminalGeometry(90, 50)))

    assert session.pause_reason is PauseReason.ASPECT_RATIO
    # Rendered by the driver on PLAYBACK_PAUSED, before any tick
    assert "aspect ratio" in fake_terminal.shown[-1]
    # Build still requested so resuming at this size is instant
    cache.request.assert_called_with(ResolutionKey(90, 46))

    assert driver.tick() is TickOutcome.PAUSED
    assert session.cursor == 0

    # 150 / 50 = 3.0
    await coordinator.on_resize(TerminalResizeEvent(TerminalGeometry(150, 50)))

    assert not session.paused
    assert fake_terminal.cleared == 1
    assert driver.tick() is TickOutcome.RENDERED
    assert session.cursor == 1
    assert fake_terminal.titles[-1] == "Polish Cow - Sv443 - 150x50"

    assert [e.type for e in published] == [EventType.PLAYBACK_PAUSED, EventType.PLAYBACK_RESUMED]
    assert published[0].reason is PauseReason.ASPECT_RATIO


@pytest.mark.asyncio
async def test_warning_follows_size_while_paused(coordinator, fake_terminal):
    await coordinator.on_resize(TerminalResizeEvent(TerminalGeometry(60, 20)))
    await coordinator.on_resize(TerminalResizeEvent(TerminalGeometry(70, 25)))

    assert "Current:  70x25" in fake_terminal.shown[-1]
    assert fake_terminal.cleared == 0


@pytest.mark.asyncio
async def test_resize_is_routed_through_event_bus(coordinator, session, event_bus):
    event_bus.subscribe(EventType.TERMINAL_RESIZE, coordinator.on_resize)

    await event_bus.publish(TerminalResizeEvent(TerminalGeometry(160, 50)))

    assert session.geometry == TerminalGeometry(160, 50)
    assert session.resolution == ResolutionKey(160, 46)


class NarrowSizesAreSlow:
    """Conversions for widths below 150 finish well after wide ones."""

    async def convert(self, path, width, height):
        await asyncio.sleep(0.05 if width < 150 else 0)
        return FrameGrid.from_lines([path.name[0] * width] * height)


@pytest.mark.asyncio
async def test_bounded_cache_keeps_current_size_when_stale_builds_finish(
    six_frames_dir, session, fake_terminal
):
    cache = FrameSetCache(FrameSource(six_frames_dir), NarrowSizesAreSlow(), max_entries=2)
    driver = AnimationDriver(session, cache, fake_terminal, output_format=OutputFormat.PLAIN)
    bus = EventBus()
    coordinator = ResizeCoordinator(session, cache, fake_terminal, bus, padding=(0, 4))

    # User drags the window through two sizes and settles on 150x50
    coordinator.apply_geometry(TerminalGeometry(100, 34))
    coordinator.apply_geometry(TerminalGeometry(110, 34))
    await coordinator.apply_geometry(TerminalGeometry(150, 50))

    assert driver.tick() is TickOutcome.RENDERED

    # Let the builds for the abandoned sizes complete
    await asyncio.sleep(0.2)
    assert not cache.is_building(ResolutionKey(100, 30))
    assert not cache.is_building(ResolutionKey(110, 30))

    outcomes = {driver.tick() for _ in range(5)}
    assert outcomes == {TickOutcome.RENDERED}
    assert ResolutionKey(150, 46) in cache
