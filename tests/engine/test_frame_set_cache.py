"""
FrameSetCache: hit idempotence, at-most-one build, all-or-nothing publication.
"""

import asyncio

import pytest

from polishcow.engine.frame_set_cache import FrameSetCache, resolution_for
from polishcow.engine.frame_source import FrameSource
from polishcow.lifecycle.task_registry import TaskRegistry
from polishcow.models.enums import ConversionFailurePolicy
from polishcow.models.errors import ConfigError, ConversionError
from polishcow.models.frame import ResolutionKey, TerminalGeometry

KEY = ResolutionKey(120, 36)


@pytest.fixture
def cache(six_frames_dir, fake_converter):
    return FrameSetCache(FrameSource(six_frames_dir), fake_converter)


@pytest.mark.asyncio
async def test_build_orders_frames_by_source_index(cache, fake_converter):
    frame_set = await cache.get_or_build(KEY)

    assert len(frame_set) == 6
    assert frame_set.key == KEY
    # FakeConverter fills each grid with the first char of the file name
    assert [grid.rows[0][0].char for grid in frame_set] == ["0", "1", "2", "3", "4", "5"]
    assert all(grid.width == 120 and grid.height == 36 for grid in frame_set)


@pytest.mark.asyncio
async def test_second_lookup_is_a_hit_without_conversions(cache, fake_converter):
    first = await cache.get_or_build(KEY)
    calls_after_build = len(fake_converter.calls)

    second = await cache.get_or_build(KEY)

    assert second is first
    assert len(fake_converter.calls) == calls_after_build
    assert cache.stats()["hits"] == 1
    assert cache.stats()["builds"] == 1


@pytest.mark.asyncio
async def test_concurrent_lookups_share_one_build(cache, fake_converter):
    first, second = await asyncio.gather(cache.get_or_build(KEY), cache.get_or_build(KEY))

    assert first is second
    assert len(fake_converter.calls) == 6
    assert cache.stats()["builds"] == 1


@pytest.mark.asyncio
async def test_failed_frame_publishes_nothing_and_next_call_rebuilds(six_frames_dir, make_converter):
    converter = make_converter("2.png")
    cache = FrameSetCache(FrameSource(six_frames_dir), converter)

    with pytest.raises(ConversionError) as exc_info:
        await cache.get_or_build(KEY)

    assert exc_info.value.path.name == "2.png"
    assert KEY not in cache
    assert cache.peek(KEY) is None
    assert not cache.is_building(KEY)
    assert cache.stats()["failures"] == 1

    converter.fail_on.clear()
    frame_set = await cache.get_or_build(KEY)

    assert len(frame_set) == 6
    assert cache.stats()["builds"] == 2
    assert len(converter.calls) == 12


@pytest.mark.asyncio
async def test_unexpected_converter_error_becomes_conversion_error(six_frames_dir):
    class BrokenConverter:
        async def convert(self, path, width, height):
            raise OSError("disk on fire")

    cache = FrameSetCache(FrameSource(six_frames_dir), BrokenConverter())

    with pytest.raises(ConversionError) as exc_info:
        await cache.get_or_build(KEY)

    assert "disk on fire" in exc_info.value.message
    assert exc_info.value.path.name == "0.png"


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_build(cache, fake_converter):
    waiter = asyncio.ensure_future(cache.get_or_build(KEY))
    await asyncio.sleep(0)
    waiter.cancel()

    frame_set = await cache.get_or_build(KEY)

    assert len(frame_set) == 6
    assert len(fake_converter.calls) == 6


@pytest.mark.asyncio
async def test_request_is_fire_and_forget(cache):
    task = cache.request(KEY)
    await asyncio.sleep(0)

    assert cache.peek(KEY) is None
    assert cache.is_building(KEY)

    frame_set = await task

    assert cache.peek(KEY) is frame_set
    assert not cache.is_building(KEY)


@pytest.mark.asyncio
async def test_request_failure_is_fatal_by_default(six_frames_dir, make_converter):
    cache = FrameSetCache(FrameSource(six_frames_dir), make_converter("4.png"))

    task = cache.request(KEY)
    with pytest.raises(ConversionError):
        await task

    failed = TaskRegistry.instance().failed()
    assert [r.info.category.name for r in failed] == ["FRAMES"]


@pytest.mark.asyncio
async def test_request_failure_is_swallowed_under_discard_policy(six_frames_dir, make_converter):
    cache = FrameSetCache(
        FrameSource(six_frames_dir),
        make_converter("4.png"),
        failure_policy=ConversionFailurePolicy.DISCARD,
    )

    result = await cache.request(KEY)

    assert result is None
    assert KEY not in cache
    assert TaskRegistry.instance().failed() == []


@pytest.mark.asyncio
async def test_lru_bound_evicts_least_recently_used(six_frames_dir, fake_converter):
    cache = FrameSetCache(FrameSource(six_frames_dir), fake_converter, max_entries=2)
    a, b, c = ResolutionKey(80, 26), ResolutionKey(100, 30), ResolutionKey(120, 36)

    await cache.get_or_build(a)
    await cache.get_or_build(b)
    cache.peek(a)  # touch a, b becomes least recently used
    await cache.get_or_build(c)

    assert a in cache
    assert b not in cache
    assert c in cache
    assert len(cache) == 2
    assert cache.stats()["evictions"] == 1


@pytest.mark.asyncio
async def test_lru_bound_never_evicts_pinned_resolution(six_frames_dir, fake_converter):
    cache = FrameSetCache(FrameSource(six_frames_dir), fake_converter, max_entries=2)
    current, stale_a, stale_b = ResolutionKey(150, 46), ResolutionKey(100, 30), ResolutionKey(110, 30)

    cache.pin(current)
    await cache.get_or_build(current)
    # Builds for sizes the user already left finish after the current one
    await cache.get_or_build(stale_a)
    await cache.get_or_build(stale_b)

    assert current in cache
    assert cache.peek(current) is not None
    assert stale_a not in cache
    assert stale_b in cache
    assert len(cache) == 2


def test_max_entries_must_be_positive(six_frames_dir, fake_converter):
    with pytest.raises(ValueError):
        FrameSetCache(FrameSource(six_frames_dir), fake_converter, max_entries=0)


def test_resolution_for_subtracts_padding():
    assert resolution_for(TerminalGeometry(120, 40), (0, 4)) == ResolutionKey(120, 36)

    with pytest.raises(ConfigError):
        resolution_for(TerminalGeometry(10, 4), (0, 4))
