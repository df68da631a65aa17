"""
Frame value objects and playback session.
"""

import pytest

from polishcow.models.enums import OutputFormat
from polishcow.models.errors import ConfigError
from polishcow.models.frame import Cell, FrameGrid, ResolutionKey, TerminalGeometry
from polishcow.models.session import PlaybackSession

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def test_resolution_key_is_a_value_object():
    assert ResolutionKey(120, 36) == ResolutionKey(120, 36)
    assert len({ResolutionKey(120, 36), ResolutionKey(120, 36), ResolutionKey(36, 120)}) == 2


@pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (-1, 5)])
def test_resolution_key_must_be_positive(width, height):
    with pytest.raises(ValueError):
        ResolutionKey(width, height)


def test_resolution_from_geometry():
    assert ResolutionKey.from_geometry(TerminalGeometry(100, 30), (2, 4)) == ResolutionKey(98, 26)

    with pytest.raises(ConfigError):
        ResolutionKey.from_geometry(TerminalGeometry(100, 4), (0, 4))


def test_aspect_ratio():
    assert TerminalGeometry(90, 50).aspect_ratio == pytest.approx(1.8)
    assert TerminalGeometry(150, 50).aspect_ratio == pytest.approx(3.0)
    assert str(TerminalGeometry(150, 50)) == "150x50"


def test_ragged_grid_is_rejected():
    with pytest.raises(ValueError):
        FrameGrid.from_lines(["abc", "ab"])


def test_plain_render():
    grid = FrameGrid.from_lines(["ab", "cd"], color=RED)

    assert grid.render(OutputFormat.PLAIN) == "ab\ncd"
    assert (grid.width, grid.height) == (2, 2)


def test_truecolor_render_shares_escape_per_color_run():
    grid = FrameGrid(((Cell("a", RED), Cell("b", RED), Cell("c", BLUE), Cell(" ")),))

    text = grid.render(OutputFormat.TRUECOLOR)

    assert text == "\x1b[38;2;255;0;0mab\x1b[38;2;0;0;255mc\x1b[0m "


def test_colored_rows_end_with_reset():
    grid = FrameGrid.from_lines(["x", "y"], color=BLUE)

    lines = grid.render(OutputFormat.ANSI256).split("\n")

    assert lines == ["\x1b[38;5;21mx\x1b[0m", "\x1b[38;5;21my\x1b[0m"]


def test_session_cursor_wraps():
    session = PlaybackSession(sequence=[4, 2, 0])

    assert session.sequence == (4, 2, 0)
    assert session.current_frame_index() == 4
    assert [session.advance() for _ in range(4)] == [1, 2, 0, 1]


def test_session_pause_state():
    from polishcow.models.enums import PauseReason

    session = PlaybackSession(sequence=(0,))
    session.pause(PauseReason.ASPECT_RATIO)
    assert session.paused

    session.resume()
    assert not session.paused
    assert session.pause_reason is None


def test_empty_sequence_is_rejected():
    with pytest.raises(ValueError):
        PlaybackSession(sequence=())
