"""
Terminal device helpers: window title, escape output, resize polling.
"""

import asyncio
import io
import signal

import pytest

from polishcow.models.frame import TerminalGeometry
from polishcow.terminal.terminal_device import (
    CLEAR_SCREEN,
    HIDE_CURSOR,
    SHOW_CURSOR,
    TerminalDevice,
)
from polishcow.terminal.window_title import format_window_title, set_window_title


def test_format_window_title():
    assert format_window_title("Polish Cow", "Sv443") == "Polish Cow - Sv443"
    assert format_window_title("Polish Cow", "Sv443", TerminalGeometry(120, 40)) == "Polish Cow - Sv443 - 120x40"


def test_posix_title_uses_osc_sequence():
    stream = io.StringIO()

    set_window_title("Polish Cow - Sv443", stream, platform="linux")

    assert stream.getvalue() == "\x1b]2;Polish Cow - Sv443\x1b\\"


def test_string_stream_is_not_interactive():
    assert not TerminalDevice(io.StringIO()).is_interactive()


def test_geometry_falls_back_without_a_tty():
    geometry = TerminalDevice(io.StringIO(), fallback=(100, 30)).geometry()

    assert isinstance(geometry, TerminalGeometry)
    assert geometry.columns > 0 and geometry.rows > 0


def test_show_clears_and_writes_in_one_go():
    stream = io.StringIO()
    terminal = TerminalDevice(stream)

    terminal.hide_cursor()
    terminal.show("\n\nmoo\n")
    terminal.restore()

    assert stream.getvalue() == f"{HIDE_CURSOR}{CLEAR_SCREEN}\n\nmoo\n\x1b[0m{SHOW_CURSOR}"


@pytest.mark.asyncio
async def test_resize_polling_without_sigwinch(monkeypatch):
    monkeypatch.delattr(signal, "SIGWINCH", raising=False)

    sizes = iter([TerminalGeometry(120, 40), TerminalGeometry(120, 40), TerminalGeometry(90, 40)])
    last = TerminalGeometry(90, 40)
    terminal = TerminalDevice(io.StringIO(), poll_interval=0.01)
    monkeypatch.setattr(terminal, "geometry", lambda: next(sizes, last))

    seen = []
    loop = asyncio.get_running_loop()
    terminal.watch_resize(loop, seen.append)
    await asyncio.sleep(0.08)
    terminal.unwatch_resize(loop)

    assert seen == [TerminalGeometry(90, 40)]
