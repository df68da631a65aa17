import asyncio
from pathlib import Path
from typing import List, Optional, Set, Tuple

import pytest

from polishcow.lifecycle.task_registry import TaskRegistry
from polishcow.models.errors import ConversionError
from polishcow.models.frame import FrameGrid, TerminalGeometry


@pytest.fixture(autouse=True)
def fresh_task_registry():
    TaskRegistry.reset()
    yield
    TaskRegistry.reset()


class FakeConverter:
    """
    Stand-in for AsciiConverter: every frame becomes a width x height grid
    filled with the first character of the file name.
    """

    def __init__(self, delay: float = 0.01, fail_on: Optional[Set[str]] = None):
        self.delay = delay
        self.fail_on = fail_on or set()
        self.calls: List[Tuple[str, int, int]] = []

    async def convert(self, path: Path, width: int, height: int) -> FrameGrid:
        self.calls.append((path.name, width, height))
        await asyncio.sleep(self.delay)
        if path.name in self.fail_on:
            raise ConversionError(path, "corrupt image")
        return FrameGrid.from_lines([path.name[0] * width] * height)


class FakeTerminal:
    """Records everything the engine writes to the terminal."""

    def __init__(self, geometry: TerminalGeometry = TerminalGeometry(150, 50), interactive: bool = True):
        self._geometry = geometry
        self.interactive = interactive
        self.shown: List[str] = []
        self.titles: List[str] = []
        self.cursor_hidden = 0
        self.cleared = 0

    def is_interactive(self) -> bool:
        return self.interactive

    def geometry(self) -> TerminalGeometry:
        return self._geometry

    def show(self, text: str) -> None:
        self.shown.append(text)

    def hide_cursor(self) -> None:
        self.cursor_hidden += 1

    def clear(self) -> None:
        self.cleared += 1

    def set_title(self, title: str) -> None:
        self.titles.append(title)


@pytest.fixture
def fake_converter():
    return FakeConverter()


@pytest.fixture
def fake_terminal():
    return FakeTerminal()


@pytest.fixture
def make_frames_dir(tmp_path):
    """Create a directory holding empty files with the given names."""

    def _make(names, name="animation") -> Path:
        directory = tmp_path / name
        directory.mkdir()
        for file_name in names:
            (directory / file_name).write_bytes(b"")
        return directory

    return _make


@pytest.fixture
def six_frames_dir(make_frames_dir):
    return make_frames_dir([f"{i}.png" for i in range(6)])


@pytest.fixture
def make_converter():
    """FakeConverter factory; conversions of the named files fail."""

    def _make(*fail_on: str) -> FakeConverter:
        return FakeConverter(fail_on=set(fail_on))

    return _make
