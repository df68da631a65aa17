"""
Frame models for the ASCII animation engine.

✔ TerminalGeometry - what the terminal reports (columns x rows)
✔ ResolutionKey    - cell box a frame set is converted for (cache key)
✔ Cell             - one character + optional RGB color
✔ FrameGrid        - one converted image, immutable 2D grid of cells
✔ FrameSet         - every frame of one animation cycle at one resolution
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from polishcow.models.enums import OutputFormat
from polishcow.models.errors import ConfigError

RGB = Tuple[int, int, int]

RESET = "\x1b[0m"


@dataclass(frozen=True)
class TerminalGeometry:
    """Terminal size in character cells."""

    columns: int
    rows: int

    @property
    def aspect_ratio(self) -> float:
        if self.rows <= 0:
            return 0.0
        return self.columns / self.rows

    def __str__(self) -> str:
        return f"{self.columns}x{self.rows}"


@dataclass(frozen=True)
class ResolutionKey:
    """
    Cell box a frame set is converted for.

    Two keys are equal iff both components are equal, so it can be used
    directly as a dict key.
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Resolution must be positive, got {self.width}x{self.height}")

    @classmethod
    def from_geometry(cls, geometry: TerminalGeometry, padding: Tuple[int, int]) -> "ResolutionKey":
        """
        Derive the conversion box from the terminal size minus per-axis padding.

        Raises:
            ConfigError: if the padding leaves no usable cells
        """
        width = geometry.columns - padding[0]
        height = geometry.rows - padding[1]
        if width <= 0 or height <= 0:
            raise ConfigError(
                "Padding leaves no room for the animation",
                geometry=str(geometry),
                padding=f"{padding[0]}x{padding[1]}",
            )
        return cls(width, height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class Cell:
    char: str
    color: Optional[RGB] = None


def _rgb_to_ansi256(color: RGB) -> int:
    r, g, b = (round(c / 255 * 5) for c in color)
    return 16 + 36 * r + 6 * g + b


def _sgr(color: RGB, output_format: OutputFormat) -> str:
    if output_format is OutputFormat.ANSI256:
        return f"\x1b[38;5;{_rgb_to_ansi256(color)}m"
    return f"\x1b[38;2;{color[0]};{color[1]};{color[2]}m"


@dataclass(frozen=True)
class FrameGrid:
    """
    One converted image.

    Rows always have the same length; a ragged grid is rejected at
    construction time.
    """

    rows: Tuple[Tuple[Cell, ...], ...]

    def __post_init__(self) -> None:
        if self.rows:
            width = len(self.rows[0])
            for index, row in enumerate(self.rows):
                if len(row) != width:
                    raise ValueError(
                        f"Row {index} has {len(row)} cells, expected {width}"
                    )

    @classmethod
    def from_lines(cls, lines: Iterable[str], color: Optional[RGB] = None) -> "FrameGrid":
        """Build an uncolored (or uniformly colored) grid from text lines."""
        return cls(tuple(tuple(Cell(ch, color) for ch in line) for line in lines))

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def height(self) -> int:
        return len(self.rows)

    def render(self, output_format: OutputFormat = OutputFormat.TRUECOLOR) -> str:
        """
        Render the grid as terminal text.

        Consecutive cells of the same color share one escape sequence and every
        colored row ends with a reset so colors never bleed into the next line.
        """
        lines = []
        for row in self.rows:
            if output_format is OutputFormat.PLAIN:
                lines.append("".join(cell.char for cell in row))
                continue

            parts = []
            current: Optional[RGB] = None
            for cell in row:
                if cell.color != current:
                    parts.append(_sgr(cell.color, output_format) if cell.color else RESET)
                    current = cell.color
                parts.append(cell.char)
            if current is not None:
                parts.append(RESET)
            lines.append("".join(parts))

        return "\n".join(lines)


@dataclass(frozen=True)
class FrameSet:
    """Every frame of one animation cycle, converted for one resolution."""

    key: ResolutionKey
    frames: Tuple[FrameGrid, ...]

    @classmethod
    def build(cls, key: ResolutionKey, frames: Sequence[FrameGrid]) -> "FrameSet":
        return cls(key=key, frames=tuple(frames))

    def __len__(self) -> int:
        return len(self.frames)

    def __getitem__(self, index: int) -> FrameGrid:
        return self.frames[index]

    def __iter__(self) -> Iterator[FrameGrid]:
        return iter(self.frames)
