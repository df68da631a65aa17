"""
AsciiConverter - image → FrameGrid conversion sized to a cell box.

Pipeline:
  1. open image with Pillow, flatten to RGB
  2. compute target cell size for the configured fit mode
     (terminal cells are ~twice as tall as wide, so height is compensated)
  3. resize, compute luminance with numpy, map onto the character ramp
  4. optionally keep the source pixel color for every cell
"""

from __future__ import annotations

import asyncio
from functools import partial
from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image

from polishcow.models.config import AsciiOptions
from polishcow.models.enums import FitMode
from polishcow.models.errors import ConversionError
from polishcow.models.frame import Cell, FrameGrid
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.FRAMES)

# Terminal characters are taller than they are wide, so compensate when scaling.
CHAR_ASPECT_RATIO = 0.5

LUMINANCE_WEIGHTS = np.array([0.299, 0.587, 0.114])


class AsciiConverter:
    """
    Converts one image file into a FrameGrid that fits a width x height cell box.

    `convert()` runs the CPU-bound work on the loop's default executor so that
    every frame of a set can be converted concurrently while the event loop
    keeps ticking.
    """

    def __init__(self, options: AsciiOptions, char_aspect_ratio: float = CHAR_ASPECT_RATIO):
        if not options.ramp:
            raise ValueError("Character ramp must not be empty")
        self.options = options
        self.char_aspect_ratio = char_aspect_ratio

    async def convert(self, path: Path, width: int, height: int) -> FrameGrid:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self.convert_sync, path, width, height))

    def convert_sync(self, path: Path, width: int, height: int) -> FrameGrid:
        """
        Convert synchronously.

        Raises:
            ConversionError: if the file cannot be read or decoded
        """
        path = Path(path)
        try:
            with Image.open(path) as image:
                rgb = image.convert("RGB")
                size = self.target_size(rgb.width, rgb.height, width, height)
                rgb = rgb.resize(size, Image.Resampling.LANCZOS)
            pixels = np.asarray(rgb, dtype=np.uint8)
        except (OSError, ValueError) as e:
            raise ConversionError(path, str(e)) from e

        grid = self._to_grid(pixels)
        log.debug(f"Converted {path.name}", size=f"{grid.width}x{grid.height}")
        return grid

    def target_size(self, image_width: int, image_height: int, width: int, height: int) -> Tuple[int, int]:
        """Cell size of the converted image for the configured fit mode."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Target size must be positive, got {width}x{height}")
        if image_width <= 0 or image_height <= 0:
            raise ValueError("Image has no pixels")

        fit = self.options.fit
        if fit is FitMode.STRETCH:
            return width, height

        # Cells needed for the full width / full height while keeping the aspect ratio
        height_for_width = round(image_height / image_width * width * self.char_aspect_ratio)
        width_for_height = round(image_width / image_height * height / self.char_aspect_ratio)

        if fit is FitMode.WIDTH:
            w, h = width, min(height, height_for_width)
        elif fit is FitMode.HEIGHT:
            w, h = min(width, width_for_height), height
        elif height_for_width <= height:
            w, h = width, height_for_width
        else:
            w, h = width_for_height, height

        return max(1, min(w, width)), max(1, min(h, height))

    def _to_grid(self, pixels: np.ndarray) -> FrameGrid:
        ramp = self.options.ramp
        luminance = pixels.astype(np.float64) @ LUMINANCE_WEIGHTS
        indices = np.clip(
            np.rint(luminance / 255.0 * (len(ramp) - 1)).astype(int), 0, len(ramp) - 1
        )

        if self.options.color:
            rows = tuple(
                tuple(
                    Cell(ramp[idx], (int(px[0]), int(px[1]), int(px[2])))
                    for idx, px in zip(index_row, pixel_row)
                )
                for index_row, pixel_row in zip(indices, pixels)
            )
        else:
            rows = tuple(
                tuple(Cell(ramp[idx]) for idx in index_row)
                for index_row in indices
            )

        return FrameGrid(rows)
