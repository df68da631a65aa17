"""
FrameSource - discovers the source images of one animation cycle.

A file counts as a frame when:
  - its extension is in the allow-list (case-insensitive)
  - its name starts with a decimal numeral ("0.png", "12_cow.jpg")

Frames are ordered by their raw filename, lexicographically. That means
"10.png" sorts before "2.png"; name frames with zero padding ("02.png") when
there are more than ten of them.
"""

import re
from pathlib import Path
from typing import List, Union

from polishcow.models.errors import ConfigError
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.FRAMES)

FRAME_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tiff", ".tif"})

_LEADING_NUMERAL = re.compile(r"^\d")


def is_frame_file(path: Path) -> bool:
    return (
        path.is_file()
        and path.suffix.lower() in FRAME_EXTENSIONS
        and _LEADING_NUMERAL.match(path.name) is not None
    )


class FrameSource:
    """Lists the animation frames found in one directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def exists(self) -> bool:
        return self.directory.is_dir()

    def list_frames(self) -> List[Path]:
        """
        Return the ordered frame paths.

        Raises:
            ConfigError: if the directory does not exist or holds no frames
        """
        if not self.exists():
            raise ConfigError(
                f'Animation directory at path "{self.directory}" doesn\'t exist.',
                directory=str(self.directory),
            )

        frames = sorted(
            (entry for entry in self.directory.iterdir() if is_frame_file(entry)),
            key=lambda p: p.name,
        )

        if not frames:
            raise ConfigError(
                f'Animation directory at path "{self.directory}" contains no frames.',
                directory=str(self.directory),
            )

        log.debug(f"Found {len(frames)} frames", directory=str(self.directory))
        return frames
