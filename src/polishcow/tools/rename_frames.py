#!/usr/bin/env python3
"""
Frame renamer

Takes raw frames exported by ezgif.com ("frame_00_delay-0.1s.jpg",
"frame_01_delay-0.1s.jpg", ...) and moves them to "<output>/<index>.jpg" so
the animation directory can use them directly.

Usage:
    From Python:
        from polishcow.tools.rename_frames import rename_frames
        rename_frames(Path("frames"), Path("frames-renamed"))

    From command line:
        polishcow-rename-frames --source ./frames --output ./frames-renamed
"""

import re
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from polishcow.models.enums import LogCategory, LogLevel
from polishcow.utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.TOOLS)

# ezgif names carry the frame number at character offset 6 ("frame_NN...")
INDEX_OFFSET = 6
INDEX_WIDTH = 2

_LEADING_DIGITS = re.compile(r"^\d+")


def parse_ezgif_index(filename: str) -> int:
    """
    Frame index encoded in an ezgif.com frame name.

    Raises:
        ValueError: if the name does not follow the ezgif.com naming scheme
    """
    match = _LEADING_DIGITS.match(filename[INDEX_OFFSET:INDEX_OFFSET + INDEX_WIDTH])
    if match is None:
        raise ValueError(f'File "{filename}" doesn\'t match ezgif.com naming scheme')
    return int(match.group(0))


def rename_frames(source_dir: Path, output_dir: Path, extension: str = ".jpg") -> List[Path]:
    """
    Move every file of source_dir to output_dir/<index><extension>.

    Files are processed in name order. The output directory is created if
    needed. Stops at the first file that does not match the naming scheme;
    files moved before that stay moved.

    Returns:
        Destination paths in processing order
    """
    source_dir = Path(source_dir)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    files = sorted(p for p in source_dir.iterdir() if p.is_file())
    moved: List[Path] = []

    for i, path in enumerate(files, start=1):
        try:
            index = parse_ezgif_index(path.name)
        except ValueError:
            raise ValueError(f'File at path "{path}" doesn\'t match ezgif.com naming scheme') from None

        destination = output_dir / f"{index}{extension}"
        shutil.move(str(path), str(destination))
        moved.append(destination)
        log.info(f"Processed {i} of {len(files)}", file=path.name, to=destination.name)

    log.info("Done.", frames=len(moved))
    return moved


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for the frame renamer."""
    import argparse

    parser = argparse.ArgumentParser(description="Rename ezgif.com frames to <index>.jpg")
    parser.add_argument(
        "--source",
        default="./frames",
        help="Directory with the raw ezgif.com frames (default: ./frames)",
    )
    parser.add_argument(
        "--output",
        default="./frames-renamed",
        help="Directory the renamed frames are moved to (default: ./frames-renamed)",
    )
    parser.add_argument(
        "--extension",
        default=".jpg",
        help="Extension of the renamed files (default: .jpg)",
    )
    args = parser.parse_args(argv)

    configure_logger(LogLevel.INFO)

    source = Path(args.source)
    if not source.is_dir():
        log.error(f'Source directory "{source}" doesn\'t exist')
        return 1

    try:
        rename_frames(source, Path(args.output), args.extension)
    except ValueError as e:
        log.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
