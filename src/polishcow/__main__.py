"""
Command line entry point

    polishcow [--config PATH] [--debug]
    python -m polishcow
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from polishcow import __version__
from polishcow.main_asyncio import main
from polishcow.models.enums import LogCategory
from polishcow.utils.logger import get_logger

log = get_logger().for_category(LogCategory.SYSTEM)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="polishcow",
        description="Plays the Polish Cow song with an ASCII animation sized to your terminal.",
    )
    parser.add_argument(
        "--config",
        default=None,
        metavar="PATH",
        help="Path to config.yaml (default: bundled configuration)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug logging and frame info above the animation",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    # Frames and log tree symbols are not ASCII
    if hasattr(sys.stdout, "reconfigure") and (sys.stdout.encoding or "").lower() != "utf-8":
        sys.stdout.reconfigure(encoding="utf-8")  # type: ignore

    try:
        code = asyncio.run(main(args.config, args.debug))
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    run()
