"""
Fatal error reporting.

Fatal errors are printed in bold red, the process then waits out a grace
period so the message can be read before the window closes, and the entry
point exits with code 1.
"""

import asyncio
import sys
from typing import Optional, TextIO

from polishcow.models.errors import PolishCowError
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)

BOLD_RED = "\x1b[31m\x1b[1m"
RESET = "\x1b[0m"


def format_fatal(error: BaseException) -> str:
    message = error.message if isinstance(error, PolishCowError) else str(error) or type(error).__name__
    return f"\n{BOLD_RED}{message}{RESET}\n\n(Process exits automatically)\n"


async def report_fatal(
    error: BaseException,
    grace_period: float = 10.0,
    stream: Optional[TextIO] = None,
) -> None:
    """Print the error for the user, then wait `grace_period` seconds."""
    stream = stream or sys.stdout
    details = error.details if isinstance(error, PolishCowError) else {}
    code = error.code if isinstance(error, PolishCowError) else type(error).__name__

    log.debug(f"Fatal: {error}", code=code, **details)
    stream.write(format_fatal(error))
    stream.flush()

    if grace_period > 0:
        await asyncio.sleep(grace_period)
