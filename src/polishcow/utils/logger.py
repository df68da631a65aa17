"""
Category logger

    [14:23:45] CACHE     ✓ Frame set ready
               ├─ resolution: 120x36
               └─ frames: 6

One process-wide Logger. Modules bind a category at import time:

    log = get_logger().for_category(LogCategory.CACHE)

configure_logger() changes the singleton in place, so those bound loggers
follow level changes made later at startup.
"""

from datetime import datetime
from typing import Optional

from polishcow.models.enums import LogLevel, LogCategory

RESET = "\033[0m"
DIM = "\033[2m"

_LEVEL_ORDER = (LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR)

# level -> (symbol, color)
_LEVEL_STYLE = {
    LogLevel.DEBUG: ("·", DIM),
    LogLevel.INFO: ("✓", "\033[32m"),
    LogLevel.WARN: ("⚠", "\033[33m"),
    LogLevel.ERROR: ("✗", "\033[31m"),
}

_CATEGORY_COLORS = {
    LogCategory.CONFIG: "\033[36m",
    LogCategory.TERMINAL: "\033[94m",
    LogCategory.FRAMES: "\033[96m",
    LogCategory.CACHE: "\033[92m",
    LogCategory.ANIMATION: "\033[93m",
    LogCategory.AUDIO: "\033[35m",
    LogCategory.RESIZE: "\033[95m",
    LogCategory.EVENT: "\033[95m",
    LogCategory.SYSTEM: "\033[97m",
}
_DEFAULT_COLOR = "\033[37m"


class Logger:
    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
        self.min_level = min_level
        self.use_colors = use_colors

    def enabled(self, level: LogLevel) -> bool:
        return _LEVEL_ORDER.index(level) >= _LEVEL_ORDER.index(self.min_level)

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{RESET}" if self.use_colors else text

    def log(self, category: LogCategory, message: str, level: LogLevel = LogLevel.INFO, **details):
        """Print one message; keyword arguments become detail lines below it."""
        if not self.enabled(level):
            return

        symbol, color = _LEVEL_STYLE[level]
        head = " ".join((
            datetime.now().strftime("[%H:%M:%S]"),
            self._paint(category.name.ljust(9), _CATEGORY_COLORS.get(category, _DEFAULT_COLOR)),
            self._paint(symbol, color),
            self._paint(message, color),
        ))
        print(head)

        items = list(details.items())
        for i, (key, value) in enumerate(items):
            branch = "└─" if i == len(items) - 1 else "├─"
            print(f"{' ' * 11}{self._paint(branch, DIM)} {key}: {value}")

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> "BoundLogger":
        return BoundLogger(self, category)


class BoundLogger:
    """Logger with a fixed category."""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)


_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """Reconfigure the singleton in place (never replace it)."""
    _logger.min_level = min_level
    _logger.use_colors = use_colors
