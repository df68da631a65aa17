"""
Logger singleton, level filtering and detail rendering.
"""

import pytest

from polishcow.models.enums import LogCategory, LogLevel
from polishcow.utils.logger import configure_logger, get_category_logger, get_logger


@pytest.fixture(autouse=True)
def restore_logger():
    logger = get_logger()
    level, colors = logger.min_level, logger.use_colors
    yield
    configure_logger(level, colors)


def test_configure_logger_preserves_singleton():
    original = get_logger()

    configure_logger(LogLevel.DEBUG)

    assert get_logger() is original
    assert get_logger().min_level is LogLevel.DEBUG


def test_bound_logger_follows_reconfiguration(capsys):
    log = get_category_logger(LogCategory.CACHE)

    configure_logger(LogLevel.WARN, use_colors=False)
    log.info("hidden")
    log.warn("Frame set evicted", resolution="120x36")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "CACHE" in out
    assert "Frame set evicted" in out
    assert "└─ resolution: 120x36" in out
