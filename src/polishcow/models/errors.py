"""
Domain errors

Every error carries a machine-readable code, a human message and optional
details so the entry point can report it uniformly before exiting.
"""

from pathlib import Path
from typing import Optional


class PolishCowError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigError(PolishCowError):
    """Startup precondition or configuration value is invalid"""
    def __init__(self, message: str, **details):
        super().__init__(
            code="CONFIG_ERROR",
            message=message,
            details=details,
        )


class ConversionError(PolishCowError):
    """A single source frame could not be converted to ASCII"""
    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        super().__init__(
            code="CONVERSION_ERROR",
            message=f'Failed to convert frame "{self.path.name}": {reason}',
            details={"path": str(self.path), "reason": reason},
        )


class PlaybackError(PolishCowError):
    """Audio subsystem failed to measure or play a clip"""
    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        super().__init__(
            code="PLAYBACK_ERROR",
            message=f'Failed to play sound file "{self.path}": {reason}',
            details={"path": str(self.path), "reason": reason},
        )
