"""
Configuration models

Typed, immutable view of config.yaml. Built and validated by ConfigManager.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from polishcow.models.enums import ConversionFailurePolicy, FitMode, OutputFormat

DEFAULT_RAMP = " .:-=+*#%@"


@dataclass(frozen=True)
class AsciiOptions:
    """Options passed through to the image -> ASCII conversion."""
    color: bool = True
    fit: FitMode = FitMode.BOX
    output_format: OutputFormat = OutputFormat.TRUECOLOR
    ramp: str = DEFAULT_RAMP


@dataclass(frozen=True)
class AppConfig:
    """
    Whole-program configuration

    Example (config.yaml):
        debug: false
        window:
          name: Polish Cow
          author: Sv443
        audio:
          sound_file: ./polishcow.mp3
          end_buffer: 0.4
        animation:
          directory: ./animation
          interval: 0.2
          sequence: [0, 1, 0, 1, 2, 3, 4, 3, 4, 2]
    """

    sound_file: Path
    animation_dir: Path
    animation_sequence: Tuple[int, ...]

    debug: bool = False
    title_name: str = "Polish Cow"
    title_author: str = "Sv443"
    end_buffer: float = 0.4
    min_size: Tuple[int, int] = (80, 30)
    min_aspect_ratio: float = 2.5
    animation_interval: float = 0.2
    padding: Tuple[int, int] = (0, 4)
    ascii: AsciiOptions = field(default_factory=AsciiOptions)
    exit_grace_period: float = 10.0
    conversion_failure: ConversionFailurePolicy = ConversionFailurePolicy.FATAL
    cache_max_entries: Optional[int] = None
