"""
Serialization utilities - enum and model conversion for config and logs

Provides bidirectional conversion between:
- Enums ↔ Strings (FitMode, OutputFormat, ConversionFailurePolicy, ...)
- Size pairs ↔ lists or "WxH" strings (window.min_size, window.padding)
"""

from typing import TypeVar, Type, Any, Optional, Sequence, Tuple
from enum import Enum

T = TypeVar('T', bound=Enum)


class Serializer:
    """Central enum and model serialization for config files and log output"""

    # ========================================================================
    # ENUM SERIALIZATION
    # ========================================================================

    @staticmethod
    def enum_to_str(value: Optional[Enum]) -> Optional[str]:
        """Convert any enum to string name"""
        return value.name if value else None

    @staticmethod
    def to_str(value) -> Optional[str]:
        """
        Polymorphic conversion: handles Enum, value objects and str types

        Args:
            value: Enum, TerminalGeometry, ResolutionKey, str, or None

        Returns:
            String representation or None
        """
        if value is None:
            return None
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, str):
            return value
        return str(value)

    @staticmethod
    def str_to_enum(value: str, enum_type: Type[T]) -> T:
        """
        Convert string to enum, raise ValueError if invalid

        Config files are written by hand, so names are matched
        case-insensitively ("box", "BOX" and "Box" all work).
        """
        if isinstance(value, enum_type):
            return value
        try:
            return enum_type[str(value).strip().upper()]
        except KeyError:
            valid = ", ".join(m.name.lower() for m in enum_type)
            raise ValueError(f"Invalid {enum_type.__name__}: {value} (expected one of: {valid})")

    # ========================================================================
    # SIZE SERIALIZATION
    # ========================================================================

    @staticmethod
    def pair_to_ints(value: Any, name: str) -> Tuple[int, int]:
        """
        Convert a [width, height] list (or "WxH" string) to an int pair

        Raises:
            ValueError: if value is not a pair of integers
        """
        if isinstance(value, str):
            value = value.lower().split("x")
        if not isinstance(value, Sequence) or len(value) != 2:
            raise ValueError(f"{name} must be a [width, height] pair, got {value!r}")
        try:
            return int(value[0]), int(value[1])
        except (TypeError, ValueError):
            raise ValueError(f"{name} must contain integers, got {value!r}")

