from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for application events"""
    TERMINAL = auto()            # Terminal device (SIGWINCH / geometry polling)
    RESIZE_COORDINATOR = auto()  # Gate decisions after a resize
