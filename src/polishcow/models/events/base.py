from __future__ import annotations

import time
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from polishcow.models.events.types import EventType
from polishcow.models.events.sources import EventSource

_HEADER = ("type", "source", "timestamp")


@dataclass(init=False)
class Event:
    """
    Header shared by every event. Subclasses declare their payload fields and
    fix `type` and `source` in their own __init__.
    """

    type: EventType
    source: Optional[EventSource]
    timestamp: float

    def __init__(self, *, type: EventType, source: Optional[EventSource]):
        self.type = type
        self.source = source
        self.timestamp = time.time()

    def to_data(self) -> Dict[str, Any]:
        """Payload fields only."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name not in _HEADER}
