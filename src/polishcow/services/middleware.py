"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from polishcow.models.events import Event
from polishcow.utils.logger import get_logger, LogCategory
from polishcow.utils.serialization import Serializer

log = get_logger().for_category(LogCategory.EVENT)


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = Serializer.enum_to_str(event.source)
    data = event.to_data()

    if 'geometry' in data:
        data_str = f"geometry={Serializer.to_str(data['geometry'])}"
    else:
        data_str = str(data)

    log.debug(f"Event: {event.type.name} from {source_str} | {data_str}")
    return event
