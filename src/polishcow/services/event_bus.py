"""
Event Bus - routes terminal and playback events between components

    bus.subscribe(EventType.TERMINAL_RESIZE, coordinator.on_resize)
    bus.add_middleware(log_middleware)
    await bus.publish(TerminalResizeEvent(geometry))
"""

import inspect
from typing import Callable, Dict, List, Optional

from polishcow.models.events import Event, EventType
from polishcow.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Handler = Callable[[Event], object]
Middleware = Callable[[Event], Optional[Event]]


class EventBus:
    """
    Pub-sub for the resize path.

    Handlers run in subscription order and may be sync or async. A handler
    that raises is logged and the remaining handlers still run. Middleware
    sees every event first and may replace it or drop it by returning None.
    """

    def __init__(self):
        self._handlers: Dict[EventType, List[Handler]] = {}
        self._middleware: List[Middleware] = []

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=getattr(handler, "__name__", repr(handler)),
        )

    def add_middleware(self, middleware: Middleware) -> None:
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=getattr(middleware, "__name__", repr(middleware)))

    async def publish(self, event: Event) -> None:
        for middleware in self._middleware:
            event = middleware(event)
            if event is None:
                return

        handlers = self._handlers.get(event.type)
        if not handlers:
            log.debug("No handlers for event", event_type=event.type.name)
            return

        for handler in list(handlers):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                log.error(
                    f"Event handler failed: {getattr(handler, '__name__', '?')} for {event.type.name}",
                    error=str(e),
                    error_type=type(e).__name__,
                )
