"""In-process dispatch of booking events to their subscribers."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

from studio_scheduler.domain.events import BookingEvent

logger = logging.getLogger(__name__)

Handler = Callable[[BookingEvent], None]


class EventBus:
    """Synchronous publish/subscribe for booking events.

    A handler subscribed to a base class also receives its subclasses.
    For one event, handlers for the most specific class run first, each
    class's handlers in registration order. A handler that raises stops
    dispatch and the error reaches the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type[BookingEvent], list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type[BookingEvent], handler: Handler) -> None:
        self._subscribers[event_type].append(handler)

    def handlers_for(self, event_type: type[BookingEvent]) -> list[Handler]:
        return [
            handler
            for cls in event_type.__mro__
            for handler in self._subscribers.get(cls, [])
        ]

    def publish(self, event: BookingEvent) -> None:
        handlers = self.handlers_for(type(event))
        logger.debug(
            "%s(%s) -> %d handler(s)", type(event).__name__, event.booking_id, len(handlers)
        )
        for handler in handlers:
            handler(event)
