"""
Event Publisher

In-process fan-out of domain events to subscribed callables.
"""

import logging
from threading import Lock
from typing import Callable, Dict, List, Type

from domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


def _handler_name(handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventPublisher:
    """
    Dispatches each published event to the handlers of its class and of
    every base class, in MRO order. Subscribing to ``DomainEvent`` therefore
    receives everything.

    A failing handler is logged and skipped; the publisher never raises into
    the export that produced the event. Safe to use from runner threads.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}
        self._lock = Lock()

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"{_handler_name(handler)} subscribed to {event_type.__name__}")

    def _handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        with self._lock:
            matched = []
            for cls in event_type.__mro__:
                matched.extend(self._handlers.get(cls, ()))
            return matched

    def publish(self, event: DomainEvent) -> None:
        event_name = type(event).__name__

        for handler in self._handlers_for(type(event)):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Handler {_handler_name(handler)} failed on {event_name}: {e}",
                    exc_info=True,
                )
