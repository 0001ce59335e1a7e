"""
Dependency Injection Container

Holds the services wired up by ``create_app`` so that API handlers and
Celery tasks resolve the same registry, publisher and export service.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(Exception):
    """Raised when resolving a type nothing was registered for."""


class DependencyContainer:
    """Type-keyed registry of the shared service instances."""

    def __init__(self):
        self._services: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        with self._lock:
            self._services[interface] = implementation
        logger.debug(f"Registered {interface.__name__} instance")

    def resolve(self, interface: Type[T]) -> T:
        """
        Return the service for ``interface``.

        Raises:
            DependencyNotFoundError: nothing is registered for the type
        """
        with self._lock:
            if interface not in self._services:
                raise DependencyNotFoundError(f"Nothing registered for {interface.__name__}")
            return self._services[interface]

    def setup_event_handlers(self, event_publisher, event_handler_classes: Optional[List[Type]] = None) -> None:
        """
        Attach infrastructure handlers to every domain event.

        Defaults to the logging handler, which writes to the
        ``site_export.events`` logger.
        """
        from domain.events import DomainEvent
        from infrastructure.event_handlers.logging_handler import LoggingEventHandler

        for handler_class in event_handler_classes or [LoggingEventHandler]:
            if handler_class is LoggingEventHandler:
                handler = LoggingEventHandler(logging.getLogger("site_export.events"))
            else:
                handler = handler_class()
            event_publisher.subscribe(DomainEvent, handler.handle)
            logger.debug(f"Subscribed {handler_class.__name__} to domain events")
