"""
Domain Events

Immutable records of what happened to an export. Entities and services
return them; the EventPublisher hands them to side-effect handlers such
as the event logger.
"""

from abc import ABC
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, List


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    ``aggregate_id`` is always the export name, which is the registry key.
    """
    aggregate_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the event into JSON-friendly values, tagged with its type."""
        data: Dict[str, Any] = {"event_type": type(self).__name__}
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, (list, tuple)):
                value = list(value)
            data[field.name] = value
        return data


@dataclass(frozen=True)
class ExportStartedEvent(DomainEvent):
    """An export was reserved as pending."""
    build_id: str


@dataclass(frozen=True)
class SiteRenderedEvent(DomainEvent):
    """
    The renderer finished writing the output tree.

    ``skipped_routes`` lists wildcard routes that have no static file.
    """
    build_id: str
    rendered_pages: int
    skipped_routes: List[str]


@dataclass(frozen=True)
class ExportCompletedEvent(DomainEvent):
    """The bundle at ``file_path`` is ready for download."""
    build_id: str
    file_path: str


@dataclass(frozen=True)
class ExportFailedEvent(DomainEvent):
    build_id: str
    error_message: str
    error_category: str


@dataclass(frozen=True)
class BuildStatusPersistFailedEvent(DomainEvent):
    """
    Writing ``publish_status`` back to the Build record failed.

    Published in addition to the export's own outcome, never instead of it.
    """
    build_id: str
    publish_status: str
    error_message: str


@dataclass(frozen=True)
class ExportExpiredEvent(DomainEvent):
    """The sweep evicted an export; ``status`` is what it had at eviction."""
    status: str
