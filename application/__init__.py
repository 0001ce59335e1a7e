"""
Application Services Layer

Orchestrates domain services and coordinates use cases.
"""

from .event_publisher import EventPublisher
from .export_job_service import ExportJobService
from .static_export_service import StaticExportService

__all__ = [
    'EventPublisher',
    'ExportJobService',
    'StaticExportService',
]
