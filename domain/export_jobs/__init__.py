"""
Export Jobs Domain

Tracks static export jobs by name, their status and their bundle files.
"""

from .entities import ExportJob
from .value_objects import ExportName, ExportStatus
from .services import (
    DEFAULT_EXPORT_TTL,
    remove_file_quietly,
    DuplicateExportError,
    ExportJobRegistry,
    ExportNotFoundError,
)
from .repositories import ExportJobRepository

__all__ = [
    'ExportJob',
    'ExportName',
    'ExportStatus',
    'ExportJobRegistry',
    'ExportJobRepository',
    'ExportNotFoundError',
    'DuplicateExportError',
    'DEFAULT_EXPORT_TTL',
    'remove_file_quietly',
]
