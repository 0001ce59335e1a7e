"""
Export Job Repositories

Repository interface for export job persistence.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entities import ExportJob


class ExportJobRepository(ABC):
    """Abstract repository interface for the export job registry."""

    @abstractmethod
    def save(self, job: ExportJob) -> bool:
        """
        Insert or overwrite a job.

        Args:
            job: ExportJob to save

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    def save_if_not_pending(self, job: ExportJob) -> bool:
        """
        Atomically insert a job unless a pending job with the same name exists.

        Terminal jobs with the same name are overwritten.

        Args:
            job: ExportJob to insert

        Returns:
            True if the job was stored, False if a pending job holds the name
        """
        pass

    @abstractmethod
    def get(self, name: str) -> Optional[ExportJob]:
        """
        Retrieve a job by export name.

        Args:
            name: Export name

        Returns:
            ExportJob if found, None otherwise
        """
        pass

    @abstractmethod
    def delete(self, name: str) -> bool:
        """
        Delete a job.

        Args:
            name: Export name

        Returns:
            True if deleted, False otherwise
        """
        pass

    @abstractmethod
    def delete_if_unchanged(self, name: str, created_at: datetime) -> bool:
        """
        Atomically delete a job only if it still carries the given timestamp.

        Every transition restamps created_at, so a job that was resubmitted,
        completed or failed since it was read is left in place.

        Args:
            name: Export name
            created_at: Timestamp observed when the job was read

        Returns:
            True if the job was deleted, False if it is gone or has changed
        """
        pass

    @abstractmethod
    def list_all(self) -> List[ExportJob]:
        """
        Return a snapshot of every job in the registry.

        Returns:
            List of ExportJob instances in no particular order
        """
        pass
