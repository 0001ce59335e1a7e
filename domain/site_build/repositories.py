"""
Site Build Repositories

Repository interface for the builder's data store.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from .value_objects import BuildData, PublishStatus


class BuildDataRepository(ABC):
    """
    Abstract interface for reading builds and writing their publish status.

    The data store is owned by the builder; the export service only reads
    build snapshots and reports the outcome of an export.
    """

    @abstractmethod
    def load_build_data(self, build_id: str) -> BuildData:
        """
        Load the build snapshot for an export.

        Args:
            build_id: Build identifier

        Returns:
            BuildData snapshot

        Raises:
            DataLoadError: If the build cannot be fetched or parsed
        """
        pass  # pragma: no cover

    @abstractmethod
    def update_publish_status(self, build_id: str, status: PublishStatus) -> None:
        """
        Update the Build record's publish status and timestamp.

        Args:
            build_id: Build identifier
            status: New publish status

        Raises:
            StatusPersistError: If the update fails
        """
        pass  # pragma: no cover
