"""
Export Runner Interface

Abstraction over where a reserved export actually executes.
"""

from abc import ABC, abstractmethod


class IExportRunner(ABC):
    """
    Dispatches a reserved export for background execution.

    Implementations must call StaticExportService.start_export with
    reserved=True for the given build and name.
    """

    name: str = "unknown"

    @abstractmethod
    def submit(self, build_id: str, export_name: str) -> None:
        """
        Dispatch an export.

        Args:
            build_id: Build to export
            export_name: Reserved export name

        Raises:
            Exception: If the export cannot be dispatched
        """
        pass

    def shutdown(self, wait: bool = True) -> None:
        """Release runner resources."""
        pass
