"""
Site Renderer Interface

Abstract interface for turning a build snapshot into a static file tree.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .value_objects import BuildData


@dataclass
class RenderSummary:
    """
    Outcome of rendering a build into an output directory.

    Attributes:
        files: Relative paths of every file written
        pages: Relative paths of the HTML pages written
        skipped_routes: Wildcard routes that were not rendered
        collisions: Routes written to a disambiguated path, mapped to that path
    """
    files: List[str] = field(default_factory=list)
    pages: List[str] = field(default_factory=list)
    skipped_routes: List[str] = field(default_factory=list)
    collisions: Dict[str, str] = field(default_factory=dict)


class ISiteRenderer(ABC):
    """
    Contract for the site renderer.

    Implementations write HTML pages, a stylesheet, an asset manifest,
    build metadata and a README under the output directory.
    """

    @abstractmethod
    def render(self, build_data: BuildData, output_dir: Path) -> RenderSummary:
        """
        Render the build into output_dir.

        Args:
            build_data: Build snapshot
            output_dir: Existing, empty directory to write into

        Returns:
            RenderSummary describing what was written

        Raises:
            RenderError: If any file cannot be written
        """
        pass  # pragma: no cover
