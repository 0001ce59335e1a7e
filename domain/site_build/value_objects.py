"""
Site Build Value Objects

Immutable snapshot of a Build as loaded from the data store.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class PublishStatus(Enum):
    """Publish status values written to the Build record."""
    PUBLISHED = "PUBLISHED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class PageMeta:
    """SEO metadata of a page."""
    title: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PageMeta':
        """Create PageMeta from dictionary, ignoring non-string values."""
        data = data or {}
        title = data.get("title")
        description = data.get("description")
        return cls(
            title=title if isinstance(title, str) else None,
            description=description if isinstance(description, str) else None,
        )


@dataclass(frozen=True)
class Page:
    """
    Value object for a page of the build.

    Attributes:
        id: Page identifier
        path: Route pattern (e.g. "/", "/about", "/blog/*")
        name: Display name
        meta: SEO metadata
    """
    id: str
    path: str
    name: str
    meta: PageMeta = field(default_factory=PageMeta)

    @property
    def is_wildcard(self) -> bool:
        """Check whether the route contains a wildcard and cannot map to a file."""
        return "*" in self.path

    def display_title(self) -> str:
        """Title used in the rendered document."""
        return self.meta.title or self.name or "Untitled Page"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Page':
        """Create Page from dictionary."""
        return cls(
            id=str(data.get("id", "")),
            path=data.get("path") or "/",
            name=data.get("name") or "",
            meta=PageMeta.from_dict(data.get("meta")),
        )


@dataclass(frozen=True)
class AssetRef:
    """Reference to an uploaded asset."""
    id: str
    name: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to manifest entry."""
        return {"id": self.id, "name": self.name, "type": self.type}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AssetRef':
        """Create AssetRef from dictionary."""
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            type=data.get("type") or "file",
        )


@dataclass(frozen=True)
class StyleRule:
    """Opaque style declaration; only counted by the lightweight exporter."""
    key: str
    value: Any = None


@dataclass(frozen=True)
class BuildInfo:
    """Identity and version of a build."""
    id: str
    project_id: str
    version: int
    created_at: Optional[str] = None


@dataclass(frozen=True)
class BuildData:
    """
    Read-only snapshot of a build fetched once per export.

    Attributes:
        build: Build identity
        pages: Pages in build order
        assets: Assets of the project
        styles: Style declarations of the build
    """
    build: BuildInfo
    pages: Tuple[Page, ...] = ()
    assets: Tuple[AssetRef, ...] = ()
    styles: Tuple[StyleRule, ...] = ()
