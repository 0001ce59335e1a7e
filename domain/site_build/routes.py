"""
Route Mapping

Maps page routes to file paths inside the exported site.
"""

import hashlib
import logging
import re
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# Characters that are not allowed in Windows file names
FORBIDDEN_PATH_CHARS = re.compile(r'[<>:"|?]')
WILDCARD_TOKEN = "*"
INDEX_FILE = "index.html"


def is_static_route(route: str) -> bool:
    """Check whether a route can be represented as a static file."""
    return WILDCARD_TOKEN not in (route or "")


def sanitize_route(route: str) -> str:
    """
    Replace characters not allowed in file names with underscores.

    Args:
        route: Page route pattern

    Returns:
        Sanitized route
    """
    return FORBIDDEN_PATH_CHARS.sub("_", route or "/")


def page_html_path(route: str) -> Optional[str]:
    """
    Compute the relative HTML file path for a page route.

    "/" maps to "index.html" and "/about" maps to "about/index.html".
    Empty and "." segments are dropped and ".." segments are neutralised
    so the result always stays inside the output directory.

    Args:
        route: Page route pattern

    Returns:
        Relative POSIX path, or None for wildcard routes
    """
    if not is_static_route(route):
        return None

    sanitized = sanitize_route(route)
    segments = []
    for segment in sanitized.split("/"):
        if segment in ("", "."):
            continue
        segments.append("__" if segment == ".." else segment)

    if not segments:
        return INDEX_FILE

    return "/".join(segments) + "/" + INDEX_FILE


def route_digest(route: str) -> str:
    """Short stable digest of a route, used to disambiguate colliding paths."""
    return hashlib.sha1(route.encode("utf-8")).hexdigest()[:8]


class OutputPathAllocator:
    """
    Assigns a unique output file per page route.

    When two different routes sanitize to the same file, the later one is
    written to "<dir>-<digest>/index.html" instead of overwriting the first.
    """

    def __init__(self):
        self._assigned: Dict[str, str] = {}
        self.collisions: Dict[str, str] = {}

    def allocate(self, route: str) -> Optional[str]:
        """
        Reserve an output path for a route.

        Args:
            route: Page route pattern

        Returns:
            Relative path, or None for wildcard routes
        """
        path = page_html_path(route)
        if path is None:
            return None

        if path not in self._assigned:
            self._assigned[path] = route
            return path

        directory = path[: -len(INDEX_FILE)].rstrip("/") or "index"
        stem = f"{directory}-{route_digest(route)}"
        unique = f"{stem}/{INDEX_FILE}"
        counter = 2
        while unique in self._assigned:
            unique = f"{stem}-{counter}/{INDEX_FILE}"
            counter += 1

        logger.warning(
            f"Route {route!r} collides with {self._assigned[path]!r} at {path}, "
            f"writing to {unique}"
        )
        self._assigned[unique] = route
        self.collisions[route] = unique
        return unique
