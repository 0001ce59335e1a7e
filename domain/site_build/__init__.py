"""
Site Build Domain

Build snapshots, route-to-file mapping and the renderer contract.
"""

from .value_objects import (
    AssetRef,
    BuildData,
    BuildInfo,
    Page,
    PageMeta,
    PublishStatus,
    StyleRule,
)
from .repositories import BuildDataRepository
from .renderer import ISiteRenderer, RenderSummary
from .routes import OutputPathAllocator, page_html_path, sanitize_route

__all__ = [
    'AssetRef',
    'BuildData',
    'BuildInfo',
    'Page',
    'PageMeta',
    'PublishStatus',
    'StyleRule',
    'BuildDataRepository',
    'ISiteRenderer',
    'RenderSummary',
    'OutputPathAllocator',
    'page_html_path',
    'sanitize_route',
]
