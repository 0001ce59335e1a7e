"""
Bundling Domain

Contract for packing a rendered site into a single downloadable archive.
"""

from .packager import IArchivePackager

__all__ = ['IArchivePackager']
