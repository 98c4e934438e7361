"""
Archive access: object records, label sanitizing, folder paths and blob lookup.
"""

from .blobstore import BlobLocator, find_blob, locate
from .hierarchy import HierarchyResolver
from .models import ArchiveObject
from .reader import ArchiveReader, ArchiveReadError
from .sanitizer import sanitize

__all__ = [
    "ArchiveObject",
    "ArchiveReader",
    "ArchiveReadError",
    "BlobLocator",
    "HierarchyResolver",
    "find_blob",
    "locate",
    "sanitize",
]
