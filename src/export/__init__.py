"""
Export pipeline placing archive documents into a plain folder tree.
"""

from .driver import ExportDriver, ExportStats, log_summary, write_report
from .errors import BlobNotFoundError, ConfigurationError, DocumentExportError
from .organizer import ExportOrganizer

__all__ = [
    "BlobNotFoundError",
    "ConfigurationError",
    "DocumentExportError",
    "ExportDriver",
    "ExportOrganizer",
    "ExportStats",
    "log_summary",
    "write_report",
]
