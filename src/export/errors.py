"""
Error types raised while exporting an archive.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ConfigurationError(RuntimeError):
    """Raised for invalid inputs or outputs before any document is processed."""


class DocumentExportError(RuntimeError):
    """A single document could not be exported."""

    def __init__(
        self,
        document_id: int,
        message: str,
        source_path: Optional[Path] = None,
        target_path: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.document_id = document_id
        self.message = message
        self.source_path = source_path
        self.target_path = target_path

    def __str__(self) -> str:
        return (
            f"Document {self.document_id}: {self.message} "
            f"(source: {self.source_path or 'n/a'}, target: {self.target_path or 'n/a'})"
        )

    def to_dict(self) -> dict:
        return {
            "document_id": self.document_id,
            "error": self.message,
            "error_type": type(self).__name__,
            "source_path": str(self.source_path) if self.source_path else None,
            "target_path": self.target_path,
        }


class BlobNotFoundError(DocumentExportError):
    """No stored file exists for a document's blob id."""
