"""
Document export pipeline: path resolution, blob lookup, placement and ledger.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from archive import ArchiveObject, BlobLocator, HierarchyResolver
from conversion import ConversionError
from ledger import ExportLedger

from .errors import BlobNotFoundError, DocumentExportError
from .organizer import ExportOrganizer


@dataclass
class ExportStats:
    """Summary of an export run."""

    total: int = 0
    exported: int = 0
    already_exported: int = 0
    skipped_no_content: int = 0
    errors: List[DocumentExportError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "exported": self.exported,
            "already_exported": self.already_exported,
            "skipped_no_content": self.skipped_no_content,
            "error_count": len(self.errors),
            "errors": [error.to_dict() for error in self.errors],
        }


class ExportDriver:
    """Export documents one at a time, skipping those the ledger already holds."""

    def __init__(
        self,
        resolver: HierarchyResolver,
        locator: BlobLocator,
        ledger: ExportLedger,
        organizer: ExportOrganizer,
        logger: Optional[logging.Logger] = None,
        progress_log_interval: int = 500,
        limit: int = 0,
    ) -> None:
        self.resolver = resolver
        self.locator = locator
        self.ledger = ledger
        self.organizer = organizer
        self.logger = logger or logging.getLogger("elo_export")
        self.progress_log_interval = progress_log_interval
        self.limit = limit

    def run(self, documents: Iterable[ArchiveObject]) -> ExportStats:
        """Export every document in source order and return the run summary."""
        stats = ExportStats()
        for document in documents:
            if self.limit and stats.exported >= self.limit:
                self.logger.info("Export limit of %s documents reached.", self.limit)
                break
            stats.total += 1
            self._export_one(document, stats)
            if self.progress_log_interval > 0 and stats.total % self.progress_log_interval == 0:
                self.logger.info(
                    "Export progress: %s documents exported=%s resumed=%s no_content=%s errors=%s",
                    stats.total,
                    stats.exported,
                    stats.already_exported,
                    stats.skipped_no_content,
                    len(stats.errors),
                )
        return stats

    def _export_one(self, document: ArchiveObject, stats: ExportStats) -> None:
        if self.ledger.is_exported(document.id):
            stats.already_exported += 1
            return
        if not document.has_content:
            stats.skipped_no_content += 1
            self.logger.debug("Skipped document without content: %s", document.id)
            return

        target: Optional[str] = None
        source: Optional[Path] = None
        try:
            target = self.resolver.document_path(document)
            candidate = self.locator.locate(document.blob_id)
            source = self.locator.find(document.blob_id)
            if source is None:
                raise BlobNotFoundError(
                    document.id,
                    f"File not found for blob {document.blob_id} (pattern: {candidate}.*)",
                    source_path=candidate,
                    target_path=target,
                )
            final_path = self.organizer.place(source, target)
            self.ledger.mark_exported(document.id)
        except BlobNotFoundError as exc:
            stats.errors.append(exc)
            self.logger.warning("%s", exc)
            return
        except (ConversionError, OSError, ValueError) as exc:
            error = DocumentExportError(document.id, str(exc), source_path=source, target_path=target)
            stats.errors.append(error)
            self.logger.error("%s", error)
            return
        except Exception as exc:
            error = DocumentExportError(document.id, str(exc), source_path=source, target_path=target)
            stats.errors.append(error)
            self.logger.exception("Unexpected failure exporting document %s", document.id)
            return

        stats.exported += 1
        self.logger.debug("Exported document %s: %s -> %s", document.id, source.name, final_path)


def write_report(stats: ExportStats, report_dir: Path) -> Path:
    """Write the run summary as JSON and return its path."""
    report_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    report_path = report_dir / f"export_report_{timestamp}.json"
    payload = {"generated_at": datetime.utcnow().isoformat(), **stats.to_dict()}
    report_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return report_path


def log_summary(stats: ExportStats, logger: logging.Logger, max_errors: int = 10) -> None:
    """Log counters and the first few errors of a run."""
    logger.info("=== Export Summary ===")
    logger.info("Documents seen: %s", stats.total)
    logger.info("Exported: %s", stats.exported)
    logger.info("Already exported: %s", stats.already_exported)
    logger.info("Skipped without content: %s", stats.skipped_no_content)
    logger.info("Errors: %s", len(stats.errors))
    for error in stats.errors[:max_errors]:
        logger.warning("  %s", error)
    if len(stats.errors) > max_errors:
        logger.warning("  ... and %s more errors", len(stats.errors) - max_errors)
