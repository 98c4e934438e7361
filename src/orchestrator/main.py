"""
Primary orchestration entry point for the archive export tool.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from archive import ArchiveReader, ArchiveReadError, BlobLocator, HierarchyResolver
from config import AppConfig
from conversion import IMAGE_EXTS, ConversionRegistry, ImageConverter
from export import ConfigurationError, ExportDriver, ExportOrganizer, ExportStats, log_summary, write_report
from ledger import DEFAULT_LEDGER_FILE, ExportLedger
from utils import InstanceLockError, acquire_output_lock, setup_logging

DEFAULT_OUTPUT = "./nextcloud-export"


class ExportOrchestrator:
    """Wire the archive reader, resolver, organizer and ledger into one export run."""

    def __init__(
        self,
        config: AppConfig,
        database_path: Path,
        files_path: Path,
        output_path: Path,
        limit: Optional[int] = None,
        verbose: bool = False,
    ) -> None:
        self.config = config
        self.database_path = database_path
        self.files_path = files_path
        self.output_path = output_path
        self.logs_root = self.config.resolve_path("paths", "logs", default="logs")
        self.loggers = setup_logging(self.logs_root, verbose=verbose)
        self.logger = self.loggers["main"]
        self.movement_logger = self.loggers["movement"]
        self.limit = limit if limit is not None else int(self.config.get("export", "limit", default=0))
        self.progress_log_interval = int(
            self.config.get("export", "progress_log_interval", default=500)
        )
        self.ledger_file = str(self.config.get("export", "ledger_file", default=DEFAULT_LEDGER_FILE))
        self.image_extensions = list(
            self.config.get("conversion", "image_extensions", default=sorted(IMAGE_EXTS))
        )
        self.pdf_resolution = float(self.config.get("conversion", "pdf_resolution", default=200))

    def validate(self) -> None:
        """Check inputs and output before any document is touched."""
        if not self.database_path.is_file():
            raise ConfigurationError(f"Database file not found: {self.database_path}")
        if not self.files_path.is_dir():
            raise ConfigurationError(f"Files directory not found: {self.files_path}")
        try:
            self.output_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(f"Cannot create output directory {self.output_path}: {exc}") from exc
        if not os.access(self.output_path, os.W_OK):
            raise ConfigurationError(f"Output directory is not writable: {self.output_path}")

    def run(self) -> ExportStats:
        """Run a full export and return its summary."""
        self.validate()
        self.logger.info("=== Archive Export Started ===")
        self.logger.info("Database: %s", self.database_path)
        self.logger.info("Files path: %s", self.files_path)
        self.logger.info("Output path: %s", self.output_path)

        lock = acquire_output_lock(self.output_path)
        try:
            reader = ArchiveReader(self.database_path, logger=self.logger)
            documents = reader.documents()
            self.logger.info("Found %s documents in database", len(documents))

            resolver = HierarchyResolver(reader.folders(), logger=self.logger)
            folder_paths = resolver.resolve_all()
            self.logger.info("Resolved %s folder paths", len(folder_paths))

            registry = ConversionRegistry.with_image_conversion(
                ImageConverter(resolution=self.pdf_resolution, logger=self.logger),
                extensions=self.image_extensions,
            )
            organizer = ExportOrganizer(self.output_path, registry, movement_logger=self.movement_logger)
            organizer.initialize()
            ledger = ExportLedger(self.output_path / self.ledger_file, logger=self.logger)
            self.logger.info("Previously exported documents: %s", ledger.count())

            driver = ExportDriver(
                resolver,
                BlobLocator(self.files_path),
                ledger,
                organizer,
                logger=self.logger,
                progress_log_interval=self.progress_log_interval,
                limit=self.limit,
            )
            stats = driver.run(documents)
        finally:
            lock.release()

        log_summary(stats, self.logger)
        report_path = write_report(stats, self.logs_root)
        self.logger.info("Report written to %s", report_path)
        self.logger.info("Export completed. Output: %s", self.output_path)
        return stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elo-export",
        description="Export an ELO archive into a plain folder tree ready for file sync.",
    )
    parser.add_argument("database", help="Path to the archive database (.mdb or JSON-lines dump)")
    parser.add_argument("files", help="Path to the archive files directory (contains DMS_1)")
    parser.add_argument("-o", "--output", default=None, help=f"Output directory (default: {DEFAULT_OUTPUT})")
    parser.add_argument("--config", default=None, help="Optional config path override")
    parser.add_argument("--limit", type=int, default=None, help="Stop after exporting this many documents")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    try:
        config = AppConfig.load_or_default(Path(args.config) if args.config else None)
    except (FileNotFoundError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    if args.output:
        output = Path(args.output)
    else:
        output = config.resolve_path("paths", "output", default=DEFAULT_OUTPUT)
    orchestrator = ExportOrchestrator(
        config,
        database_path=Path(args.database),
        files_path=Path(args.files),
        output_path=output,
        limit=args.limit,
        verbose=args.verbose,
    )
    try:
        orchestrator.run()
    except ConfigurationError as exc:
        orchestrator.logger.error("%s", exc)
        return 1
    except ArchiveReadError as exc:
        orchestrator.logger.error("Failed to read archive: %s", exc)
        return 1
    except InstanceLockError as exc:
        orchestrator.logger.error("%s Output: %s", exc, orchestrator.output_path)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
