"""
Append-only ledger of exported document ids for crash-safe resume.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LEDGER_FILE = "exported_ids.txt"


class ExportLedger:
    """Track exported document ids in a newline-delimited append-only file.

    The file is replayed lazily on first access. Only complete, newline-terminated
    lines count as entries; non-numeric lines are skipped. A trailing fragment left by
    an interrupted append is cut off before the next append so it never merges with a
    new entry. Each mark is flushed and fsynced before it returns.
    """

    def __init__(self, path: Path, logger: Optional[logging.Logger] = None) -> None:
        self.path = path
        self.logger = logger or logging.getLogger("elo_export")
        self._ids: Optional[set[int]] = None
        self._valid_size = 0

    def is_exported(self, document_id: int) -> bool:
        return document_id in self._entries()

    def mark_exported(self, document_id: int) -> None:
        """Record a document as exported; repeated calls have no further effect."""
        entries = self._entries()
        if document_id in entries:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        created = not self.path.exists()
        with self.path.open("ab") as handle:
            if handle.tell() > self._valid_size:
                handle.truncate(self._valid_size)
                handle.seek(self._valid_size)
            line = f"{document_id}\n".encode("ascii")
            handle.write(line)
            handle.flush()
            os.fsync(handle.fileno())
            self._valid_size = handle.tell()
        if created:
            _fsync_directory(self.path.parent)
        entries.add(document_id)

    def count(self) -> int:
        return len(self._entries())

    def _entries(self) -> set[int]:
        if self._ids is None:
            self._ids = self._load()
        return self._ids

    def _load(self) -> set[int]:
        ids: set[int] = set()
        if not self.path.exists():
            self._valid_size = 0
            return ids
        data = self.path.read_bytes()
        complete_size = data.rfind(b"\n") + 1
        if complete_size < len(data):
            self.logger.warning(
                "Ignoring truncated trailing ledger entry in %s: %r",
                self.path,
                data[complete_size:],
            )
        invalid = 0
        for raw_line in data[:complete_size].splitlines():
            value = raw_line.strip()
            if not value:
                continue
            try:
                ids.add(int(value))
            except ValueError:
                invalid += 1
        if invalid:
            self.logger.warning("Ignored %s invalid ledger lines in %s", invalid, self.path)
        self._valid_size = complete_size
        self.logger.info("Loaded %s exported ids from %s", len(ids), self.path)
        return ids


def _fsync_directory(directory: Path) -> None:
    """Persist a new directory entry; Windows cannot open directories for fsync."""
    if os.name == "nt":
        return
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)
