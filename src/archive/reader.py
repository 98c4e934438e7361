"""
Streaming reader for the archive's object table.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .models import ArchiveObject

OBJECT_TABLE = "objekte"
JSON_LINE_SUFFIXES = {".json", ".jsonl", ".ndjson"}


class ArchiveReadError(RuntimeError):
    """Raised when the object table cannot be read."""


class ArchiveReader:
    """Read archive objects from an MDB database or a JSON-lines dump of it.

    ``.mdb`` files are exported through ``mdb-json`` from mdb-tools, which prints one
    JSON object per row. Dumps produced the same way can be read directly.
    """

    def __init__(
        self,
        database_path: Path,
        table: str = OBJECT_TABLE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not database_path.exists():
            raise FileNotFoundError(f"Database file not found: {database_path}")
        self.database_path = database_path
        self.table = table
        self.logger = logger or logging.getLogger("elo_export")
        self._objects: Optional[Dict[int, ArchiveObject]] = None

    def objects(self) -> Dict[int, ArchiveObject]:
        """Return all objects keyed by id, in source order."""
        if self._objects is None:
            objects: Dict[int, ArchiveObject] = {}
            skipped = 0
            for record in self._iter_records():
                try:
                    obj = ArchiveObject.from_record(record)
                except (TypeError, ValueError) as exc:
                    skipped += 1
                    self.logger.debug("Skipping malformed row %s: %s", record, exc)
                    continue
                objects[obj.id] = obj
            if skipped:
                self.logger.warning("Skipped %s malformed rows in %s", skipped, self.database_path)
            self._objects = objects
        return self._objects

    def folders(self) -> Dict[int, ArchiveObject]:
        """Return non-deleted folders keyed by id."""
        return {
            obj_id: obj
            for obj_id, obj in self.objects().items()
            if obj.is_folder and not obj.is_deleted
        }

    def documents(self) -> List[ArchiveObject]:
        """Return non-deleted documents in source order."""
        return [obj for obj in self.objects().values() if obj.is_document and not obj.is_deleted]

    def _iter_records(self) -> Iterator[dict]:
        if self.database_path.suffix.lower() in JSON_LINE_SUFFIXES:
            with self.database_path.open("r", encoding="utf-8") as handle:
                yield from _parse_lines(handle)
            return
        yield from self._iter_mdb_records()

    def _iter_mdb_records(self) -> Iterator[dict]:
        executable = shutil.which("mdb-json")
        if executable is None:
            raise ArchiveReadError("mdb-json not found; install mdb-tools to read .mdb files")
        # stderr goes to a file so a chatty mdb-json cannot block on a full pipe.
        with tempfile.TemporaryFile() as stderr_file:
            process = subprocess.Popen(
                [executable, str(self.database_path), self.table],
                stdout=subprocess.PIPE,
                stderr=stderr_file,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
            try:
                yield from _parse_lines(process.stdout)
            finally:
                process.stdout.close()
                returncode = process.wait()
            stderr_file.seek(0)
            stderr = stderr_file.read().decode("utf-8", errors="replace")
        if returncode != 0:
            raise ArchiveReadError(f"mdb-json failed ({returncode}): {stderr.strip()}")


def _parse_lines(lines: Iterable[str]) -> Iterator[dict]:
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(record, dict):
            yield record
