"""
Record types for objects read from the legacy archive table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

ROOT_SENTINEL = 1
FOLDER_KIND_LIMIT = 255
ROOT_KIND = 9999


@dataclass(frozen=True)
class ArchiveObject:
    """One row of the archive's object table, either a folder or a document."""

    id: int
    parent_id: int
    kind: int
    label: str
    status: int = 0
    blob_id: Optional[int] = None

    @property
    def is_folder(self) -> bool:
        return self.kind < FOLDER_KIND_LIMIT

    @property
    def is_document(self) -> bool:
        return FOLDER_KIND_LIMIT <= self.kind < ROOT_KIND

    @property
    def is_deleted(self) -> bool:
        # Any non-zero status counts as deleted.
        return self.status != 0

    @property
    def has_content(self) -> bool:
        return bool(self.blob_id)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ArchiveObject":
        """Build an object from a raw ``objekte`` row."""
        return cls(
            id=_as_int(record.get("objid")),
            parent_id=_as_int(record.get("objparent")),
            kind=_as_int(record.get("objtype")),
            label=str(record.get("objshort") or ""),
            status=_as_int(record.get("objstatus")),
            blob_id=_as_int(record.get("objdoc")) or None,
        )


def _as_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(value)
