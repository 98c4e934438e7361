"""
Location of document blobs inside the archive's bucketed file store.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

STORE_DIR = "DMS_1"
BUCKET_PREFIX = "UP"
BUCKET_SHIFT = 10
MAX_BLOB_ID = 0xFFFFFFFF


def hex_name(value: int, width: int = 8) -> str:
    """Render an integer as zero-padded upper-case hex."""
    return format(value, "X").zfill(width)


def bucket_name(blob_id: int) -> str:
    """Return the bucket directory holding a blob, e.g. 3101 -> UP000003."""
    return BUCKET_PREFIX + hex_name(blob_id >> BUCKET_SHIFT, 6)


def locate(blob_id: Optional[int], base_path: Path | str) -> Optional[Path]:
    """Return the extensionless candidate path of a blob, or None without content."""
    if not blob_id:
        return None
    if blob_id < 0 or blob_id > MAX_BLOB_ID:
        raise ValueError(f"Invalid blob id: {blob_id}")
    return Path(base_path) / STORE_DIR / bucket_name(blob_id) / hex_name(blob_id)


def find_blob(candidate: Path) -> Optional[Path]:
    """Find the stored file for an extensionless candidate, whatever its extension."""
    if not candidate.parent.is_dir():
        return None
    matches = sorted(entry for entry in candidate.parent.glob(f"{candidate.name}.*") if entry.is_file())
    return matches[0] if matches else None


class BlobLocator:
    """Locate blobs below a fixed archive base path."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = Path(base_path)

    def locate(self, blob_id: Optional[int]) -> Optional[Path]:
        return locate(blob_id, self.base_path)

    def find(self, blob_id: Optional[int]) -> Optional[Path]:
        """Return the existing blob file for an id, or None."""
        candidate = self.locate(blob_id)
        if candidate is None:
            return None
        return find_blob(candidate)
