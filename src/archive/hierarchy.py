"""
Folder path reconstruction from the archive's parent-pointer table.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from .models import ROOT_SENTINEL, ArchiveObject
from .sanitizer import sanitize


class HierarchyResolver:
    """Resolve sanitized folder paths with memoization and cycle guards.

    ``folders`` maps folder ids to non-deleted folder objects. The path of a folder is
    the chain of sanitized labels from the top of the archive down to and including
    the folder itself. Top-level cabinets (folders whose parent is the root sentinel)
    stand for the archive root and contribute no segment. Dangling parent references
    end the chain early; a cycle aborts the walk and keeps what was gathered so far.
    """

    def __init__(
        self,
        folders: Mapping[int, ArchiveObject],
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.folders = folders
        self.logger = logger or logging.getLogger("elo_export")
        self._paths: Dict[int, str] = {}

    def resolve(self, folder_id: int) -> str:
        """Return the ``/``-joined path of sanitized labels for a folder."""
        if folder_id in self._paths:
            return self._paths[folder_id]

        chain: List[ArchiveObject] = []
        visited: set[int] = set()
        prefix = ""
        cyclic = False
        current = self.folders.get(folder_id)
        while current is not None and current.parent_id > ROOT_SENTINEL:
            if current.id in visited:
                cyclic = True
                self.logger.debug("Cycle in folder hierarchy at id %s (start %s)", current.id, folder_id)
                break
            visited.add(current.id)
            chain.append(current)
            if current.parent_id in self._paths:
                prefix = self._paths[current.parent_id]
                break
            current = self.folders.get(current.parent_id)

        path = prefix
        resolved: List[tuple[int, str]] = []
        for folder in reversed(chain):
            segment = sanitize(folder.label)
            path = f"{path}/{segment}" if path else segment
            resolved.append((folder.id, path))

        if not cyclic:
            self._paths.update(resolved)
            self._paths.setdefault(folder_id, path)
        return path

    def resolve_all(self) -> Dict[int, str]:
        """Precompute the path of every known folder."""
        return {folder_id: self.resolve(folder_id) for folder_id in self.folders}

    def document_path(self, document: ArchiveObject) -> str:
        """Return the target path of a document, without extension."""
        folder_path = self.resolve(document.parent_id)
        name = sanitize(document.label)
        return f"{folder_path}/{name}" if folder_path else name
