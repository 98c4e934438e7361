"""
Placement of exported documents into the output tree.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from conversion import ConversionRegistry


class ExportOrganizer:
    """Place converted or copied blobs under the output root.

    The organizer owns target naming: it creates directories, resolves name
    collisions with ``_1``, ``_2``... suffixes and writes each file through a temporary
    sibling that is renamed into place. Content handling is delegated to the handler
    the conversion registry selects for the source extension. It assumes a single
    writer per output tree.
    """

    def __init__(
        self,
        output_root: Path,
        registry: ConversionRegistry,
        movement_logger: Optional[logging.Logger] = None,
    ) -> None:
        self.output_root = output_root
        self.registry = registry
        self.movement_logger = movement_logger or logging.getLogger("elo_export.movement")

    def initialize(self) -> None:
        """Create the output root."""
        self.output_root.mkdir(parents=True, exist_ok=True)

    def place(self, source: Path, target_relative_path: str) -> Path:
        """Write a source blob to its target path and return the final location."""
        handler = self.registry.handler_for(source)
        destination = self._resolve_conflict(
            self._destination(target_relative_path, handler.output_suffix(source))
        )
        destination.parent.mkdir(parents=True, exist_ok=True)

        temp_path = destination.with_name(f".{destination.name}.part")
        try:
            handler.write(source, temp_path)
            os.replace(temp_path, destination)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise
        self.movement_logger.info("Exported %s -> %s", source, destination)
        return destination

    def _destination(self, target_relative_path: str, suffix: str) -> Path:
        relative = Path(target_relative_path.strip("/"))
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise ValueError(f"Target path escapes output root: {target_relative_path!r}")
        return self.output_root / relative.parent / f"{relative.name}{suffix}"

    def _resolve_conflict(self, destination: Path) -> Path:
        if not destination.exists():
            return destination
        stem = destination.stem
        suffix = destination.suffix
        parent = destination.parent
        counter = 1
        while True:
            candidate = parent / f"{stem}_{counter}{suffix}"
            if not candidate.exists():
                return candidate
            counter += 1
