"""
Extension based selection of how a source blob becomes an output file.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol

from .images import IMAGE_EXTS, ImageConverter


class ExportHandler(Protocol):
    """Writes one source file to its output location."""

    def output_suffix(self, source: Path) -> str:
        ...

    def write(self, source: Path, destination: Path) -> None:
        ...


class CopyHandler:
    """Copy the source byte-for-byte, keeping its extension."""

    def output_suffix(self, source: Path) -> str:
        return source.suffix.lower()

    def write(self, source: Path, destination: Path) -> None:
        shutil.copyfile(source, destination)


@dataclass
class PdfConversionHandler:
    """Convert the source to PDF through an image converter."""

    converter: ImageConverter

    def output_suffix(self, source: Path) -> str:
        return ".pdf"

    def write(self, source: Path, destination: Path) -> None:
        destination.write_bytes(self.converter.convert(source))


class ConversionRegistry:
    """Map lower-cased source extensions to export handlers."""

    def __init__(self, default: Optional[ExportHandler] = None) -> None:
        self.default: ExportHandler = default or CopyHandler()
        self._handlers: Dict[str, ExportHandler] = {}

    def register(self, extensions: Iterable[str], handler: ExportHandler) -> None:
        for extension in extensions:
            self._handlers[_normalize_ext(extension)] = handler

    def handler_for(self, source: Path) -> ExportHandler:
        return self._handlers.get(source.suffix.lower(), self.default)

    @classmethod
    def with_image_conversion(
        cls,
        converter: ImageConverter,
        extensions: Iterable[str] = IMAGE_EXTS,
    ) -> "ConversionRegistry":
        """Build a registry converting images to PDF and copying everything else."""
        registry = cls()
        registry.register(extensions, PdfConversionHandler(converter))
        return registry


def _normalize_ext(extension: str) -> str:
    extension = extension.strip().lower()
    return extension if extension.startswith(".") else f".{extension}"
