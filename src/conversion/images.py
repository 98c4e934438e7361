"""
Image to PDF conversion for scanned archive pages.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageSequence, UnidentifiedImageError

IMAGE_EXTS = {".tif", ".tiff", ".jpg", ".jpeg", ".png", ".gif"}
PDF_MODES = {"1", "L", "RGB", "CMYK"}


class ConversionError(RuntimeError):
    """Raised when a source file cannot be converted."""


class ImageConverter:
    """Convert single and multi-page images into one PDF document."""

    def __init__(self, resolution: float = 200.0, logger: Optional[logging.Logger] = None) -> None:
        self.resolution = resolution
        self.logger = logger or logging.getLogger("elo_export")

    def convert(self, source: Path) -> bytes:
        """Return PDF bytes holding every page or frame of an image."""
        if not source.is_file():
            raise ConversionError(f"Source file not found: {source}")
        try:
            with Image.open(source) as image:
                pages = [_pdf_ready(frame) for frame in ImageSequence.Iterator(image)]
                buffer = io.BytesIO()
                pages[0].save(
                    buffer,
                    format="PDF",
                    save_all=True,
                    append_images=pages[1:],
                    resolution=self.resolution,
                )
        except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as exc:
            raise ConversionError(f"Failed to convert image to PDF: {source} ({exc})") from exc
        self.logger.debug("Converted %s (%s pages)", source, len(pages))
        return buffer.getvalue()


def _pdf_ready(frame: Image.Image) -> Image.Image:
    if frame.mode in PDF_MODES:
        return frame.copy()
    return frame.convert("RGB")
