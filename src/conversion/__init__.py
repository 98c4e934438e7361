"""
Conversion of archive blobs into exportable files.
"""

from .images import IMAGE_EXTS, ConversionError, ImageConverter
from .registry import ConversionRegistry, CopyHandler, ExportHandler, PdfConversionHandler

__all__ = [
    "IMAGE_EXTS",
    "ConversionError",
    "ConversionRegistry",
    "CopyHandler",
    "ExportHandler",
    "ImageConverter",
    "PdfConversionHandler",
]
