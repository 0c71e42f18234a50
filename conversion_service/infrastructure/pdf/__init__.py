"""PDF infrastructure utilities."""

from .rasterizer import (
    PdftoppmRasterizer,
    PyMuPdfRasterizer,
    Rasterizer,
    build_rasterizer,
    collect_page_files,
)
from .variant_renderer import EncodedVariant, VariantRenderer, target_size

__all__ = [
    "EncodedVariant",
    "PdftoppmRasterizer",
    "PyMuPdfRasterizer",
    "Rasterizer",
    "VariantRenderer",
    "build_rasterizer",
    "collect_page_files",
    "target_size",
]
