"""
Domain Entity: RasterPage

A single page image produced by the rasterizer.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class RasterPage:
    """
    Represents one rasterized page on local disk.

    ``page_number`` comes from the position of the file in the rasterizer's
    numerically sorted output, never from PDF metadata. Dimensions are filled
    in once the image has been decoded.
    """

    page_number: int
    image_path: Path
    width: Optional[int] = None
    height: Optional[int] = None

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")
        if not isinstance(self.image_path, Path):
            object.__setattr__(self, "image_path", Path(self.image_path))

    def with_dimensions(self, width: int, height: int) -> RasterPage:
        return RasterPage(self.page_number, self.image_path, width, height)
