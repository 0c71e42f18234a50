"""Page image resizing and WebP encoding."""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps

from conversion_service.constants import PAGE_CONTENT_TYPE
from conversion_service.domain.entities.raster_page import RasterPage
from conversion_service.domain.exceptions import RenderError
from conversion_service.domain.value_objects.variant_spec import VariantSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedVariant:
    """An encoded rendition of a page, ready for upload."""

    key: str
    data: bytes
    width: int
    height: int
    content_type: str = PAGE_CONTENT_TYPE


def target_size(natural_width: int, natural_height: int, spec: VariantSpec) -> tuple[int, int]:
    """Compute the output size for ``spec`` without ever widening the page."""

    width = min(spec.width, natural_width)
    if spec.height is not None:
        return width, spec.height
    if width >= natural_width:
        return natural_width, natural_height
    return width, max(1, round(natural_height * width / natural_width))


class VariantRenderer:
    """Decodes raster pages and produces resized WebP variants."""

    def __init__(self, *, resample: int = Image.Resampling.LANCZOS, method: int = 4) -> None:
        self._resample = resample
        self._method = method

    def open_page(self, page: RasterPage) -> Image.Image:
        """Decode a page image fully into memory, normalized to RGB/RGBA."""

        try:
            with Image.open(page.image_path) as source:
                source.load()
                return source.convert(_encoding_mode(source))
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise RenderError(page.page_number, None, exc) from exc

    def render(self, image: Image.Image, spec: VariantSpec, page_number: int) -> EncodedVariant:
        """Resize ``image`` for ``spec`` and encode it as WebP."""

        natural_width, natural_height = image.size
        size = target_size(natural_width, natural_height, spec)
        try:
            if spec.crops:
                resized = ImageOps.fit(image, size, method=self._resample, centering=(0.5, 0.5))
            elif size != image.size:
                resized = image.resize(size, resample=self._resample)
            else:
                resized = image

            buffer = io.BytesIO()
            resized.save(buffer, format="WEBP", quality=spec.quality, method=self._method)
        except (OSError, ValueError) as exc:
            raise RenderError(page_number, spec.key, exc) from exc

        logger.debug(
            "Rendered variant %s for page %s at %sx%s",
            spec.key,
            page_number,
            resized.width,
            resized.height,
        )
        return EncodedVariant(key=spec.key, data=buffer.getvalue(), width=resized.width, height=resized.height)


def _encoding_mode(image: Image.Image) -> str:
    if image.mode in {"RGBA", "LA", "PA"} or (image.mode == "P" and "transparency" in image.info):
        return "RGBA"
    return "RGB"
