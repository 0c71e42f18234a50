"""Domain entities package"""

from .conversion_request import ConversionRequest, StorageCredentials
from .manifest import Manifest, PageSummary
from .page_assets import AssetRecord, PageManifestEntry
from .raster_page import RasterPage

__all__ = [
    "AssetRecord",
    "ConversionRequest",
    "Manifest",
    "PageManifestEntry",
    "PageSummary",
    "RasterPage",
    "StorageCredentials",
]
