"""Domain exceptions.

Every failure in the conversion pipeline is a ``ConversionError`` tagged with
an ``ErrorKind`` so the HTTP boundary can map kinds to status codes in one
place.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    DOWNLOAD = "download"
    RASTERIZATION = "rasterization"
    NO_PAGES = "no_pages"
    RENDER = "render"
    UPLOAD = "upload"
    MANIFEST = "manifest"


class ConversionError(Exception):
    """Base exception for conversion pipeline errors."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.stage: Optional[str] = None


class ValidationError(ConversionError):
    """Raised when a request is missing required fields or is malformed."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, errors: Optional[dict] = None):
        super().__init__(message)
        self.errors = errors or {}


class AuthorizationError(ConversionError):
    """Raised when the shared service secret is missing or wrong."""

    kind = ErrorKind.AUTHORIZATION

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class DownloadError(ConversionError):
    """Raised when the source PDF cannot be fetched."""

    kind = ErrorKind.DOWNLOAD

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to download PDF from {url}{detail}", cause)
        self.url = url


class RasterizationError(ConversionError):
    """Raised when the external rasterizer cannot be run or exits non-zero."""

    kind = ErrorKind.RASTERIZATION


class NoPagesProducedError(ConversionError):
    """Raised when rasterization succeeds but yields no page images."""

    kind = ErrorKind.NO_PAGES

    def __init__(self, message: str = "No pages produced during PDF conversion"):
        super().__init__(message)


class RenderError(ConversionError):
    """Raised when a page variant cannot be decoded, resized or encoded."""

    kind = ErrorKind.RENDER

    def __init__(self, page_number: int, variant_key: Optional[str], cause: Optional[BaseException] = None):
        target = f"variant '{variant_key}' of page {page_number}" if variant_key else f"page {page_number}"
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to render {target}{detail}", cause)
        self.page_number = page_number
        self.variant_key = variant_key


class UploadError(ConversionError):
    """Raised when a page asset cannot be written to storage."""

    kind = ErrorKind.UPLOAD

    def __init__(self, storage_path: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to upload {storage_path}{detail}", cause)
        self.storage_path = storage_path


class ManifestError(ConversionError):
    """Raised when the manifest cannot be serialized or uploaded."""

    kind = ErrorKind.MANIFEST

    def __init__(self, storage_path: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to publish manifest {storage_path}{detail}", cause)
        self.storage_path = storage_path
