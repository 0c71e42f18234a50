"""
Domain Entity: ConversionRequest

Everything needed to convert one edition PDF into page assets.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from conversion_service.domain.exceptions import ValidationError
from conversion_service.domain.value_objects.variant_spec import VariantSpec


@dataclass(frozen=True)
class StorageCredentials:
    """Endpoint and service key for the object storage backend."""

    endpoint: str
    service_key: str = field(repr=False)


@dataclass(frozen=True)
class ConversionRequest:
    """
    A single conversion request.

    Business rules:
    - ``edition_id``, ``pdf_url`` and both storage credentials are required
    - ``bucket``, ``variants`` and ``thumbnail`` fall back to the service
      configuration when omitted
    """

    edition_id: str
    pdf_url: str
    storage: StorageCredentials
    bucket: Optional[str] = None
    variants: Optional[Tuple[VariantSpec, ...]] = None
    thumbnail: Optional[VariantSpec] = None

    def __post_init__(self):
        if self.variants is not None and not isinstance(self.variants, tuple):
            object.__setattr__(self, "variants", tuple(self.variants))

    def validate(self) -> None:
        """Raise ``ValidationError`` if a required field is missing."""
        missing = [
            name
            for name, value in (
                ("editionId", self.edition_id),
                ("pdfUrl", self.pdf_url),
                ("supabaseUrl", self.storage.endpoint if self.storage else None),
                ("supabaseKey", self.storage.service_key if self.storage else None),
            )
            if not _present(value)
        ]
        if missing:
            raise ValidationError(
                f"Missing required parameters ({', '.join(missing)})",
                {name: "required" for name in missing},
            )

        errors: Dict[str, str] = {}
        if self.edition_id.startswith("/") or ".." in self.edition_id.split("/"):
            errors["editionId"] = "must be a relative path segment"
        if self.bucket is not None and not _present(self.bucket):
            errors["bucket"] = "must not be blank"
        if self.variants is not None and len(self.variants) == 0:
            errors["variants"] = "must contain at least one variant"
        if errors:
            raise ValidationError(f"Invalid parameters: {errors}", errors)


def _present(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())
