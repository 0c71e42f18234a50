"""
Data Transfer Objects for edition conversion.

The boundary between the application layer and the HTTP layer.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from conversion_service.domain.entities.page_assets import PageManifestEntry


@dataclass(frozen=True)
class ConversionResultDTO:
    """Outcome of a completed conversion."""

    edition_id: str
    bucket: str
    manifest_path: str
    pages: Tuple[PageManifestEntry, ...]
    uploads: Tuple[str, ...]

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @classmethod
    def from_entries(
        cls,
        edition_id: str,
        bucket: str,
        manifest_path: str,
        entries: List[PageManifestEntry],
    ) -> "ConversionResultDTO":
        """Create the DTO, flattening page assets into the upload list in page order."""
        ordered = tuple(sorted(entries, key=lambda entry: entry.page_number))
        uploads = tuple(path for entry in ordered for path in entry.storage_paths)
        return cls(
            edition_id=edition_id,
            bucket=bucket,
            manifest_path=manifest_path,
            pages=ordered,
            uploads=uploads,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to the response payload."""
        return {
            "success": True,
            "editionId": self.edition_id,
            "bucket": self.bucket,
            "manifestPath": self.manifest_path,
            "totalPages": self.total_pages,
            "pages": [entry.to_dict() for entry in self.pages],
            "uploads": list(self.uploads),
        }
