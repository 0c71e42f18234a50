"""
Domain Entities: AssetRecord and PageManifestEntry

Uploaded page renditions and the per-page record that groups them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AssetRecord:
    """An object written to storage together with its public URL."""

    storage_path: str
    public_url: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.storage_path, "publicUrl": self.public_url}


@dataclass(frozen=True)
class PageManifestEntry:
    """
    All uploaded variants of one page.

    ``assets`` preserves insertion order: configured variants first, then the
    thumbnail.
    """

    page_number: int
    width: Optional[int]
    height: Optional[int]
    assets: Dict[str, AssetRecord] = field(default_factory=dict)

    def __post_init__(self):
        if self.page_number < 1:
            raise ValueError("Page number must be >= 1")

    def path_for(self, variant_key: str) -> Optional[str]:
        record = self.assets.get(variant_key)
        return record.storage_path if record else None

    @property
    def storage_paths(self) -> list[str]:
        return [record.storage_path for record in self.assets.values()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageNumber": self.page_number,
            "width": self.width,
            "height": self.height,
            "assets": {key: record.to_dict() for key, record in self.assets.items()},
        }
