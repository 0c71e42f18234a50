"""
Domain Entity: Manifest

The published description of an edition's generated assets.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class PageSummary:
    """Manifest view of one page: the resolved path per resolution tier."""

    page_number: int
    width: Optional[int]
    height: Optional[int]
    low_res_image_path: Optional[str]
    medium_image_path: Optional[str]
    high_res_image_path: Optional[str]
    thumbnail_path: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageNumber": self.page_number,
            "width": self.width,
            "height": self.height,
            "lowResImagePath": self.low_res_image_path,
            "mediumImagePath": self.medium_image_path,
            "highResImagePath": self.high_res_image_path,
            "thumbnailPath": self.thumbnail_path,
        }


@dataclass(frozen=True)
class Manifest:
    """Edition-level manifest, serialized to ``{edition}/manifest.json``."""

    edition_id: str
    bucket: str
    assets_base_url: str
    generated_at: datetime
    pages: Tuple[PageSummary, ...]

    def __post_init__(self):
        if not isinstance(self.pages, tuple):
            object.__setattr__(self, "pages", tuple(self.pages))

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "edition": {
                "id": self.edition_id,
                "totalPages": self.total_pages,
            },
            "assetsBaseUrl": self.assets_base_url,
            "bucket": self.bucket,
            "generatedAt": _isoformat(self.generated_at),
            "pages": [page.to_dict() for page in self.pages],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
