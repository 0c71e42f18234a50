"""
ManifestBuilder domain service.

Turns the per-page upload records of a conversion into the edition manifest,
resolving one path per resolution tier with fallbacks so consumers always
have a usable low-resolution reference.
"""
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from conversion_service.domain.entities.manifest import Manifest, PageSummary
from conversion_service.domain.entities.page_assets import PageManifestEntry
from conversion_service.domain.value_objects.storage_path import ensure_trailing_slash

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ManifestBuilder:
    """
    Domain service assembling a ``Manifest``.

    Fallback rules, applied independently per field:
    - low    -> ``low`` path, else ``medium`` path
    - medium -> ``medium`` path
    - high   -> ``high`` path
    - thumb  -> thumbnail-key path, else ``low`` path
    Any field without a candidate is ``None``.
    """

    LOW_KEY = "low"
    MEDIUM_KEY = "medium"
    HIGH_KEY = "high"

    def __init__(self, thumbnail_key: str = "thumbnail", clock: Optional[Clock] = None):
        self._thumbnail_key = thumbnail_key
        self._clock = clock or utc_now

    def summarize_page(self, entry: PageManifestEntry) -> PageSummary:
        low = entry.path_for(self.LOW_KEY)
        medium = entry.path_for(self.MEDIUM_KEY)
        return PageSummary(
            page_number=entry.page_number,
            width=entry.width,
            height=entry.height,
            low_res_image_path=low or medium,
            medium_image_path=medium,
            high_res_image_path=entry.path_for(self.HIGH_KEY),
            thumbnail_path=entry.path_for(self._thumbnail_key) or low,
        )

    def build(
        self,
        edition_id: str,
        bucket: str,
        assets_base_url: str,
        entries: Iterable[PageManifestEntry],
    ) -> Manifest:
        ordered = sorted(entries, key=lambda entry: entry.page_number)
        return Manifest(
            edition_id=edition_id,
            bucket=bucket,
            assets_base_url=ensure_trailing_slash(assets_base_url),
            generated_at=self._clock(),
            pages=tuple(self.summarize_page(entry) for entry in ordered),
        )
