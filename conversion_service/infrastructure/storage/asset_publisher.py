"""Publishes encoded page variants and manifests to object storage."""
from __future__ import annotations

import logging
from typing import Protocol

from conversion_service.constants import MANIFEST_CONTENT_TYPE, PAGE_CONTENT_TYPE
from conversion_service.domain.entities.manifest import Manifest
from conversion_service.domain.entities.page_assets import AssetRecord
from conversion_service.domain.exceptions import ManifestError, UploadError
from conversion_service.domain.value_objects.storage_path import manifest_path

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    def upload(self, bucket: str, path: str, data: bytes, content_type: str, upsert: bool = True) -> None: ...

    def get_public_url(self, bucket: str, path: str) -> str: ...

    def public_base_url(self, bucket: str) -> str: ...


class AssetPublisher:
    """Single-attempt, overwrite-capable uploads with deterministic public URLs."""

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage

    def publish(
        self,
        bucket: str,
        storage_path: str,
        data: bytes,
        content_type: str = PAGE_CONTENT_TYPE,
    ) -> AssetRecord:
        try:
            self._storage.upload(bucket, storage_path, data, content_type, upsert=True)
        except Exception as exc:  # noqa: BLE001 - any backend failure aborts the request
            raise UploadError(storage_path, exc) from exc
        return AssetRecord(
            storage_path=storage_path,
            public_url=self._storage.get_public_url(bucket, storage_path),
        )

    def publish_manifest(self, bucket: str, manifest: Manifest) -> AssetRecord:
        path = manifest_path(manifest.edition_id)
        try:
            payload = manifest.to_json().encode("utf-8")
            self._storage.upload(bucket, path, payload, MANIFEST_CONTENT_TYPE, upsert=True)
        except Exception as exc:  # noqa: BLE001 - any backend failure aborts the request
            raise ManifestError(path, exc) from exc
        logger.info("Published manifest %s with %s pages", path, manifest.total_pages)
        return AssetRecord(storage_path=path, public_url=self._storage.get_public_url(bucket, path))

    def assets_base_url(self, bucket: str) -> str:
        return self._storage.public_base_url(bucket)
