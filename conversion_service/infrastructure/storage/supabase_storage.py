"""Supabase Storage adapter speaking the storage REST API."""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import requests

from conversion_service.constants import STORAGE_CACHE_CONTROL

logger = logging.getLogger(__name__)


class StorageBackendError(RuntimeError):
    """Raised when the storage service rejects or fails a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SupabaseStorage:
    """Upload objects to a Supabase Storage bucket and resolve public URLs."""

    def __init__(self, endpoint: str, service_key: str, *, timeout: float = 60.0) -> None:
        self._endpoint = (endpoint or "").strip().rstrip("/")
        self._service_key = service_key
        self._timeout = timeout

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = True,
    ) -> None:
        """Write ``data`` to ``bucket/path``, overwriting when ``upsert`` is set."""

        url = f"{self._endpoint}/storage/v1/object/{quote(bucket)}/{_quote_path(path)}"
        headers = {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
            "Content-Type": content_type,
            "cache-control": STORAGE_CACHE_CONTROL,
            "x-upsert": "true" if upsert else "false",
        }
        try:
            response = requests.post(url, data=data, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise StorageBackendError(str(exc)) from exc

        if response.status_code >= 400:
            raise StorageBackendError(_error_message(response), status_code=response.status_code)
        logger.debug("Uploaded %s bytes to %s/%s", len(data), bucket, path)

    def public_base_url(self, bucket: str) -> str:
        return f"{self._endpoint}/storage/v1/object/public/{quote(bucket)}"

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url(bucket)}/{_quote_path(path)}"


def _quote_path(path: str) -> str:
    return quote(path.lstrip("/"), safe="/")


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if message:
            return str(message)
    text = (response.text or "").strip()
    return text or f"HTTP {response.status_code}"
