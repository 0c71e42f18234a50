"""Streams source PDFs from HTTP(S) URLs to local disk."""
from __future__ import annotations

import logging
from pathlib import Path

import requests

from conversion_service.constants import DOWNLOAD_CHUNK_SIZE
from conversion_service.domain.exceptions import DownloadError

logger = logging.getLogger(__name__)


class PdfDownloader:
    """Fetch a PDF with a single streaming GET."""

    def __init__(self, *, timeout: float = 60.0, chunk_size: int = DOWNLOAD_CHUNK_SIZE) -> None:
        self._timeout = timeout
        self._chunk_size = chunk_size

    def download(self, url: str, destination: Path | str) -> Path:
        target = Path(destination)
        written = 0
        try:
            with requests.get(url, stream=True, timeout=self._timeout) as response:
                response.raise_for_status()
                with target.open("wb") as handle:
                    for chunk in response.iter_content(chunk_size=self._chunk_size):
                        if chunk:
                            handle.write(chunk)
                            written += len(chunk)
        except (requests.RequestException, OSError) as exc:
            raise DownloadError(url, exc) from exc

        logger.debug("Downloaded %s bytes from %s", written, url)
        return target
