"""Pytest configuration for conversion service tests.

Ensures the project root is on sys.path so ``conversion_service.*`` resolves
without an editable install, and provides in-memory stand-ins for the
pipeline's external collaborators (download, rasterizer, storage).
"""
from __future__ import annotations

import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pytest
from PIL import Image

# Add repository root to sys.path for module resolution.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from conversion_service.config import ConversionConfig  # noqa: E402
from conversion_service.infrastructure.filesystem.workspace import conversion_workspace  # noqa: E402
from conversion_service.infrastructure.pdf.rasterizer import Rasterizer  # noqa: E402
from conversion_service.infrastructure.storage.supabase_storage import StorageBackendError  # noqa: E402

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def make_png(path: Path, size: Tuple[int, int], color=(200, 40, 40), mode: str = "RGB") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color).save(path, format="PNG")
    return path


class InMemoryStorage:
    """Storage backend double recording every upload."""

    def __init__(self, endpoint: str = "https://project.storage.test", fail_on: Iterable[str] = ()):
        self.endpoint = endpoint
        self.fail_on = set(fail_on)
        self.objects: dict = {}
        self.upload_log: List[str] = []
        self._lock = threading.Lock()

    def upload(self, bucket: str, path: str, data: bytes, content_type: str, upsert: bool = True) -> None:
        if path in self.fail_on:
            raise StorageBackendError(f"The resource was rejected: {path}", status_code=500)
        with self._lock:
            self.objects[(bucket, path)] = (data, content_type)
            self.upload_log.append(path)

    def public_base_url(self, bucket: str) -> str:
        return f"{self.endpoint}/storage/v1/object/public/{bucket}"

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url(bucket)}/{path}"


class FakeDownloader:
    """Writes a placeholder PDF instead of fetching one."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls: List[Tuple[str, Path]] = []

    def download(self, url: str, destination: Path) -> Path:
        self.calls.append((url, Path(destination)))
        if self.error is not None:
            raise self.error
        Path(destination).write_bytes(b"%PDF-1.4\n%fake\n")
        return Path(destination)


class FakeRasterizer(Rasterizer):
    """Produces unpadded ``page-N.png`` files with page-specific sizes."""

    name = "fake"

    def __init__(self, page_sizes: List[Tuple[int, int]]):
        super().__init__(dpi=72)
        self.page_sizes = page_sizes
        self.output_dirs: List[Path] = []

    def _run(self, pdf_path: Path, output_dir: Path) -> None:
        self.output_dirs.append(output_dir)
        for index, size in enumerate(self.page_sizes, start=1):
            make_png(output_dir / f"page-{index}.png", size)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def conversion_config() -> ConversionConfig:
    return ConversionConfig(page_workers=2)


@pytest.fixture
def workspace_root(tmp_path) -> Path:
    root = tmp_path / "workspaces"
    root.mkdir()
    return root


@pytest.fixture
def workspace_factory(workspace_root):
    return lambda: conversion_workspace(base_dir=workspace_root)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()
