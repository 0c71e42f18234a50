"""PDF rasterization backends for the infrastructure layer."""
from __future__ import annotations

import logging
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import fitz  # type: ignore

from conversion_service.constants import DEFAULT_DPI, PAGE_FILE_PREFIX
from conversion_service.domain.entities.raster_page import RasterPage
from conversion_service.domain.exceptions import NoPagesProducedError, RasterizationError

logger = logging.getLogger(__name__)

_PAGE_INDEX_PATTERN = re.compile(r"(\d+)\.png$")


def page_index(path: Path) -> int:
    """Return the page number embedded at the end of a rasterizer output file."""

    match = _PAGE_INDEX_PATTERN.search(path.name)
    return int(match.group(1)) if match else 0


def collect_page_files(output_dir: Path | str, prefix: str = PAGE_FILE_PREFIX) -> List[Path]:
    """List generated page images ordered by their numeric page index.

    Sorting is numeric so ``page-10.png`` follows ``page-9.png`` whatever
    zero padding the tool applied.
    """

    directory = Path(output_dir)
    files = [
        path
        for path in directory.iterdir()
        if path.is_file() and path.name.startswith(prefix) and path.name.endswith(".png")
    ]
    return sorted(files, key=lambda path: (page_index(path), path.name))


class Rasterizer(ABC):
    """Turns a local PDF into ordered page images inside ``output_dir``."""

    name = "rasterizer"

    def __init__(self, *, dpi: int = DEFAULT_DPI, prefix: str = PAGE_FILE_PREFIX) -> None:
        self._dpi = dpi
        self._prefix = prefix

    @property
    def dpi(self) -> int:
        return self._dpi

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def rasterize(self, pdf_path: Path | str, output_dir: Path | str) -> List[RasterPage]:
        """Rasterize every page and return them numbered from 1 in page order."""

        path = Path(pdf_path)
        output = Path(output_dir)
        output.mkdir(parents=True, exist_ok=True)

        self._run(path, output)

        files = collect_page_files(output, self._prefix)
        if not files:
            raise NoPagesProducedError()

        pages = [RasterPage(page_number=index + 1, image_path=file) for index, file in enumerate(files)]
        logger.debug("Rasterized %s pages for %s with %s", len(pages), path, self.name)
        return pages

    @abstractmethod
    def _run(self, pdf_path: Path, output_dir: Path) -> None:
        """Write ``{prefix}-N.png`` files for every page into ``output_dir``."""


class PdftoppmRasterizer(Rasterizer):
    """Runs poppler's ``pdftoppm`` as a subprocess."""

    name = "pdftoppm"

    def __init__(
        self,
        *,
        executable: str = "pdftoppm",
        dpi: int = DEFAULT_DPI,
        timeout: Optional[float] = None,
        prefix: str = PAGE_FILE_PREFIX,
    ) -> None:
        super().__init__(dpi=dpi, prefix=prefix)
        self._executable = executable
        self._timeout = timeout

    def build_command(self, pdf_path: Path, output_dir: Path) -> List[str]:
        return [
            self._executable,
            "-png",
            "-r",
            str(self._dpi),
            str(pdf_path),
            str(output_dir / self._prefix),
        ]

    def _run(self, pdf_path: Path, output_dir: Path) -> None:
        command = self.build_command(pdf_path, output_dir)
        try:
            subprocess.run(command, capture_output=True, text=True, timeout=self._timeout, check=True)
        except FileNotFoundError as exc:
            raise RasterizationError(f"pdftoppm failed: executable not found ({self._executable})", exc) from exc
        except subprocess.TimeoutExpired as exc:
            raise RasterizationError(f"pdftoppm failed: timed out after {self._timeout}s", exc) from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            detail = f": {stderr}" if stderr else ""
            raise RasterizationError(f"pdftoppm failed with exit code {exc.returncode}{detail}", exc) from exc
        except OSError as exc:
            raise RasterizationError(f"pdftoppm failed: {exc}", exc) from exc


class PyMuPdfRasterizer(Rasterizer):
    """Renders pages in-process with PyMuPDF using pdftoppm-style file names."""

    name = "pymupdf"

    def _run(self, pdf_path: Path, output_dir: Path) -> None:
        try:
            with fitz.open(str(pdf_path)) as document:
                for index in range(document.page_count):
                    page = document.load_page(index)
                    pixmap = page.get_pixmap(dpi=self._dpi, alpha=False)
                    pixmap.save(str(output_dir / f"{self._prefix}-{index + 1}.png"))
        except (RuntimeError, ValueError, OSError) as exc:
            raise RasterizationError(f"PyMuPDF failed: {exc}", exc) from exc


def build_rasterizer(
    backend: str,
    *,
    dpi: int = DEFAULT_DPI,
    timeout: Optional[float] = None,
    executable: str = "pdftoppm",
) -> Rasterizer:
    """Return the rasterizer configured by name.

    ``timeout`` bounds the pdftoppm subprocess only. PyMuPDF renders in-process
    and cannot be interrupted, so the setting is logged and ignored there.
    """

    normalized = (backend or "pdftoppm").strip().lower()
    if normalized == PdftoppmRasterizer.name:
        return PdftoppmRasterizer(executable=executable, dpi=dpi, timeout=timeout)
    if normalized in {PyMuPdfRasterizer.name, "fitz"}:
        if timeout is not None:
            logger.info("Rasterizer timeout of %ss is not enforced by the pymupdf backend", timeout)
        return PyMuPdfRasterizer(dpi=dpi)
    raise ValueError(f"Unknown rasterizer backend: {backend}")
