import logging
import subprocess
from pathlib import Path
from unittest.mock import patch

import fitz
import pytest
from PIL import Image

from conversion_service.domain.exceptions import NoPagesProducedError, RasterizationError
from conversion_service.infrastructure.pdf.rasterizer import (
    PdftoppmRasterizer,
    PyMuPdfRasterizer,
    Rasterizer,
    build_rasterizer,
    collect_page_files,
    page_index,
)


def touch(path: Path) -> Path:
    path.write_bytes(b"png")
    return path


@pytest.fixture
def pdf_path(tmp_path):
    path = tmp_path / "source.pdf"
    path.write_bytes(b"%PDF-1.4")
    return path


def fake_pdftoppm(page_count: int):
    """Build a subprocess.run side effect that writes pdftoppm-style output."""

    def _run(command, **kwargs):
        prefix = Path(command[-1])
        for index in range(1, page_count + 1):
            touch(prefix.parent / f"{prefix.name}-{index}.png")
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    return _run


class TestCollectPageFiles:
    def test_orders_numerically_not_lexicographically(self, tmp_path):
        for name in ["page-10.png", "page-2.png", "page-1.png", "page-9.png", "page-11.png"]:
            touch(tmp_path / name)

        files = collect_page_files(tmp_path)

        assert [path.name for path in files] == [
            "page-1.png",
            "page-2.png",
            "page-9.png",
            "page-10.png",
            "page-11.png",
        ]

    def test_handles_zero_padded_names(self, tmp_path):
        for name in ["page-010.png", "page-002.png", "page-001.png"]:
            touch(tmp_path / name)

        assert [page_index(path) for path in collect_page_files(tmp_path)] == [1, 2, 10]

    def test_ignores_unrelated_files(self, tmp_path):
        touch(tmp_path / "page-1.png")
        touch(tmp_path / "page-2.jpg")
        touch(tmp_path / "cover-3.png")
        (tmp_path / "page-4.png").mkdir()

        assert [path.name for path in collect_page_files(tmp_path)] == ["page-1.png"]


class TestPdftoppmRasterizer:
    def test_build_command(self, tmp_path, pdf_path):
        rasterizer = PdftoppmRasterizer(executable="/usr/bin/pdftoppm", dpi=150)
        command = rasterizer.build_command(pdf_path, tmp_path)
        assert command == ["/usr/bin/pdftoppm", "-png", "-r", "150", str(pdf_path), str(tmp_path / "page")]

    def test_default_resolution_is_300_dpi(self, tmp_path, pdf_path):
        assert PdftoppmRasterizer().build_command(pdf_path, tmp_path)[2:4] == ["-r", "300"]

    def test_rasterize_returns_numbered_pages(self, tmp_path, pdf_path):
        output_dir = tmp_path / "png"
        with patch(
            "conversion_service.infrastructure.pdf.rasterizer.subprocess.run",
            side_effect=fake_pdftoppm(12),
        ) as run:
            pages = PdftoppmRasterizer(timeout=30).rasterize(pdf_path, output_dir)

        assert run.call_args.kwargs["timeout"] == 30
        assert run.call_args.kwargs["check"] is True
        assert [page.page_number for page in pages] == list(range(1, 13))
        assert pages[9].image_path.name == "page-10.png"
        assert pages[8].image_path.name == "page-9.png"

    def test_nonzero_exit_raises_rasterization_error(self, tmp_path, pdf_path):
        error = subprocess.CalledProcessError(1, ["pdftoppm"], stderr="Syntax Error: Couldn't read xref table")
        with patch("conversion_service.infrastructure.pdf.rasterizer.subprocess.run", side_effect=error):
            with pytest.raises(RasterizationError) as exc_info:
                PdftoppmRasterizer().rasterize(pdf_path, tmp_path / "png")

        assert "exit code 1" in str(exc_info.value)
        assert "xref" in str(exc_info.value)

    def test_missing_executable_raises_rasterization_error(self, tmp_path, pdf_path):
        rasterizer = PdftoppmRasterizer(executable="pdftoppm-not-installed-anywhere")
        with pytest.raises(RasterizationError) as exc_info:
            rasterizer.rasterize(pdf_path, tmp_path / "png")
        assert "not found" in str(exc_info.value)

    def test_timeout_raises_rasterization_error(self, tmp_path, pdf_path):
        error = subprocess.TimeoutExpired(["pdftoppm"], 5)
        with patch("conversion_service.infrastructure.pdf.rasterizer.subprocess.run", side_effect=error):
            with pytest.raises(RasterizationError):
                PdftoppmRasterizer(timeout=5).rasterize(pdf_path, tmp_path / "png")

    def test_zero_pages_raises(self, tmp_path, pdf_path):
        with patch(
            "conversion_service.infrastructure.pdf.rasterizer.subprocess.run",
            side_effect=fake_pdftoppm(0),
        ):
            with pytest.raises(NoPagesProducedError):
                PdftoppmRasterizer().rasterize(pdf_path, tmp_path / "png")


class TestPyMuPdfRasterizer:
    def test_renders_each_page(self, tmp_path):
        pdf_path = tmp_path / "doc.pdf"
        with fitz.open() as document:
            for _ in range(3):
                document.new_page(width=200, height=100)
            document.save(pdf_path)

        pages = PyMuPdfRasterizer(dpi=72).rasterize(pdf_path, tmp_path / "png")

        assert [page.page_number for page in pages] == [1, 2, 3]
        assert pages[2].image_path.name == "page-3.png"
        with Image.open(pages[0].image_path) as image:
            assert image.size == (200, 100)

    def test_corrupt_pdf_raises_rasterization_error(self, tmp_path):
        pdf_path = tmp_path / "broken.pdf"
        pdf_path.write_bytes(b"this is not a pdf")
        with pytest.raises(RasterizationError):
            PyMuPdfRasterizer().rasterize(pdf_path, tmp_path / "png")


class TestBuildRasterizer:
    def test_builds_pdftoppm_by_default(self):
        rasterizer = build_rasterizer("", dpi=200)
        assert isinstance(rasterizer, PdftoppmRasterizer)
        assert rasterizer.dpi == 200

    def test_builds_pymupdf(self):
        assert isinstance(build_rasterizer("PyMuPDF"), PyMuPdfRasterizer)

    def test_pymupdf_logs_unenforced_timeout(self, caplog):
        with caplog.at_level(logging.INFO, logger="conversion_service.infrastructure.pdf.rasterizer"):
            build_rasterizer("pymupdf", timeout=300)
        assert "not enforced by the pymupdf backend" in caplog.text

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_rasterizer("ghostscript")


class TestRasterizerBase:
    def test_subclass_without_run_cannot_be_created(self):
        class Incomplete(Rasterizer):
            name = "incomplete"

        with pytest.raises(TypeError):
            Incomplete()
