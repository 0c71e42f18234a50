"""Source document retrieval."""

from .pdf_downloader import PdfDownloader

__all__ = ["PdfDownloader"]
