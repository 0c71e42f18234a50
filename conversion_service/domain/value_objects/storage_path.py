"""Deterministic storage naming for edition assets.

Downstream readers depend on these paths, so they must stay bit-exact:
``{edition}/pages/{variant}/{page:03d}.webp`` and ``{edition}/manifest.json``.
"""
from __future__ import annotations

PAGE_NUMBER_WIDTH = 3
PAGE_ASSET_EXTENSION = "webp"
MANIFEST_FILENAME = "manifest.json"


def pad_page_number(page_number: int, size: int = PAGE_NUMBER_WIDTH) -> str:
    return str(page_number).zfill(size)


def page_asset_path(edition_id: str, variant_key: str, page_number: int) -> str:
    return f"{edition_id}/pages/{variant_key}/{pad_page_number(page_number)}.{PAGE_ASSET_EXTENSION}"


def manifest_path(edition_id: str) -> str:
    return f"{edition_id}/{MANIFEST_FILENAME}"


def ensure_trailing_slash(value: str) -> str:
    return value if value.endswith("/") else f"{value}/"
