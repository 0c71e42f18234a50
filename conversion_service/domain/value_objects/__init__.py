"""
Domain Value Objects

Immutable value objects that encapsulate domain concepts with validation.
"""
from .conversion_stage import ConversionStage
from .storage_path import ensure_trailing_slash, manifest_path, page_asset_path, pad_page_number
from .variant_spec import VariantSpec, ensure_unique_keys

__all__ = [
    'ConversionStage',
    'VariantSpec',
    'ensure_unique_keys',
    'ensure_trailing_slash',
    'manifest_path',
    'page_asset_path',
    'pad_page_number',
]
