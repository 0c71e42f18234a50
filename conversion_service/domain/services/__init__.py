"""
Domain services for logic that doesn't belong to a specific entity.
"""
from .manifest_builder import ManifestBuilder

__all__ = ["ManifestBuilder"]
