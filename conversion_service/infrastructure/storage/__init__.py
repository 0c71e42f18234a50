"""Object storage infrastructure."""

from .asset_publisher import AssetPublisher, StorageBackend
from .supabase_storage import StorageBackendError, SupabaseStorage

__all__ = ["AssetPublisher", "StorageBackend", "StorageBackendError", "SupabaseStorage"]
