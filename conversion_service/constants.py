from __future__ import annotations

# Single source of truth for static defaults.

DEFAULT_BUCKET = "editions"

# (key, width, quality) per resolution tier.
DEFAULT_VARIANTS = (
  ("low", 900, 72),
  ("medium", 1400, 80),
  ("high", 2400, 90),
)
DEFAULT_THUMBNAIL = ("thumbnail", 360, 60)

DEFAULT_DPI = 300
PAGE_FILE_PREFIX = "page"
TEMP_DIR_PREFIX = "pdf-conversion-"

PAGE_CONTENT_TYPE = "image/webp"
MANIFEST_CONTENT_TYPE = "application/json"
STORAGE_CACHE_CONTROL = "max-age=3600"

DOWNLOAD_CHUNK_SIZE = 64 * 1024
