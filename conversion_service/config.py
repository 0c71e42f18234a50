from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from .constants import DEFAULT_BUCKET, DEFAULT_DPI, DEFAULT_THUMBNAIL, DEFAULT_VARIANTS
from .domain.value_objects.variant_spec import VariantSpec

# Ensure environment variables from the repository root .env are available
# regardless of the working directory used to start the process.
ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


class Settings(BaseSettings):
  default_bucket: str = Field(default=DEFAULT_BUCKET, alias="CONVERSION_DEFAULT_BUCKET")
  service_secret: str = Field(default="", alias="CONVERSION_SERVICE_SECRET")
  host: str = Field(default="0.0.0.0", alias="HOST")
  port: int = Field(default=3000, alias="PORT")
  rasterizer_backend: str = Field(default="pdftoppm", alias="RASTERIZER_BACKEND")
  pdftoppm_path: str = Field(default="pdftoppm", alias="PDFTOPPM_PATH")
  rasterizer_dpi: int = Field(default=DEFAULT_DPI, alias="RASTERIZER_DPI")
  rasterizer_timeout_seconds: float = Field(default=300.0, alias="RASTERIZER_TIMEOUT_SECONDS")
  download_timeout_seconds: float = Field(default=60.0, alias="DOWNLOAD_TIMEOUT_SECONDS")
  upload_timeout_seconds: float = Field(default=60.0, alias="UPLOAD_TIMEOUT_SECONDS")
  page_workers: int = Field(default=4, alias="PAGE_WORKERS")
  log_structured: bool = Field(default=True, alias="LOG_STRUCTURED")

  class Config:
    case_sensitive = False


@dataclass(frozen=True)
class ConversionConfig:
  """Immutable pipeline configuration injected into the conversion handler."""

  default_bucket: str = DEFAULT_BUCKET
  variants: Tuple[VariantSpec, ...] = tuple(
    VariantSpec(key=key, width=width, quality=quality) for key, width, quality in DEFAULT_VARIANTS
  )
  thumbnail: VariantSpec = VariantSpec(
    key=DEFAULT_THUMBNAIL[0], width=DEFAULT_THUMBNAIL[1], quality=DEFAULT_THUMBNAIL[2]
  )
  dpi: int = DEFAULT_DPI
  page_workers: int = 4
  download_timeout_seconds: float = 60.0
  upload_timeout_seconds: float = 60.0
  rasterizer_timeout_seconds: float = 300.0

  def __post_init__(self) -> None:
    if self.page_workers < 1:
      raise ValueError("page_workers must be >= 1")
    if self.dpi < 1:
      raise ValueError("dpi must be >= 1")

  @classmethod
  def from_settings(cls, settings: Settings) -> ConversionConfig:
    return cls(
      default_bucket=settings.default_bucket,
      dpi=settings.rasterizer_dpi,
      page_workers=settings.page_workers,
      download_timeout_seconds=settings.download_timeout_seconds,
      upload_timeout_seconds=settings.upload_timeout_seconds,
      rasterizer_timeout_seconds=settings.rasterizer_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings()  # type: ignore[arg-type]
