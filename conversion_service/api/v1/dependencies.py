"""Shared FastAPI dependencies for v1 API routers.

These factories centralize construction of the conversion handler and its
infrastructure so routers depend on simple callables and tests can swap any
of them through ``app.dependency_overrides``.
"""
from __future__ import annotations

import hmac
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from conversion_service.application.commands.convert_edition import (
    ConvertEditionHandler,
    StorageFactory,
)
from conversion_service.config import ConversionConfig, Settings, get_settings
from conversion_service.domain.entities.conversion_request import StorageCredentials
from conversion_service.domain.exceptions import AuthorizationError
from conversion_service.infrastructure.download.pdf_downloader import PdfDownloader
from conversion_service.infrastructure.pdf.rasterizer import build_rasterizer
from conversion_service.infrastructure.pdf.variant_renderer import VariantRenderer
from conversion_service.infrastructure.storage.supabase_storage import SupabaseStorage


@lru_cache()
def _conversion_config() -> ConversionConfig:
    return ConversionConfig.from_settings(get_settings())


def get_conversion_config() -> ConversionConfig:
    """Provide the process-wide conversion configuration."""
    return _conversion_config()


def supabase_storage_factory(timeout: float) -> StorageFactory:
    def _create(credentials: StorageCredentials) -> SupabaseStorage:
        return SupabaseStorage(credentials.endpoint, credentials.service_key, timeout=timeout)

    return _create


@lru_cache()
def _convert_edition_handler() -> ConvertEditionHandler:
    settings = get_settings()
    config = _conversion_config()
    return ConvertEditionHandler(
        config,
        PdfDownloader(timeout=config.download_timeout_seconds),
        build_rasterizer(
            settings.rasterizer_backend,
            dpi=config.dpi,
            timeout=config.rasterizer_timeout_seconds,
            executable=settings.pdftoppm_path,
        ),
        VariantRenderer(),
        supabase_storage_factory(config.upload_timeout_seconds),
    )


def get_convert_edition_handler() -> ConvertEditionHandler:
    """Provide a cached ConvertEdition handler."""
    return _convert_edition_handler()


def verify_service_secret(
    x_api_key: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request unless it carries the shared secret, when one is configured."""
    secret = settings.service_secret
    if not secret:
        return
    provided = (x_api_key or "").encode("utf-8")
    if not hmac.compare_digest(provided, secret.encode("utf-8")):
        raise AuthorizationError()
