"""
Schemas for the edition conversion endpoint
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from conversion_service.application.dto.conversion_dto import ConversionResultDTO
from conversion_service.domain.entities.conversion_request import ConversionRequest, StorageCredentials
from conversion_service.domain.value_objects.variant_spec import VariantSpec


class VariantSpecSchema(BaseModel):
    key: str
    width: int
    height: Optional[int] = None
    quality: int

    def to_domain(self) -> VariantSpec:
        return VariantSpec(key=self.key, width=self.width, height=self.height, quality=self.quality)


class ConvertRequestSchema(BaseModel):
    # Required fields are optional here so that missing values surface as a
    # validation envelope naming every missing parameter.
    editionId: Optional[str] = None
    pdfUrl: Optional[str] = None
    supabaseUrl: Optional[str] = None
    supabaseKey: Optional[str] = None
    bucket: Optional[str] = None
    variants: Optional[List[VariantSpecSchema]] = None
    thumbnail: Optional[VariantSpecSchema] = None

    def to_domain(self) -> ConversionRequest:
        return ConversionRequest(
            edition_id=self.editionId or "",
            pdf_url=self.pdfUrl or "",
            storage=StorageCredentials(endpoint=self.supabaseUrl or "", service_key=self.supabaseKey or ""),
            bucket=self.bucket,
            variants=tuple(spec.to_domain() for spec in self.variants) if self.variants is not None else None,
            thumbnail=self.thumbnail.to_domain() if self.thumbnail is not None else None,
        )


class AssetSchema(BaseModel):
    path: str
    publicUrl: str


class PageResultSchema(BaseModel):
    pageNumber: int
    width: Optional[int] = None
    height: Optional[int] = None
    assets: Dict[str, AssetSchema] = Field(default_factory=dict)


class ConvertResponseSchema(BaseModel):
    success: bool = True
    editionId: str
    bucket: str
    manifestPath: str
    totalPages: int
    pages: List[PageResultSchema] = Field(default_factory=list)
    uploads: List[str] = Field(default_factory=list)


def result_to_schema(result: ConversionResultDTO) -> ConvertResponseSchema:
    return ConvertResponseSchema.model_validate(result.to_dict())
