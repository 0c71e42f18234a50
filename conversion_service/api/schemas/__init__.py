"""
API Schemas
"""
from .common_schemas import ErrorResponseSchema, HealthSchema
from .conversion_schemas import (
    AssetSchema,
    ConvertRequestSchema,
    ConvertResponseSchema,
    PageResultSchema,
    VariantSpecSchema,
    result_to_schema,
)

__all__ = [
    # Common
    "ErrorResponseSchema",
    "HealthSchema",
    # Conversion
    "AssetSchema",
    "ConvertRequestSchema",
    "ConvertResponseSchema",
    "PageResultSchema",
    "VariantSpecSchema",
    "result_to_schema",
]
