"""Pydantic schemas for API request/response models."""
from api.schemas.metadata import (
    FieldMappingInfo,
    InflateRequest,
    KeyValueModel,
    ServiceMetaInfoModel,
)

__all__ = [
    "FieldMappingInfo",
    "InflateRequest",
    "KeyValueModel",
    "ServiceMetaInfoModel",
]
