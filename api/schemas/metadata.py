"""Service metadata Pydantic models."""
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class KeyValueModel(BaseModel):
    """A service tag."""

    key: str
    value: str

    model_config = ConfigDict(from_attributes=True)


class ServiceMetaInfoModel(BaseModel):
    """A resolved service identity."""

    service_name: str = ""
    service_instance_name: str = ""
    tags: List[KeyValueModel] = []

    model_config = ConfigDict(from_attributes=True)


class InflateRequest(BaseModel):
    """Node metadata to resolve into a service identity."""

    metadata: Dict[str, Any] = Field(..., description="Decoded node metadata document")


class FieldMappingInfo(BaseModel):
    """One configured destination field and its source path."""

    destination_field: str
    source_path: List[str]
    dotted_path: str
