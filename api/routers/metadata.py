"""Service metadata API endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from receiver.analyzer import MetadataAnalyzer
from receiver.mappers import FieldsHelper, MappingError, PathResolutionError
from receiver.service_meta import ServiceMetaInfo

from api.schemas.metadata import FieldMappingInfo, InflateRequest, ServiceMetaInfoModel

router = APIRouter(tags=["metadata"])

# Initialized on first request; the mapping file comes from MX_FIELDS_MAPPING_FILE or the bundled default.
_helper = FieldsHelper(ServiceMetaInfo)


def get_fields_helper() -> FieldsHelper:
    try:
        _helper.init()
    except MappingError as e:
        raise HTTPException(status_code=500, detail=f"Field mappings unavailable: {e}")
    return _helper


@router.get("/mapping", response_model=List[FieldMappingInfo])
def get_mapping(helper: FieldsHelper = Depends(get_fields_helper)):
    """List the configured field mappings."""
    return [
        FieldMappingInfo(
            destination_field=mapping.destination_field,
            source_path=list(mapping.source_path),
            dotted_path=mapping.dotted_path,
        )
        for mapping in helper.field_mappings.values()
    ]


@router.post("/inflate", response_model=ServiceMetaInfoModel)
def inflate_metadata(request: InflateRequest, helper: FieldsHelper = Depends(get_fields_helper)):
    """Resolve a service identity from node metadata."""
    record = helper.new_record()
    try:
        helper.inflate(request.metadata, record)
    except PathResolutionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ServiceMetaInfoModel.model_validate(record)


@router.post("/resolve", response_model=ServiceMetaInfoModel)
def resolve_metadata(request: InflateRequest, helper: FieldsHelper = Depends(get_fields_helper)):
    """Resolve a service identity, falling back to the UNKNOWN service on unresolvable metadata."""
    return ServiceMetaInfoModel.model_validate(MetadataAnalyzer(helper).resolve(request.metadata))
