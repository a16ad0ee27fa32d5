"""Config-driven mapping of nested metadata paths onto destination record fields."""
from __future__ import annotations

from receiver.mappers.config_mapper import (
    DEFAULT_MAPPING_FILE,
    FieldMapping,
    MappingTable,
    load_mapping_table,
    parse_mapping_table,
    resolve_mapping_path,
    split_path,
)
from receiver.mappers.errors import (
    ConfigError,
    InitializationError,
    MappingError,
    PathResolutionError,
)
from receiver.mappers.fields import FieldsHelper, inflate, resolve_value
from receiver.mappers.setters import BoundSetter, SetterRegistry, build_setter_registry

__all__ = [
    "DEFAULT_MAPPING_FILE",
    "FieldMapping",
    "MappingTable",
    "load_mapping_table",
    "parse_mapping_table",
    "resolve_mapping_path",
    "split_path",
    "ConfigError",
    "InitializationError",
    "MappingError",
    "PathResolutionError",
    "FieldsHelper",
    "inflate",
    "resolve_value",
    "BoundSetter",
    "SetterRegistry",
    "build_setter_registry",
]
