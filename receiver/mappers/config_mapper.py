"""YAML-driven mapping table: destination field -> dotted source path."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from receiver.mappers.errors import ConfigError

_log = logging.getLogger("mxfields.config")

# Path to bundled YAML configs
CONFIGS_DIR = Path(__file__).parent / "configs"
DEFAULT_MAPPING_FILE = CONFIGS_DIR / "metadata-service-mapping.yaml"
MAPPING_FILE_ENV = "MX_FIELDS_MAPPING_FILE"


class FieldMapping(BaseModel):
    """A single destination field bound to a path inside the source document."""

    model_config = ConfigDict(frozen=True)

    destination_field: str
    source_path: Tuple[str, ...]

    @field_validator("destination_field")
    @classmethod
    def _field_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("destination field name is blank")
        return value

    @field_validator("source_path")
    @classmethod
    def _path_not_empty(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("source path has no segments")
        return value

    @property
    def dotted_path(self) -> str:
        return ".".join(self.source_path)


MappingTable = Mapping[str, FieldMapping]


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that refuses mappings with repeated keys."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen = set()
            for key_node, _ in node.value:
                key = self.construct_object(key_node, deep=deep)
                if not isinstance(key, (str, int, float, bool)):
                    continue
                if key in seen:
                    raise yaml.constructor.ConstructorError(
                        "while constructing a mapping",
                        node.start_mark,
                        f"found duplicate key {key!r}",
                        key_node.start_mark,
                    )
                seen.add(key)
        return super().construct_mapping(node, deep=deep)


def split_path(dotted: str) -> Tuple[str, ...]:
    """Split ``a.b.c`` into segments, dropping empty ones (``a..b.`` -> a, b)."""
    return tuple(segment for segment in dotted.split(".") if segment)


def build_mapping_table(config: Any, origin: str = "<config>") -> MappingTable:
    """Validate a decoded config and turn it into an immutable mapping table."""
    if not isinstance(config, dict):
        kind = "empty document" if config is None else type(config).__name__
        raise ConfigError(f"{origin}: expected a flat mapping of field -> path, got {kind}")

    table: Dict[str, FieldMapping] = {}
    for destination_field, dotted in config.items():
        if not isinstance(destination_field, str):
            raise ConfigError(f"{origin}: field name {destination_field!r} is not a string")
        if not isinstance(dotted, str):
            raise ConfigError(
                f"{origin}: path for '{destination_field}' must be a string, "
                f"got {type(dotted).__name__}"
            )
        try:
            mapping = FieldMapping(
                destination_field=destination_field,
                source_path=split_path(dotted),
            )
        except ValidationError as exc:
            errors = "; ".join(err["msg"] for err in exc.errors())
            raise ConfigError(f"{origin}: invalid mapping for '{destination_field}': {errors}") from exc
        table[destination_field] = mapping

    return MappingProxyType(table)


def parse_mapping_table(text: str, origin: str = "<string>") -> MappingTable:
    """Parse YAML text into a mapping table."""
    try:
        config = yaml.load(text, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{origin}: malformed mapping config: {exc}") from exc
    return build_mapping_table(config, origin)


def load_mapping_table(config_path: Union[str, Path]) -> MappingTable:
    """Read and parse a mapping YAML file.

    Raises:
        ConfigError: if the file cannot be read or does not hold a valid flat mapping
    """
    config_path = Path(config_path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read mapping config {config_path}: {exc}") from exc

    table = parse_mapping_table(text, origin=str(config_path))
    _log.info("Loaded %d field mappings from %s", len(table), config_path)
    return table


def resolve_mapping_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Pick the mapping file: explicit argument, then env var, then bundled default."""
    if path:
        return Path(path)
    env_val = os.environ.get(MAPPING_FILE_ENV)
    if env_val:
        return Path(env_val)
    return DEFAULT_MAPPING_FILE
