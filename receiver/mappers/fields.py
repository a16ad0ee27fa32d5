"""Inflates destination records from nested metadata documents."""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from receiver.mappers.config_mapper import (
    FieldMapping,
    MappingTable,
    load_mapping_table,
    resolve_mapping_path,
)
from receiver.mappers.errors import InitializationError, PathResolutionError
from receiver.mappers.setters import SetterRegistry, build_setter_registry
from receiver.service_meta import ServiceMetaInfo

_log = logging.getLogger("mxfields.fields")


def resolve_value(document: Mapping[str, Any], mapping: FieldMapping, strict: bool = False) -> str:
    """Walk ``mapping.source_path`` through ``document`` and return the text found there.

    A terminal node that is not a string (nested mapping, list, number, null)
    yields ``""`` unless ``strict`` is set.
    """
    node: Any = document
    for segment in mapping.source_path:
        if not isinstance(node, Mapping):
            raise PathResolutionError(
                mapping.destination_field, mapping.source_path, segment,
                reason="cannot descend into non-mapping node at segment",
            )
        try:
            node = node[segment]
        except KeyError:
            raise PathResolutionError(mapping.destination_field, mapping.source_path, segment) from None

    if isinstance(node, str):
        return node
    if strict:
        raise PathResolutionError(
            mapping.destination_field, mapping.source_path, mapping.source_path[-1],
            reason=f"non-textual value ({type(node).__name__}) at segment",
        )
    return ""


def inflate(
    document: Mapping[str, Any],
    table: MappingTable,
    setters: SetterRegistry,
    record: Any,
    strict: bool = False,
) -> None:
    """Set every mapped field of ``record`` from ``document``.

    The first unresolvable path aborts the remaining fields; fields set before
    it stay set, so callers should discard ``record`` on failure.
    """
    for field, mapping in table.items():
        setters[field](record, resolve_value(document, mapping, strict))


class FieldsHelper:
    """Holds one mapping table and its bound setters for the lifetime of a receiver.

    ``init`` runs the load-and-bind once; later calls are no-ops. Once
    initialized the table and setters are read-only and ``inflate`` can be
    called from any number of threads.
    """

    def __init__(self, record_type: type = ServiceMetaInfo, strict: bool = False):
        self.record_type = record_type
        self.strict = strict
        self._lock = threading.Lock()
        self._initialized = False
        self._mapping_file: Optional[Path] = None
        self._table: MappingTable = MappingProxyType({})
        self._setters: SetterRegistry = MappingProxyType({})

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def mapping_file(self) -> Optional[Path]:
        return self._mapping_file

    @property
    def field_mappings(self) -> MappingTable:
        return self._table

    def init(self, mapping_file: Optional[Union[str, Path]] = None) -> None:
        """Load the mapping config and bind setters, once.

        Raises:
            ConfigError: if the mapping file is unreadable or invalid
            InitializationError: if a configured field has no setter on the record type
        """
        if not self._initialized:
            with self._lock:
                if not self._initialized:
                    path = resolve_mapping_path(mapping_file)
                    table = load_mapping_table(path)
                    setters = build_setter_registry(table, self.record_type)
                    self._table = table
                    self._setters = setters
                    self._mapping_file = path
                    self._initialized = True
                    return

        if mapping_file is not None and Path(mapping_file) != self._mapping_file:
            _log.warning(
                "Field mappings already loaded from %s; ignoring %s",
                self._mapping_file, mapping_file,
            )

    def new_record(self) -> Any:
        return self.record_type()

    def inflate(self, document: Mapping[str, Any], record: Any) -> None:
        """Fill ``record`` from ``document`` using the loaded mappings.

        Raises:
            InitializationError: if called before ``init``
            PathResolutionError: if a configured path is absent from ``document``
        """
        if not self._initialized:
            raise InitializationError("FieldsHelper.inflate() called before init()")
        inflate(document, self._table, self._setters, record, strict=self.strict)
