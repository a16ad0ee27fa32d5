"""Resolves a ServiceMetaInfo from the node metadata attached to a telemetry record."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from receiver.mappers import FieldsHelper, PathResolutionError
from receiver.service_meta import ServiceMetaInfo

_log = logging.getLogger("mxfields.analyzer")


class MetadataAnalyzer:
    """Turns node metadata into service identities using a shared FieldsHelper."""

    def __init__(self, helper: FieldsHelper):
        self.helper = helper

    def resolve(self, node_metadata: Mapping[str, Any]) -> ServiceMetaInfo:
        """Inflate a fresh record; unresolvable metadata gives the UNKNOWN service."""
        record = self.helper.new_record()
        try:
            self.helper.inflate(node_metadata, record)
        except PathResolutionError as exc:
            _log.warning("Failed to inflate service meta info: %s", exc)
            return ServiceMetaInfo.unknown()
        return record
