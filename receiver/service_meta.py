"""Service identity resolved from proxy node metadata."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, ClassVar, Dict, List

UNKNOWN_SERVICE = "UNKNOWN"


@dataclass
class KeyValue:
    key: str
    value: str


@dataclass
class ServiceMetaInfo:
    """Destination record filled in by the field mapper.

    Only ``service_name`` and ``service_instance_name`` are textual and can be
    targeted by a mapping config; ``tags`` are attached by the receiver itself.
    """

    service_name: str = ""
    service_instance_name: str = ""
    tags: List[KeyValue] = field(default_factory=list)

    def set_service_name(self, value: str) -> None:
        self.service_name = value

    def set_service_instance_name(self, value: str) -> None:
        self.service_instance_name = value

    # Config field name -> setter. Consulted before any name-based lookup.
    FIELD_SETTERS: ClassVar[Dict[str, Callable[["ServiceMetaInfo", str], None]]] = {
        "serviceName": set_service_name,
        "serviceInstanceName": set_service_instance_name,
    }

    @classmethod
    def unknown(cls) -> "ServiceMetaInfo":
        return cls(service_name=UNKNOWN_SERVICE)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
