"""Service metadata receiver: resolves service identities from proxy node metadata."""

__version__ = "0.1.0"

from receiver.analyzer import MetadataAnalyzer  # noqa: E402
from receiver.service_meta import ServiceMetaInfo  # noqa: E402

__all__ = ["MetadataAnalyzer", "ServiceMetaInfo", "__version__"]
