"""Errors raised while loading, binding and applying field mappings."""
from __future__ import annotations

from typing import Optional, Sequence


class MappingError(Exception):
    """Base class for field mapping failures."""


class ConfigError(MappingError):
    """The mapping config is missing, malformed, or maps a field to an empty path."""


class InitializationError(MappingError):
    """A configured destination field has no usable setter on the record type."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class PathResolutionError(MappingError):
    """A configured source path could not be resolved against a document.

    Recoverable per record: the caller should drop the record it was filling.
    """

    def __init__(self, field: str, path: Sequence[str], segment: str, reason: str = "missing segment"):
        self.field = field
        self.path = tuple(path)
        self.segment = segment
        self.reason = reason
        super().__init__(
            f"Cannot resolve '{'.'.join(self.path)}' for field '{field}': "
            f"{reason} '{segment}'"
        )
