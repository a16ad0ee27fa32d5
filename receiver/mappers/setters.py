"""Setter registry: binds each configured destination field to a mutation on the record type."""
from __future__ import annotations

import dataclasses
import inspect
import logging
import re
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping

from receiver.mappers.config_mapper import MappingTable
from receiver.mappers.errors import InitializationError

_log = logging.getLogger("mxfields.setters")

BoundSetter = Callable[[Any, str], None]
SetterRegistry = Mapping[str, BoundSetter]

_TEXT_ANNOTATIONS = (inspect.Parameter.empty, str, "str", Any, "Any")
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def snake_case(name: str) -> str:
    """``serviceInstanceName`` -> ``service_instance_name``."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.lower()


def _accepts_text(func: Callable, field: str) -> None:
    """Check ``func(record, value)`` can be called with one textual value."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as exc:
        raise InitializationError(f"Setter for field '{field}' is not introspectable: {exc}", field=field) from exc

    params = list(signature.parameters.values())
    positional = [p for p in params if p.kind in _POSITIONAL]
    has_varargs = any(p.kind == inspect.Parameter.VAR_POSITIONAL for p in params)
    required = [p for p in positional if p.default is inspect.Parameter.empty]
    required_kwonly = [
        p for p in params
        if p.kind == inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty
    ]

    # First positional slot is the record itself.
    if len(positional) < 2 and not has_varargs:
        raise InitializationError(f"Setter for field '{field}' takes no value argument", field=field)
    if len(required) > 2 or required_kwonly:
        raise InitializationError(
            f"Setter for field '{field}' requires more than a single value argument", field=field
        )
    if len(positional) >= 2 and positional[1].annotation not in _TEXT_ANNOTATIONS:
        raise InitializationError(
            f"Setter for field '{field}' does not accept a string (annotated {positional[1].annotation!r})",
            field=field,
        )


def _attribute_setter(attr: str) -> BoundSetter:
    def setter(record: Any, value: str) -> None:
        setattr(record, attr, value)

    setter.__name__ = f"set_{attr}"
    return setter


def resolve_setter(record_type: type, field: str) -> BoundSetter:
    """Find the mutation for ``field`` on ``record_type``.

    Lookup order:
    1. Explicit ``FIELD_SETTERS`` table on the record type
    2. Method ``set_<snake_case(field)>``
    3. Dataclass field ``<snake_case(field)>`` declared as ``str``

    Raises:
        InitializationError: if nothing matches or the match cannot take a single string
    """
    explicit = getattr(record_type, "FIELD_SETTERS", None) or {}
    if field in explicit:
        setter = explicit[field]
        _accepts_text(setter, field)
        return setter

    attr = snake_case(field)
    method = getattr(record_type, f"set_{attr}", None)
    if method is not None:
        if not callable(method):
            raise InitializationError(
                f"'{record_type.__name__}.set_{attr}' for field '{field}' is not callable", field=field
            )
        _accepts_text(method, field)
        return method

    if dataclasses.is_dataclass(record_type):
        declared = {f.name: f for f in dataclasses.fields(record_type)}
        if attr in declared:
            if declared[attr].type not in (str, "str"):
                raise InitializationError(
                    f"Field '{field}' maps to non-textual attribute "
                    f"'{record_type.__name__}.{attr}' ({declared[attr].type})",
                    field=field,
                )
            return _attribute_setter(attr)

    raise InitializationError(
        f"No setter for field '{field}' on {record_type.__name__}", field=field
    )


def build_setter_registry(table: MappingTable, record_type: type) -> SetterRegistry:
    """Bind every field of ``table``; either all bind or InitializationError is raised."""
    registry: Dict[str, BoundSetter] = {}
    for field in table:
        setter = resolve_setter(record_type, field)
        _log.debug("Bound field %s to %r", field, setter)
        registry[field] = setter
    return MappingProxyType(registry)
