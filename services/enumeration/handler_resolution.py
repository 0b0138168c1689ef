"""Turn a column's ``handles`` declaration into concrete method bindings.

Resolution happens in two steps:

1. ``resolve_handler_spec`` classifies the raw declaration into one of the
   handler specs (``Disabled``, ``Default``, ``StaticMap``, ``Generator``).
2. ``resolve_handles`` expands that spec against the column's domain into an
   ordered ``{method_name: value}`` mapping, and ``bindings_from_handles``
   filters it into ``MethodBinding`` objects.

Nothing here touches the record type; installing the bindings is the
synthesizer's job.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from config import settings
from schemas.enumeration import (
    DEFAULT,
    DISABLED,
    Default,
    Disabled,
    Generator,
    HandlerSpec,
    MethodBinding,
    StaticMap,
    is_omitted,
)
from schemas.enumeration.errors import InvalidHandlerSpec

logger = logging.getLogger(__name__)

_HANDLER_SPEC_TYPES = (Disabled, Default, StaticMap, Generator)


def _is_disabled(handles: Any) -> bool:
    if isinstance(handles, Disabled):
        return True
    # bool is an int subclass; True is not a valid declaration and falls through
    if isinstance(handles, bool):
        return not handles
    if isinstance(handles, (int, float)):
        return handles == 0
    if isinstance(handles, str):
        return handles in {"", "0"}
    if isinstance(handles, (list, tuple, set, frozenset)):
        return not handles
    return False


def resolve_handler_spec(handles: Any, *, column: Optional[str] = None) -> HandlerSpec:
    """Classify a raw ``extra.handles`` value.

    ``None`` means the column did not declare handles and gets the default
    ``is_<value>`` naming. Falsy scalars (``False``, ``0``, ``"0"``, ``""``)
    and empty lists or tuples disable the column. Callables become generators
    and mappings become static maps. Anything else raises ``InvalidHandlerSpec``.
    """
    if handles is None:
        return DEFAULT
    if _is_disabled(handles):
        return DISABLED
    if isinstance(handles, _HANDLER_SPEC_TYPES):
        return handles
    if callable(handles):
        return Generator(handles)
    if isinstance(handles, Mapping):
        return StaticMap(handles)
    raise InvalidHandlerSpec(
        f"handles for column '{column}' must be a mapping or a callable, "
        f"got {type(handles).__name__}",
        column=column,
        handles=handles,
    )


def _assign(resolved: Dict[str, Any], method_name: str, value: Any, *, column: str) -> None:
    # Later labels replace earlier ones and move to the end of the mapping.
    previous = resolved.pop(method_name, None)
    if previous is not None and previous != value:
        logger.debug(
            "Method %s for column %s rebound from %r to %r",
            method_name,
            column,
            previous,
            value,
        )
    resolved[method_name] = value


def _check_name(method_name: Any, *, column: str) -> None:
    if not isinstance(method_name, str):
        raise InvalidHandlerSpec(
            f"method names for column '{column}' must be strings, "
            f"got {type(method_name).__name__}",
            column=column,
            handles=method_name,
        )


def resolve_handles(
    spec: HandlerSpec,
    *,
    column: str,
    domain: Sequence[str],
    record_type: type,
    prefix: Optional[str] = None,
) -> Dict[str, Any]:
    """Expand ``spec`` into an ordered ``{method_name: value}`` mapping."""
    resolved: Dict[str, Any] = {}

    if isinstance(spec, Disabled):
        return resolved

    if isinstance(spec, Default):
        name_prefix = spec.prefix if spec.prefix is not None else (
            prefix if prefix is not None else settings.ENUM_ACCESSOR_METHOD_PREFIX
        )
        for value in domain:
            _assign(resolved, f"{name_prefix}{value}", value, column=column)
        return resolved

    if isinstance(spec, Generator):
        for value in domain:
            method_name = spec.function(value, column, record_type)
            if is_omitted(method_name):
                logger.debug("Generator skipped value %r of column %s", value, column)
                continue
            _check_name(method_name, column=column)
            _assign(resolved, method_name, value, column=column)
        return resolved

    if isinstance(spec, StaticMap):
        known = set(domain)
        for method_name, value in spec.handles.items():
            _check_name(method_name, column=column)
            if not is_omitted(value) and not isinstance(value, str):
                raise InvalidHandlerSpec(
                    f"value for method '{method_name}' on column '{column}' must be a string, "
                    f"got {type(value).__name__}",
                    column=column,
                    handles=value,
                )
            if isinstance(value, str) and value and value not in known:
                logger.warning(
                    "Method %s on column %s checks for %r, which is not in the declared list",
                    method_name,
                    column,
                    value,
                )
            _assign(resolved, method_name, value, column=column)
        return resolved

    raise InvalidHandlerSpec(
        f"Unsupported handler spec for column '{column}': {spec!r}",
        column=column,
        handles=spec,
    )


def bindings_from_handles(
    handles: Mapping[str, Any],
    *,
    column: str,
    allow_empty_values: Optional[bool] = None,
) -> List[MethodBinding]:
    """Drop empty names and omitted values, keeping the mapping order."""
    if allow_empty_values is None:
        allow_empty_values = settings.ENUM_ACCESSOR_ALLOW_EMPTY_VALUES

    bindings: List[MethodBinding] = []
    for method_name, value in handles.items():
        if not method_name:
            logger.debug("Dropping unnamed method for column %s", column)
            continue
        if is_omitted(value) or (value == "" and not allow_empty_values):
            logger.debug("Dropping method %s for column %s: no value", method_name, column)
            continue
        bindings.append(MethodBinding(column=column, method_name=method_name, value=value))
    return bindings


def resolve_bindings(
    handles: Any,
    *,
    column: str,
    domain: Sequence[str],
    record_type: type,
    prefix: Optional[str] = None,
    allow_empty_values: Optional[bool] = None,
) -> List[MethodBinding]:
    spec = resolve_handler_spec(handles, column=column)
    resolved = resolve_handles(
        spec,
        column=column,
        domain=domain,
        record_type=record_type,
        prefix=prefix,
    )
    return bindings_from_handles(resolved, column=column, allow_empty_values=allow_empty_values)
