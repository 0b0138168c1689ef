from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union


class _Omit:
    """Sentinel a generator returns (or a static map holds) to skip a label."""

    _instance: Optional["_Omit"] = None

    def __new__(cls) -> "_Omit":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMIT"

    def __bool__(self) -> bool:
        return False


OMIT = _Omit()

NameGenerator = Callable[[str, str, type], Union[str, None, _Omit]]


@dataclass(frozen=True, slots=True)
class Disabled:
    """No predicates are generated for the column."""


@dataclass(frozen=True, slots=True)
class Default:
    """One predicate per label, named ``<prefix><label>``."""

    prefix: Optional[str] = None


@dataclass(frozen=True, slots=True)
class StaticMap:
    """Explicit ``{method_name: value}`` mapping; only listed names are generated."""

    handles: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "handles", MappingProxyType(dict(self.handles)))


@dataclass(frozen=True, slots=True)
class Generator:
    """Callable ``(value, column_name, record_type) -> method name | None | OMIT``."""

    function: NameGenerator


HandlerSpec = Union[Disabled, Default, StaticMap, Generator]

DISABLED = Disabled()
DEFAULT = Default()


def is_omitted(value: Any) -> bool:
    return value is None or value is OMIT
