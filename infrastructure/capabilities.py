from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from schemas.enumeration import MethodBinding, qualified_name
from schemas.enumeration.errors import MethodNameConflict

Predicate = Callable[[Any], bool]


@dataclass(slots=True)
class InstalledCapability:
    name: str
    predicate: Predicate
    binding: Optional[MethodBinding] = None


class CapabilityTable:
    """Process-wide registry of named behaviours installed on record types.

    Installing sets the predicate as a class attribute, so ordinary attribute
    lookup dispatches ``row.is_good()`` to it. The check for an existing name
    and the install happen under one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._installed: Dict[type, Dict[str, InstalledCapability]] = {}

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def exists(self, record_type: type, name: str) -> bool:
        with self._lock:
            if name in self._installed.get(record_type, {}):
                return True
            return hasattr(record_type, name)

    def install(
        self,
        record_type: type,
        name: str,
        predicate: Predicate,
        *,
        binding: Optional[MethodBinding] = None,
    ) -> None:
        with self._lock:
            if self.exists(record_type, name):
                raise MethodNameConflict(qualified_name(record_type, name))
            predicate.__name__ = name
            predicate.__qualname__ = f"{record_type.__qualname__}.{name}"
            predicate.__module__ = record_type.__module__
            self._installed.setdefault(record_type, {})[name] = InstalledCapability(
                name=name,
                predicate=predicate,
                binding=binding,
            )
            setattr(record_type, name, predicate)

    def lookup(self, record_type: type, name: str) -> Optional[Predicate]:
        with self._lock:
            for klass in record_type.__mro__:
                installed = self._installed.get(klass, {}).get(name)
                if installed is not None:
                    return installed.predicate
        return None

    def bindings(self, record_type: type) -> Dict[str, MethodBinding]:
        """Bindings visible on ``record_type``, including those of its bases."""
        result: Dict[str, MethodBinding] = {}
        with self._lock:
            for klass in reversed(record_type.__mro__):
                for name, installed in self._installed.get(klass, {}).items():
                    if installed.binding is not None:
                        result[name] = installed.binding
        return result


capability_table = CapabilityTable()
