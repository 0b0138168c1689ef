from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MethodBinding:
    """A resolved ``method_name -> value`` pair scoped to one column."""

    column: str
    method_name: str
    value: str

    def qualified_name(self, record_type: type) -> str:
        return qualified_name(record_type, self.method_name)


def qualified_name(record_type: type, method_name: str) -> str:
    return f"{record_type.__module__}.{record_type.__qualname__}.{method_name}"
