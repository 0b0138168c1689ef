from __future__ import annotations

from typing import Any, Optional


class EnumerationError(Exception):
    """Base class for enum accessor configuration errors."""


class InvalidHandlerSpec(EnumerationError, TypeError):
    """``extra.handles`` is neither a mapping nor a name generator."""

    def __init__(self, message: str, *, column: Optional[str] = None, handles: Any = None) -> None:
        super().__init__(message)
        self.column = column
        self.handles = handles


class MethodNameConflict(EnumerationError, ValueError):
    """A predicate name is already defined on the record type."""

    def __init__(self, qualified_name: str) -> None:
        super().__init__(f"{qualified_name} is already defined")
        self.qualified_name = qualified_name
