from __future__ import annotations

import enum
from typing import Any, Dict, List, Mapping, Protocol

from sqlalchemy import Column, Enum, inspect
from sqlalchemy.types import TypeEngine

from schemas.enumeration import ColumnDeclaration, ColumnExtra, DataType


def enum_labels(column_type: TypeEngine) -> List[str]:
    """Labels an ``Enum`` column persists, after any ``values_callable``."""
    if isinstance(column_type, Enum):
        return list(column_type.enums)
    return []


def stored_label(column_type: TypeEngine, value: Any) -> Any:
    """Translate a Python value into the label ``column_type`` would persist for it.

    ``Enum`` maps members (and labels) to the stored label, which covers plain
    enums, ``StrEnum``s and ``values_callable``. Other enum members fall back
    to their name.
    """
    if isinstance(column_type, Enum):
        lookup = getattr(column_type, "_valid_lookup", None) or {}
        try:
            label = lookup.get(value)
        except TypeError:
            label = None
        if label is not None:
            return label
    if isinstance(value, enum.Enum) and not isinstance(value, str):
        return value.name
    return value


class MetadataProvider(Protocol):
    """Source of declared column metadata for a record type."""

    def column_info(self, record_type: type, column_name: str) -> ColumnDeclaration:
        """Return the declared metadata for ``column_name``."""

    def store_handles(self, record_type: type, column_name: str, handles: Mapping[str, str]) -> None:
        """Record the resolved ``{method_name: value}`` mapping for a column."""


class SqlAlchemyMetadataProvider:
    """Reads enum metadata from mapped columns.

    The domain comes from ``info["extra"]["list"]`` when declared, otherwise
    from the labels of the column's ``Enum`` type. ``info["data_type"]`` can
    mark a non-``Enum`` column (for example a ``String``) as enumerated.
    """

    def _column(self, record_type: type, column_name: str) -> Column:
        mapper = inspect(record_type)
        table_columns = mapper.local_table.c
        if column_name in table_columns:
            return table_columns[column_name]
        for column in mapper.columns:
            if column.name == column_name:
                return column
        raise ValueError(f"No such column '{column_name}' on {record_type.__name__}")

    def column_info(self, record_type: type, column_name: str) -> ColumnDeclaration:
        column = self._column(record_type, column_name)
        extra: Dict[str, Any] = dict(column.info.get("extra") or {})

        data_type = column.info.get("data_type")
        if data_type is None:
            data_type = DataType.ENUM.value if isinstance(column.type, Enum) else column.type.__visit_name__

        labels = extra.get("list")
        if labels is None:
            labels = enum_labels(column.type)

        return ColumnDeclaration(
            name=column.name,
            data_type=str(data_type),
            extra=ColumnExtra(labels=list(labels), handles=extra.get("handles")),
        )

    def store_handles(self, record_type: type, column_name: str, handles: Mapping[str, str]) -> None:
        column = self._column(record_type, column_name)
        extra = column.info.setdefault("extra", {})
        extra["handles"] = dict(handles)


class DeclarationMetadataProvider:
    """In-memory provider for record types described by ``ColumnDeclaration`` objects."""

    def __init__(self) -> None:
        self._declarations: Dict[type, Dict[str, ColumnDeclaration]] = {}

    def declare(self, record_type: type, *declarations: ColumnDeclaration) -> None:
        columns = self._declarations.setdefault(record_type, {})
        for declaration in declarations:
            columns[declaration.name] = declaration

    def column_info(self, record_type: type, column_name: str) -> ColumnDeclaration:
        for klass in record_type.__mro__:
            declaration = self._declarations.get(klass, {}).get(column_name)
            if declaration is not None:
                return declaration
        raise ValueError(f"No such column '{column_name}' on {record_type.__name__}")

    def store_handles(self, record_type: type, column_name: str, handles: Mapping[str, str]) -> None:
        declaration = self.column_info(record_type, column_name)
        declaration.extra.handles = dict(handles)
