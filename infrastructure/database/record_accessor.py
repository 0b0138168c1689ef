from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Tuple

from sqlalchemy import inspect
from sqlalchemy.orm import Mapper
from sqlalchemy.types import TypeEngine

from infrastructure.database.metadata import stored_label


class RecordAccessor(Protocol):
    """Reads the stored value of a column from a record instance."""

    def get_column(self, record: Any, column_name: str) -> Any:
        """Return the value, or ``None`` when the column holds no value."""


class SqlAlchemyRecordAccessor:
    """Reads columns of mapped instances by column name, not attribute key.

    A column declared as ``status = Column("status_code", ...)`` is read
    through the ``status`` attribute. Enum members come back as the label the
    column's type persists for them. Unmapped objects fall back to plain
    attribute access.
    """

    def __init__(self) -> None:
        self._columns: Dict[Tuple[Mapper, str], Tuple[str, Optional[TypeEngine]]] = {}

    def get_column(self, record: Any, column_name: str) -> Any:
        state = inspect(record, raiseerr=False)
        mapper = getattr(state, "mapper", None)
        if mapper is not None:
            key, column_type = self._mapped_column(mapper, column_name)
        else:
            key, column_type = column_name, None
        return stored_label(column_type, getattr(record, key, None))

    def _mapped_column(self, mapper: Mapper, column_name: str) -> Tuple[str, Optional[TypeEngine]]:
        cache_key = (mapper, column_name)
        found = self._columns.get(cache_key)
        if found is None:
            found = (column_name, None)
            for attr_key, column in mapper.columns.items():
                if column.name == column_name:
                    found = (attr_key, column.type)
                    break
            self._columns[cache_key] = found
        return found
