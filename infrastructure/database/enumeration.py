"""Declarative integration for enum predicates.

``EnumerationMeta`` runs accessor synthesis for every column of a class's
table once declarative mapping of the class has finished, so a model like::

    class Ticket(Base):
        __tablename__ = "tickets"

        id = Column(Integer, primary_key=True)
        status = Column(Enum("open", "pending", "closed", name="ticket_status"))

gets ``is_open()``, ``is_pending()`` and ``is_closed()``. Method names are
controlled per column through ``info={"extra": {"handles": ...}}``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy import Column, inspect
from sqlalchemy.orm import DeclarativeMeta

from infrastructure.capabilities import capability_table
from infrastructure.database.metadata import SqlAlchemyMetadataProvider
from infrastructure.database.record_accessor import SqlAlchemyRecordAccessor
from schemas.enumeration import MethodBinding
from services.enumeration.accessor_synthesizer import AccessorSynthesizer

logger = logging.getLogger(__name__)

_default_synthesizer: Optional[AccessorSynthesizer] = None


def default_synthesizer() -> AccessorSynthesizer:
    global _default_synthesizer
    if _default_synthesizer is None:
        _default_synthesizer = AccessorSynthesizer(
            SqlAlchemyMetadataProvider(),
            accessor=SqlAlchemyRecordAccessor(),
            capabilities=capability_table,
        )
    return _default_synthesizer


class EnumerationMixin:
    """Class-level helpers available on every model of an enumeration base.

    Set ``__enum_synthesizer__`` on a model to use a synthesizer other than
    the process default (for example one with ``FailurePolicy.ATOMIC``).
    """

    __enum_synthesizer__: Optional[AccessorSynthesizer] = None

    @classmethod
    def _enum_synthesizer(cls) -> AccessorSynthesizer:
        return cls.__enum_synthesizer__ or default_synthesizer()

    @classmethod
    def add_columns(cls, *columns: Any):
        """Map additional columns and install predicates for them.

        ``Column`` objects are added to the table and mapper first. Names
        refer to columns that are already mapped; a leading ``+`` marks an
        existing column and is ignored.
        """
        names = []
        for column in columns:
            if isinstance(column, Column):
                if column.key is None:
                    raise ValueError("Columns passed to add_columns() need a name")
                setattr(cls, column.key, column)
                names.append(column.name)
            else:
                names.append(column)
        cls._enum_synthesizer().synthesize(cls, names)
        return cls

    @classmethod
    def enum_accessors(cls) -> Dict[str, MethodBinding]:
        return capability_table.bindings(cls)


class EnumerationMeta(DeclarativeMeta):
    """Declarative metaclass that installs enum predicates after mapping."""

    def __init__(cls, classname, bases, dict_, **kw):
        super().__init__(classname, bases, dict_, **kw)

        if cls.__dict__.get("__abstract__", False):
            return
        table = cls.__dict__.get("__table__")
        if table is not None:
            names = [column.name for column in table.columns]
        else:
            names = cls._inherited_table_columns()
            if not names:
                return

        logger.debug("Synthesizing enum predicates for %s", classname)
        cls._enum_synthesizer().synthesize(cls, names)

    def _inherited_table_columns(cls):
        # Single-table subclasses append their columns to the parent's table.
        mapper = inspect(cls, raiseerr=False)
        if mapper is None or mapper.inherits is None or mapper.local_table is not mapper.inherits.local_table:
            return []
        inherited = {column.name for column in mapper.inherits.columns}
        return [column.name for column in mapper.columns if column.name not in inherited]
