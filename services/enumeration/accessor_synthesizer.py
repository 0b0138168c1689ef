from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, List, Optional, Union

from config import settings
from infrastructure.capabilities import CapabilityTable, capability_table
from infrastructure.database.metadata import MetadataProvider
from infrastructure.database.record_accessor import RecordAccessor, SqlAlchemyRecordAccessor
from schemas.enumeration import (
    Default,
    Disabled,
    FailurePolicy,
    Generator,
    HandlerSpec,
    MethodBinding,
    MethodNameConflict,
    qualified_name,
)
from services.enumeration.handler_resolution import (
    bindings_from_handles,
    resolve_handler_spec,
    resolve_handles,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResolvedColumn:
    column: str
    spec: HandlerSpec
    bindings: List[MethodBinding]

    @property
    def rewrites_handles(self) -> bool:
        # Generated names are written back so the metadata shows what was installed.
        return isinstance(self.spec, (Default, Generator))


def build_predicate(binding: MethodBinding, accessor: RecordAccessor) -> Callable[[Any], bool]:
    column, expected = binding.column, binding.value

    def predicate(record: Any) -> bool:
        value = accessor.get_column(record, column)
        return isinstance(value, str) and value == expected

    predicate.__doc__ = f"Return True when column '{column}' holds {expected!r}."
    return predicate


class AccessorSynthesizer:
    """Installs ``is_<value>``-style predicates for enumerated columns.

    ``synthesize`` runs once per batch of column declarations, after the
    columns are readable through the metadata provider. Each enumerated
    column's ``handles`` declaration is resolved into method bindings and
    every binding is installed on the record type through the capability
    table. A name that already exists on the type raises
    ``MethodNameConflict``.

    With ``FailurePolicy.PARTIAL`` the first error stops the batch and
    predicates installed before it stay. ``FailurePolicy.ATOMIC`` resolves
    and validates the whole batch before installing anything.
    """

    def __init__(
        self,
        metadata: MetadataProvider,
        *,
        accessor: Optional[RecordAccessor] = None,
        capabilities: Optional[CapabilityTable] = None,
        policy: Optional[Union[FailurePolicy, str]] = None,
        allow_empty_values: Optional[bool] = None,
        method_prefix: Optional[str] = None,
    ) -> None:
        self.metadata = metadata
        self.accessor = accessor or SqlAlchemyRecordAccessor()
        self.capabilities = capabilities if capabilities is not None else capability_table
        self.policy = FailurePolicy(policy or settings.ENUM_ACCESSOR_FAILURE_POLICY)
        self.allow_empty_values = (
            settings.ENUM_ACCESSOR_ALLOW_EMPTY_VALUES if allow_empty_values is None else allow_empty_values
        )
        self.method_prefix = method_prefix if method_prefix is not None else settings.ENUM_ACCESSOR_METHOD_PREFIX

    def synthesize(self, record_type: type, columns: Iterable[Any]) -> List[MethodBinding]:
        """Install predicates for ``columns`` on ``record_type``.

        Only column names are processed; structured column specs in
        ``columns`` are skipped and a leading ``+`` on a name is ignored.
        Returns the bindings that were installed.
        """
        if self.policy is FailurePolicy.ATOMIC:
            installed = self._synthesize_atomic(record_type, columns)
        else:
            installed = self._synthesize_partial(record_type, columns)

        if installed:
            logger.info(
                "Installed %d enum predicate(s) on %s",
                len(installed),
                record_type.__qualname__,
            )
        return installed

    def _synthesize_partial(self, record_type: type, columns: Iterable[Any]) -> List[MethodBinding]:
        installed: List[MethodBinding] = []
        for column_name in self._column_names(columns):
            resolved = self._resolve_column(record_type, column_name)
            if resolved is None:
                continue
            self._store(record_type, resolved)
            for binding in resolved.bindings:
                self._install(record_type, binding)
                installed.append(binding)
        return installed

    def _synthesize_atomic(self, record_type: type, columns: Iterable[Any]) -> List[MethodBinding]:
        resolved_columns = [
            resolved
            for resolved in (
                self._resolve_column(record_type, column_name)
                for column_name in self._column_names(columns)
            )
            if resolved is not None
        ]
        pending = [binding for resolved in resolved_columns for binding in resolved.bindings]

        with self.capabilities.lock:
            claimed = set()
            for binding in pending:
                if binding.method_name in claimed or self.capabilities.exists(record_type, binding.method_name):
                    self._log_conflict(record_type, binding)
                    raise MethodNameConflict(qualified_name(record_type, binding.method_name))
                claimed.add(binding.method_name)

            for resolved in resolved_columns:
                self._store(record_type, resolved)
            for binding in pending:
                self._install(record_type, binding)
        return pending

    @staticmethod
    def _column_names(columns: Iterable[Any]) -> Iterator[str]:
        for column in columns:
            if not isinstance(column, str):
                continue
            yield column[1:] if column.startswith("+") else column

    def _resolve_column(self, record_type: type, column_name: str) -> Optional[ResolvedColumn]:
        info = self.metadata.column_info(record_type, column_name)
        if not info.is_enum:
            return None

        spec = resolve_handler_spec(info.extra.handles, column=column_name)
        if isinstance(spec, Disabled):
            logger.debug("Enum predicates disabled for %s.%s", record_type.__qualname__, column_name)
            return None

        handles = resolve_handles(
            spec,
            column=column_name,
            domain=info.domain,
            record_type=record_type,
            prefix=self.method_prefix,
        )
        bindings = bindings_from_handles(
            handles,
            column=column_name,
            allow_empty_values=self.allow_empty_values,
        )
        return ResolvedColumn(column=column_name, spec=spec, bindings=bindings)

    def _store(self, record_type: type, resolved: ResolvedColumn) -> None:
        if resolved.rewrites_handles:
            self.metadata.store_handles(
                record_type,
                resolved.column,
                {binding.method_name: binding.value for binding in resolved.bindings},
            )

    def _install(self, record_type: type, binding: MethodBinding) -> None:
        predicate = build_predicate(binding, self.accessor)
        try:
            self.capabilities.install(record_type, binding.method_name, predicate, binding=binding)
        except MethodNameConflict:
            self._log_conflict(record_type, binding)
            raise

    @staticmethod
    def _log_conflict(record_type: type, binding: MethodBinding) -> None:
        logger.error(
            "Cannot add %s to %s for column %s: name is already defined",
            binding.method_name,
            record_type.__qualname__,
            binding.column,
        )
