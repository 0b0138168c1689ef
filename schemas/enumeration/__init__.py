from .binding import MethodBinding, qualified_name
from .column_declaration import ColumnDeclaration, ColumnExtra
from .errors import EnumerationError, InvalidHandlerSpec, MethodNameConflict
from .handler_spec import (
    DEFAULT,
    DISABLED,
    OMIT,
    Default,
    Disabled,
    Generator,
    HandlerSpec,
    NameGenerator,
    StaticMap,
    is_omitted,
)
from .types import DataType, FailurePolicy

__all__ = [
    "MethodBinding",
    "qualified_name",
    "ColumnDeclaration",
    "ColumnExtra",
    "EnumerationError",
    "InvalidHandlerSpec",
    "MethodNameConflict",
    "DEFAULT",
    "DISABLED",
    "OMIT",
    "Default",
    "Disabled",
    "Generator",
    "HandlerSpec",
    "NameGenerator",
    "StaticMap",
    "is_omitted",
    "DataType",
    "FailurePolicy",
]
