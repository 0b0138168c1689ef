from .enumeration import (
    ColumnDeclaration,
    ColumnExtra,
    DataType,
    FailurePolicy,
    MethodBinding,
)

__all__ = [
    "ColumnDeclaration",
    "ColumnExtra",
    "DataType",
    "FailurePolicy",
    "MethodBinding",
]
