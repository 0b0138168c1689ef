from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from schemas.enumeration.types import DataType


class ColumnExtra(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    labels: list[str] = Field(default_factory=list, alias="list")
    handles: Any = None


class ColumnDeclaration(BaseModel):
    """Declared metadata for one column, as read from a metadata provider."""

    name: str
    data_type: str
    extra: ColumnExtra = Field(default_factory=ColumnExtra)

    @property
    def is_enum(self) -> bool:
        return self.data_type.lower() == DataType.ENUM

    @property
    def domain(self) -> tuple[str, ...]:
        return tuple(self.extra.labels)
