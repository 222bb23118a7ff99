from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .enums import Repetition, Type


class SchemaField(BaseModel):
    """
    One top-level field of a Parquet file's embedded schema.

    Groups (structs, lists, maps) have no physical type; their values are
    assembled from several leaf columns into nested Python structures.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    arrow_type: str
    physical_type: Type | None = None
    logical_type: str | None = None
    repetition: Repetition = Repetition.OPTIONAL

    def is_group(self) -> bool:
        return self.physical_type is None

    def __str__(self) -> str:
        rep = f' {self.repetition.name}'
        if self.is_group():
            return f'Group({self.name}: {self.arrow_type}{rep})'
        logical = f' [{self.logical_type}]' if self.logical_type else ''
        return f'Column({self.name}: {self.physical_type.name}{rep}{logical})'


def field_names(schema: tuple[SchemaField, ...]) -> tuple[str, ...]:
    return tuple(field.name for field in schema)
