from __future__ import annotations

import json

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, overload

from .schema import SchemaField, field_names


class Row(Sequence[Any]):
    """
    One materialized record.

    Values are stored positionally in schema order. The field names are a
    tuple shared by every row assembled against the same schema, so a row
    costs one tuple of values plus two references.
    """

    __slots__ = ('_names', '_values')

    def __init__(self, names: tuple[str, ...], values: tuple[Any, ...]):
        if len(names) != len(values):
            raise ValueError(
                f'Row has {len(values)} values for {len(names)} fields',
            )
        self._names = names
        self._values = values

    @property
    def fields(self) -> tuple[str, ...]:
        return self._names

    @property
    def values(self) -> tuple[Any, ...]:
        return self._values

    @overload
    def __getitem__(self, key: int | str) -> Any: ...

    @overload
    def __getitem__(self, key: slice) -> tuple[Any, ...]: ...

    def __getitem__(self, key):
        if isinstance(key, str):
            try:
                return self._values[self._names.index(key)]
            except ValueError:
                raise KeyError(key) from None
        return self._values[key]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def as_dict(self) -> dict[str, Any]:
        return dict(zip(self._names, self._values, strict=True))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Row):
            return self._names == other._names and self._values == other._values
        if isinstance(other, tuple):
            return self._values == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        items = ', '.join(
            f'{name}={value!r}' for name, value in zip(self._names, self._values)
        )
        return f'Row({items})'


@dataclass(frozen=True)
class Dataset:
    """
    A fully materialized Parquet file: rows in on-disk order plus the schema.

    Every row holds exactly one value per schema field, in schema order.
    """

    rows: list[Row]
    schema: tuple[SchemaField, ...]

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def field_names(self) -> tuple[str, ...]:
        return field_names(self.schema)

    def __len__(self) -> int:
        return len(self.rows)

    def column(self, name: str) -> list[Any]:
        """All values of one field, in row order."""
        try:
            position = self.field_names.index(name)
        except ValueError:
            raise KeyError(
                f'Field "{name}" not found. Available fields: {self.field_names}',
            ) from None
        return [row[position] for row in self.rows]

    def to_dict(self) -> dict[str, Any]:
        from .serialization import create_converter

        return create_converter().unstructure(self)

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    def __repr__(self) -> str:
        return f'Dataset(rows={self.num_rows}, fields={list(self.field_names)})'
