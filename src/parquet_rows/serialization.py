from __future__ import annotations

import base64
import datetime as dt

from collections.abc import Callable
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import cattrs

from pydantic import BaseModel

if TYPE_CHECKING:
    from .types import Dataset, Row


def _create_row_hook(
    converter: cattrs.Converter,
) -> Callable[[Row], dict[str, Any]]:
    """Create row unstructure hook."""

    def unstructure_row(row: Row) -> dict[str, Any]:
        """Unstructure a Row into a field-name keyed dict of plain values."""
        return {
            name: converter.unstructure(value)
            for name, value in zip(row.fields, row.values, strict=True)
        }

    return unstructure_row


def _create_dataset_hook(
    converter: cattrs.Converter,
) -> Callable[[Dataset], dict[str, Any]]:
    """Create dataset unstructure hook."""

    def unstructure_dataset(dataset: Dataset) -> dict[str, Any]:
        return {
            'schema': [converter.unstructure(field) for field in dataset.schema],
            'num_rows': dataset.num_rows,
            'rows': [converter.unstructure(row) for row in dataset.rows],
        }

    return unstructure_dataset


def _unstructure_bytes(value: bytes) -> str:
    return base64.b64encode(value).decode()


def _unstructure_temporal(value: dt.date | dt.time) -> str:
    return value.isoformat()


def create_converter() -> cattrs.Converter:
    """Create a cattrs converter producing JSON-safe rows and datasets."""
    from .types import Dataset, Row

    converter = cattrs.Converter()

    converter.register_unstructure_hook(Row, _create_row_hook(converter))
    converter.register_unstructure_hook(Dataset, _create_dataset_hook(converter))

    # Schema fields are pydantic models; let pydantic render enums and such
    converter.register_unstructure_hook_func(
        lambda cls: isinstance(cls, type) and issubclass(cls, BaseModel),
        lambda model: model.model_dump(mode='json'),
    )

    # Values pyarrow hands back that json cannot encode as-is
    converter.register_unstructure_hook(bytes, _unstructure_bytes)
    converter.register_unstructure_hook(dt.datetime, _unstructure_temporal)
    converter.register_unstructure_hook(dt.date, _unstructure_temporal)
    converter.register_unstructure_hook(dt.time, _unstructure_temporal)
    converter.register_unstructure_hook(dt.timedelta, lambda v: v.total_seconds())
    converter.register_unstructure_hook(Decimal, str)

    return converter


def row_to_dict(row: Row, converter: cattrs.Converter | None = None) -> dict:
    converter = converter or create_converter()
    return converter.unstructure(row)
