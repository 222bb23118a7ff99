import json

from collections.abc import Iterable
from typing import Any

import cattrs

from parquet_rows.schema import SchemaField
from parquet_rows.types import Row

MAX_CELL_WIDTH = 40


def _header(title: str) -> str:
    return f'{title}\n{"=" * 60}'


def _format_schema_field(field: SchemaField, index: int) -> str:
    return f'  {index:2}: {field}'


def format_schema(schema: tuple[SchemaField, ...]) -> str:
    lines = [_header('Schema Structure')]

    for i, field in enumerate(schema):
        lines.append(_format_schema_field(field, i))

    return '\n'.join(lines)


def format_summary(
    location: str,
    num_rows: int,
    num_row_groups: int,
    schema: tuple[SchemaField, ...],
) -> str:
    lines = [
        _header('Parquet File Summary'),
        f'Source: {location}',
        f'Total rows: {num_rows:,}',
        f'Row groups: {num_row_groups}',
        f'Fields: {len(schema)}',
    ]

    if schema:
        lines.extend(['\nSchema Structure:', '-' * 40])
        for i, field in enumerate(schema):
            lines.append(_format_schema_field(field, i))

    return '\n'.join(lines)


def _cell(value: Any) -> str:
    text = 'null' if value is None else str(value)
    if len(text) > MAX_CELL_WIDTH:
        return text[: MAX_CELL_WIDTH - 3] + '...'
    return text


def format_rows_table(schema: tuple[SchemaField, ...], rows: Iterable[Row]) -> str:
    """Render rows as a fixed-width table, one line per row."""
    names = [field.name for field in schema]
    cells = [[_cell(value) for value in row] for row in rows]

    widths = [len(name) for name in names]
    for row_cells in cells:
        for i, cell in enumerate(row_cells):
            widths[i] = max(widths[i], len(cell))

    def _line(values: list[str]) -> str:
        return ' | '.join(v.ljust(w) for v, w in zip(values, widths)).rstrip()

    lines = [_line(names), '-+-'.join('-' * w for w in widths)]
    lines.extend(_line(row_cells) for row_cells in cells)
    lines.append(f'({len(cells)} rows)')
    return '\n'.join(lines)


def format_row_json(row: Row, converter: cattrs.Converter) -> str:
    return json.dumps(converter.unstructure(row))
