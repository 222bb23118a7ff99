"""
ArrowRowGroup: one decoded row group and row assembly from its columns.

Teaching Points:
- Row groups partition file data horizontally (by rows)
- Each row group holds every column, but only for a contiguous run of rows
- pyarrow decodes the column chunks; we turn columns back into rows
- The row count declared in the footer must match what the pages decode to
"""

import logging

from typing import Any

import pyarrow as pa

from parquet_rows.exceptions import ParquetDecodeError
from parquet_rows.schema import SchemaField, field_names
from parquet_rows.types import Row

logger = logging.getLogger(__name__)


class ArrowRowGroup:
    """
    Rows of a single row group, assembled on demand from a pyarrow Table.

    Teaching Points:
    - Columns are converted to Python values once, on the first assembly
    - Every row assembled from this group shares one field-name tuple
    - The group is dropped by the materializer once its rows are out
    """

    def __init__(self, index: int, num_rows: int, table: pa.Table):
        """
        Initialize row group.

        Args:
            index: Position of the row group in the file (0-based)
            num_rows: Row count declared for this group in the footer
            table: Decoded columns of this group

        Raises:
            ParquetDecodeError: If the pages decoded to a different number of
                rows than the footer declares
        """
        if table.num_rows != num_rows:
            raise ParquetDecodeError(
                f'Row group {index} declares {num_rows} rows '
                f'but its pages decoded to {table.num_rows}',
            )

        self._index = index
        self._num_rows = num_rows
        self._table = table
        self._names: tuple[str, ...] | None = None
        self._columns: list[list[Any]] | None = None

        logger.debug(
            'ArrowRowGroup %d: %d rows, %d columns',
            index,
            num_rows,
            table.num_columns,
        )

    @property
    def index(self) -> int:
        return self._index

    def num_rows(self) -> int:
        """Row count declared in the footer for this group."""
        return self._num_rows

    def columns(self) -> list[str]:
        return list(self._table.column_names)

    def assemble(self, schema: tuple[SchemaField, ...], index: int) -> Row:
        """
        Assemble the row at `index` with values ordered as in `schema`.

        Raises:
            ParquetDecodeError: If the index is outside the group or a schema
                field has no decoded column
        """
        if index < 0 or index >= self._num_rows:
            raise ParquetDecodeError(
                f'Row {index} out of range for row group {self._index} '
                f'with {self._num_rows} rows',
            )

        names, columns = self._column_values(schema)
        return Row(names, tuple(column[index] for column in columns))

    def _column_values(
        self,
        schema: tuple[SchemaField, ...],
    ) -> tuple[tuple[str, ...], list[list[Any]]]:
        names = field_names(schema)
        if self._columns is not None and names == self._names:
            return self._names, self._columns

        available = self._table.column_names
        missing = [name for name in names if name not in available]
        if missing:
            raise ParquetDecodeError(
                f'Row group {self._index} has no data for fields {missing}. '
                f'Decoded columns: {available}',
            )

        try:
            columns = [self._table.column(name).to_pylist() for name in names]
        except (pa.ArrowException, KeyError, ValueError, OverflowError) as e:
            raise ParquetDecodeError(
                f'Cannot convert row group {self._index} to Python values: {e}',
            ) from e

        self._names = names
        self._columns = columns
        return names, columns

    def __repr__(self) -> str:
        return (
            f'ArrowRowGroup('
            f'index={self._index}, '
            f'rows={self._num_rows}, '
            f'columns={self._table.num_columns})'
        )
