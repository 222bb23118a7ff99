"""
RowGroupMaterializer: turns a column-oriented Parquet source into rows.

Teaching Points:
- The schema is read once; Parquet guarantees it is the same in every row group
- Row groups are consumed strictly in file order, and rows within a group in
  page order, so output order is on-disk order
- The source is closed however the pass ends: exhaustion, error, or the
  caller abandoning a stream
- Collecting everything into a Dataset is opt-in; the pass itself is a stream
"""

from __future__ import annotations

import logging

from collections.abc import Generator, Iterator
from typing import TYPE_CHECKING

from .exceptions import ParquetClosedError, ParquetDecodeError
from .types import Dataset, Row

if TYPE_CHECKING:
    from .protocols import ParquetSource
    from .schema import SchemaField

logger = logging.getLogger(__name__)


class RowGroupMaterializer:
    """
    Drives a single sequential pass over a ParquetSource.

    A materializer moves from "schema not read" to "iterating" to "closed"
    exactly once. It takes over the source it is given: the source is closed
    when the pass ends, and a second pass raises ParquetClosedError.
    """

    def __init__(self, source: ParquetSource):
        self._source = source
        self._schema: tuple[SchemaField, ...] | None = None
        self._started = False
        self._rows_read = 0

    @property
    def rows_read(self) -> int:
        return self._rows_read

    def read_schema(self) -> tuple[SchemaField, ...]:
        """The source's fields; read on first use and reused afterwards."""
        if self._schema is None:
            self._schema = tuple(self._source.read_schema())
        return self._schema

    def _rows(self, schema: tuple[SchemaField, ...]) -> Iterator[Row]:
        width = len(schema)
        while (row_group := self._source.next_row_group()) is not None:
            num_rows = row_group.num_rows()
            logger.debug(
                'Materializing row group %d: %d rows',
                row_group.index,
                num_rows,
            )
            for i in range(num_rows):
                row = self._source.assemble_row(row_group, schema, i)
                if len(row) != width:
                    raise ParquetDecodeError(
                        f'Row {i} of row group {row_group.index} has '
                        f'{len(row)} values for {width} schema fields',
                    )
                self._rows_read += 1
                yield row

    def _start(self) -> None:
        if self._started:
            raise ParquetClosedError(
                'Materializer has already consumed its source',
            )
        self._started = True

    def stream(self) -> RowStream:
        """
        Lazily yield every row in on-disk order.

        Only one row group is held at a time. The source is closed when the
        iterator is exhausted, raises, or is closed by the caller.
        """
        self._start()
        return RowStream(self._stream(), self._source)

    def _stream(self) -> Generator[Row, None, None]:
        try:
            yield from self._rows(self.read_schema())
            logger.debug('Streamed %d rows', self._rows_read)
        finally:
            self._source.close()

    def materialize(self) -> Dataset:
        """
        Read every row group and return all rows together with the schema.

        Raises:
            ParquetSchemaError: If the footer metadata cannot be read
            ParquetDecodeError: If any row group cannot be decoded

        The source is closed before this returns or raises; no partial
        Dataset is ever returned.
        """
        self._start()
        try:
            schema = self.read_schema()
            rows = list(self._rows(schema))
        finally:
            self._source.close()

        logger.debug(
            'Materialized %d rows with %d fields',
            len(rows),
            len(schema),
        )
        return Dataset(rows=rows, schema=schema)


class RowStream(Iterator[Row]):
    """
    Iterator over a materializer's rows that owns the source's lifetime.

    The source is closed on exhaustion, on error, on close(), and when the
    stream is garbage collected, including before the first next().
    """

    def __init__(self, rows: Generator[Row, None, None], source: ParquetSource):
        self._rows = rows
        self._source = source

    def __next__(self) -> Row:
        return next(self._rows)

    def close(self) -> None:
        self._rows.close()
        self._source.close()

    def __enter__(self) -> RowStream:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        self.close()


def materialize(source: ParquetSource) -> Dataset:
    """Materialize every row of `source`, closing it before returning."""
    return RowGroupMaterializer(source).materialize()


def iter_rows(source: ParquetSource) -> RowStream:
    """Stream the rows of `source` one row group at a time."""
    return RowGroupMaterializer(source).stream()
