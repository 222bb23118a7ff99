"""
ParquetFile: Main entry point for reading Parquet files as rows.

Teaching Points:
- ParquetFile names a file (path or URL) rather than holding it open
- Each pass opens its own source, so row streams can be restarted
- rows() streams one row group at a time; read() materializes everything
- Metadata helpers open the file, read the footer, and close it again
"""

import logging

from collections.abc import Iterator
from contextlib import closing
from functools import cached_property
from pathlib import Path

from .config import ReaderConfig
from .materializer import RowGroupMaterializer
from .readers.source import ArrowParquetSource, open_source
from .schema import SchemaField
from .types import Dataset, Row

logger = logging.getLogger(__name__)


class ParquetFile:
    """
    A Parquet file that can be read as rows any number of times.

    Teaching Points:
    - No file handle outlives a single call or stream
    - The schema is fixed for the whole file, so it is read once and cached
    - Failures surface as ParquetRowsError subclasses with the handle closed
    """

    def __init__(self, location: str | Path, config: ReaderConfig | None = None):
        """
        Initialize Parquet file.

        Args:
            location: Local path or HTTP(S) URL of the Parquet file
            config: Read options applied to every pass
        """
        self.location = location
        self.config = config or ReaderConfig()

    def open(self) -> ArrowParquetSource:
        """Open a fresh source positioned before the first row group."""
        logger.debug('Opening %s', self.location)
        return open_source(self.location, self.config)

    @cached_property
    def schema(self) -> tuple[SchemaField, ...]:
        with self.open() as source:
            return source.read_schema()

    def rows(self) -> Iterator[Row]:
        """
        Stream every row in on-disk order.

        Each call opens the file again, on the first next(). Calling close()
        on an abandoned iterator releases the file.
        """
        with closing(RowGroupMaterializer(self.open()).stream()) as rows:
            yield from rows

    def __iter__(self) -> Iterator[Row]:
        return self.rows()

    def read(self) -> Dataset:
        """Materialize the whole file into memory."""
        return RowGroupMaterializer(self.open()).materialize()

    def num_rows(self) -> int:
        """Total rows across all row groups, from the footer."""
        with self.open() as source:
            return source.num_rows()

    def num_row_groups(self) -> int:
        with self.open() as source:
            return source.num_row_groups()

    def schema_string(self) -> str:
        return '\n'.join(str(field) for field in self.schema)

    def __repr__(self) -> str:
        return f'ParquetFile({str(self.location)!r})'
