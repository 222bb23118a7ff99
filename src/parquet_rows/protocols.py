"""
Capability interfaces between the materializer and a Parquet decoder.

Teaching Points:
- The materializer only orchestrates: it never touches pages or encodings
- Anything that can report a schema, hand out row groups in order, and
  assemble a row by index can be materialized
- The pyarrow binding in parquet_rows.readers is one implementation; tests
  use small in-memory ones to inject failures
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .schema import SchemaField
    from .types import Row


class ReadableSeekable(Protocol):
    def read(self, size: int = -1, /) -> bytes: ...

    def seek(self, offset: int, whence: int = 0, /) -> int: ...

    def tell(self) -> int: ...

    def close(self) -> None: ...


class RowGroupPages(Protocol):
    """Decoded pages for a contiguous run of rows."""

    @property
    def index(self) -> int: ...

    def num_rows(self) -> int: ...


class ParquetSource(Protocol):
    """
    A Parquet file opened for one sequential pass.

    next_row_group returns None once every row group has been handed out.
    close must be idempotent and must not raise.
    """

    def read_schema(self) -> Sequence[SchemaField]: ...

    def next_row_group(self) -> RowGroupPages | None: ...

    def assemble_row(
        self,
        row_group: RowGroupPages,
        schema: tuple[SchemaField, ...],
        index: int,
    ) -> Row: ...

    def close(self) -> None: ...
