"""
ArrowParquetSource: a ParquetSource backed by pyarrow's Parquet reader.

Teaching Points:
- Parquet stores its metadata at the end of the file: data pages, then the
  thrift-encoded footer, then a 4-byte footer length and the PAR1 magic
- We validate the container framing ourselves so a wrong file type is an open
  failure, and leave footer parsing and page decoding to pyarrow
- Row groups are handed out strictly in file order, one at a time
"""

import logging
import struct

from pathlib import Path
from typing import TypeAlias

import pyarrow as pa
import pyarrow.parquet as pq

from parquet_rows.config import ReaderConfig
from parquet_rows.constants import FOOTER_SIZE, MIN_FILE_SIZE, PARQUET_MAGIC
from parquet_rows.enums import Repetition, Type
from parquet_rows.exceptions import (
    ParquetClosedError,
    ParquetDecodeError,
    ParquetOpenError,
    ParquetRowGroupTooLargeError,
    ParquetRowsError,
    ParquetSchemaError,
)
from parquet_rows.protocols import ReadableSeekable
from parquet_rows.schema import SchemaField
from parquet_rows.types import Row
from parquet_rows.util.http_file import HttpFile

from .row_group import ArrowRowGroup

logger = logging.getLogger(__name__)

Location: TypeAlias = str | Path | ReadableSeekable


def _check_magic(file_obj: ReadableSeekable) -> int:
    """
    Verify the PAR1 magic at both ends of the file.

    Returns:
        The file size in bytes

    Raises:
        ParquetOpenError: If the file is too small or is not framed as Parquet
    """
    file_size = file_obj.seek(0, 2)
    if file_size < MIN_FILE_SIZE:
        raise ParquetOpenError(
            f'File too small to be a valid Parquet file: {file_size} bytes',
        )

    file_obj.seek(0)
    head = file_obj.read(len(PARQUET_MAGIC))
    file_obj.seek(file_size - len(PARQUET_MAGIC))
    tail = file_obj.read(len(PARQUET_MAGIC))
    file_obj.seek(0)

    for where, magic in (('header', head), ('footer', tail)):
        if magic != PARQUET_MAGIC:
            raise ParquetOpenError(
                f'Invalid Parquet magic bytes in {where}: '
                f'expected {PARQUET_MAGIC!r}, got {magic!r}',
            )
    return file_size


def _check_footer_length(file_obj: ReadableSeekable) -> int:
    """Return the footer length, failing if it cannot fit inside the file."""
    file_size = file_obj.seek(0, 2)
    file_obj.seek(file_size - FOOTER_SIZE)
    footer_bytes = file_obj.read(FOOTER_SIZE)
    file_obj.seek(0)

    if len(footer_bytes) != FOOTER_SIZE:
        raise ParquetSchemaError('Could not read complete footer')

    footer_length = struct.unpack('<I', footer_bytes[:4])[0]
    metadata_start = file_size - FOOTER_SIZE - footer_length
    if footer_length == 0 or metadata_start < len(PARQUET_MAGIC):
        raise ParquetSchemaError(
            f'Invalid footer length {footer_length} for a {file_size} byte file',
        )
    return footer_length


def _schema_fields(parquet: pq.ParquetFile) -> tuple[SchemaField, ...]:
    """Describe each top-level field, taking leaf details from the footer."""
    leaves = {}
    for i in range(len(parquet.schema)):
        column = parquet.schema.column(i)
        leaves[column.path] = column

    fields = []
    for arrow_field in parquet.schema_arrow:
        leaf = leaves.get(arrow_field.name)
        if leaf is None:
            fields.append(
                SchemaField(
                    name=arrow_field.name,
                    arrow_type=str(arrow_field.type),
                    repetition=(
                        Repetition.OPTIONAL
                        if arrow_field.nullable
                        else Repetition.REQUIRED
                    ),
                ),
            )
            continue

        logical_type = str(leaf.logical_type)
        fields.append(
            SchemaField(
                name=arrow_field.name,
                arrow_type=str(arrow_field.type),
                physical_type=Type[leaf.physical_type],
                logical_type=None if logical_type == 'None' else logical_type,
                repetition=Repetition.from_levels(
                    leaf.max_definition_level,
                    leaf.max_repetition_level,
                ),
            ),
        )
    return tuple(fields)


def _project(
    fields: tuple[SchemaField, ...],
    columns: tuple[str, ...],
) -> tuple[SchemaField, ...]:
    by_name = {field.name: field for field in fields}
    missing = [name for name in columns if name not in by_name]
    if missing:
        raise ParquetSchemaError(
            f'Columns {missing} not found. Available columns: {list(by_name)}',
        )
    return tuple(by_name[name] for name in columns)


class ArrowParquetSource:
    """
    A Parquet file opened for a single sequential pass through pyarrow.

    Teaching Points:
    - Construction only checks the container framing; the footer is parsed on
      the first read_schema or next_row_group call
    - The source owns the file object it was given and closes it in close()
    - Every read after close raises ParquetClosedError
    """

    def __init__(
        self,
        file_obj: ReadableSeekable,
        config: ReaderConfig | None = None,
        name: str | None = None,
    ):
        """
        Initialize source.

        Args:
            file_obj: Readable, seekable binary file positioned anywhere
            config: Read options; defaults to reading every field
            name: Label used in log and error messages

        Raises:
            ParquetOpenError: If the file is not framed as a Parquet file. The
                file object is closed before the error propagates.
        """
        self._file_obj = file_obj
        self._config = config or ReaderConfig()
        self._name = name or repr(file_obj)
        self._parquet: pq.ParquetFile | None = None
        self._schema: tuple[SchemaField, ...] | None = None
        self._cursor = 0
        self._closed = False

        try:
            file_size = _check_magic(file_obj)
        except ParquetRowsError:
            self.close()
            raise
        except OSError as e:
            self.close()
            raise ParquetOpenError(f'Cannot read {self._name}: {e}') from e

        logger.debug('Opened %s (%d bytes)', self._name, file_size)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def config(self) -> ReaderConfig:
        return self._config

    def _ensure_open(self) -> None:
        if self._closed:
            raise ParquetClosedError(f'Source {self._name} is closed')

    def _parquet_file(self) -> pq.ParquetFile:
        self._ensure_open()
        if self._parquet is None:
            try:
                _check_footer_length(self._file_obj)
                self._parquet = pq.ParquetFile(self._file_obj)
            except ParquetRowsError:
                raise
            except (pa.ArrowException, OSError, ValueError) as e:
                raise ParquetSchemaError(
                    f'Cannot parse footer metadata of {self._name}: {e}',
                ) from e
            logger.debug(
                'Parsed footer of %s: %d row groups, %d rows',
                self._name,
                self._parquet.metadata.num_row_groups,
                self._parquet.metadata.num_rows,
            )
        return self._parquet

    def read_schema(self) -> tuple[SchemaField, ...]:
        """
        Get the top-level fields of the file, in schema order.

        Returns:
            The fields rows are assembled against; with a column projection
            configured, only those fields in the requested order

        Raises:
            ParquetSchemaError: If the footer is corrupt or a projected column
                does not exist
            ParquetClosedError: If the source is closed
        """
        self._ensure_open()
        if self._schema is None:
            parquet = self._parquet_file()
            try:
                fields = _schema_fields(parquet)
            except (pa.ArrowException, KeyError, ValueError) as e:
                raise ParquetSchemaError(
                    f'Cannot interpret schema of {self._name}: {e}',
                ) from e
            if self._config.columns is not None:
                fields = _project(fields, self._config.columns)
            self._schema = fields
            logger.debug(
                'Schema of %s: %s',
                self._name,
                [field.name for field in fields],
            )
        return self._schema

    def next_row_group(self) -> ArrowRowGroup | None:
        """
        Decode the next row group in file order.

        Returns:
            The next row group, or None once all row groups have been read

        Raises:
            ParquetDecodeError: If the row group's pages cannot be decoded
            ParquetRowGroupTooLargeError: If the row group exceeds the
                configured size limit
            ParquetClosedError: If the source is closed
        """
        parquet = self._parquet_file()
        if self._cursor >= parquet.metadata.num_row_groups:
            logger.debug('No more row groups in %s', self._name)
            return None

        index = self._cursor
        self._cursor += 1

        row_group_meta = parquet.metadata.row_group(index)
        limit = self._config.max_row_group_bytes
        if limit is not None and row_group_meta.total_byte_size > limit:
            raise ParquetRowGroupTooLargeError(
                f'Row group {index} of {self._name} is too big: '
                f'{row_group_meta.total_byte_size} bytes (limit {limit})',
            )

        columns = list(self._config.columns) if self._config.columns else None
        try:
            table = parquet.read_row_group(
                index,
                columns=columns,
                use_threads=self._config.use_threads,
            )
        except (pa.ArrowException, OSError, ValueError) as e:
            raise ParquetDecodeError(
                f'Cannot decode row group {index} of {self._name}: {e}',
            ) from e

        return ArrowRowGroup(index, row_group_meta.num_rows, table)

    def assemble_row(
        self,
        row_group: ArrowRowGroup,
        schema: tuple[SchemaField, ...],
        index: int,
    ) -> Row:
        self._ensure_open()
        return row_group.assemble(schema, index)

    def num_rows(self) -> int:
        return self._parquet_file().metadata.num_rows

    def num_row_groups(self) -> int:
        return self._parquet_file().metadata.num_row_groups

    def close(self) -> None:
        """Release the pyarrow reader and the file object; safe to repeat."""
        if self._closed:
            return
        self._closed = True

        if self._parquet is not None:
            try:
                self._parquet.close()
            except (pa.ArrowException, OSError) as e:
                logger.warning('Error closing reader for %s: %s', self._name, e)
            self._parquet = None

        try:
            self._file_obj.close()
        except OSError as e:
            logger.warning('Error closing %s: %s', self._name, e)

        logger.debug('Closed %s', self._name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        state = 'closed' if self._closed else f'next_row_group={self._cursor}'
        return f'ArrowParquetSource({self._name}, {state})'


def open_source(
    location: Location,
    config: ReaderConfig | None = None,
) -> ArrowParquetSource:
    """
    Open a Parquet file for a single sequential pass.

    Args:
        location: Local path, HTTP(S) URL, or a readable seekable binary file
            object (which the returned source takes ownership of)
        config: Read options

    Raises:
        ParquetOpenError: If the file cannot be opened or is not Parquet
    """
    if isinstance(location, str) and location.startswith(('http:', 'https:')):
        return ArrowParquetSource(HttpFile(location), config, name=location)

    if isinstance(location, (str, Path)):
        try:
            file_obj = open(location, 'rb')  # noqa: SIM115
        except OSError as e:
            raise ParquetOpenError(f'Cannot open {location}: {e}') from e
        return ArrowParquetSource(file_obj, config, name=str(location))

    return ArrowParquetSource(location, config)
