from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from parquet_rows.exceptions import ParquetClosedError, ParquetDecodeError
from parquet_rows.schema import SchemaField
from parquet_rows.types import Row

ID_VAL_SCHEMA = pa.schema(
    [
        pa.field('id', pa.int64(), nullable=False),
        pa.field('val', pa.string()),
    ],
)

WriteGroups: TypeAlias = Callable[..., Path]


def _id_val_table(start: int, count: int) -> pa.Table:
    ids = list(range(start, start + count))
    return pa.table(
        {'id': ids, 'val': [f'v{i}' for i in ids]},
        schema=ID_VAL_SCHEMA,
    )


@pytest.fixture
def write_groups(tmp_path: Path) -> WriteGroups:
    """Write one row group per table, in order."""

    def _write(tables: list[pa.Table], name: str = 'data.parquet', schema=None):
        path = tmp_path / name
        schema = schema if schema is not None else tables[0].schema
        with pq.ParquetWriter(path, schema) as writer:
            for table in tables:
                writer.write_table(table)
        return path

    return _write


@pytest.fixture
def scenario_file(tmp_path: Path) -> Path:
    path = tmp_path / 'scenario.parquet'
    table = pa.table(
        {'id': [1, 2, 3], 'val': ['a', 'b', 'c']},
        schema=ID_VAL_SCHEMA,
    )
    pq.write_table(table, path)
    return path


@pytest.fixture
def multi_group_file(write_groups: WriteGroups) -> Path:
    """Row groups of 2, 3, 1 and 4 rows with ids 0..9."""
    tables = []
    start = 0
    for count in (2, 3, 1, 4):
        tables.append(_id_val_table(start, count))
        start += count
    return write_groups(tables, name='multi.parquet')


@pytest.fixture
def empty_file(write_groups: WriteGroups) -> Path:
    """A valid file with a schema and zero row groups."""
    return write_groups([], name='empty.parquet', schema=ID_VAL_SCHEMA)


@pytest.fixture
def nested_file(tmp_path: Path) -> Path:
    path = tmp_path / 'nested.parquet'
    table = pa.table(
        {
            'id': pa.array([1, 2], pa.int32()),
            'point': pa.array(
                [{'x': 1.0, 'y': 2.0}, {'x': 3.0, 'y': 4.0}],
                pa.struct([('x', pa.float64()), ('y', pa.float64())]),
            ),
            'tags': pa.array([['a', 'b'], []], pa.list_(pa.string())),
        },
    )
    pq.write_table(table, path)
    return path


@pytest.fixture
def not_parquet_file(tmp_path: Path) -> Path:
    path = tmp_path / 'not.parquet'
    path.write_bytes(b'id,val\n1,a\n2,b\n3,c\n')
    return path


@pytest.fixture
def oversized_footer_file(scenario_file: Path, tmp_path: Path) -> Path:
    """PAR1-framed file whose footer length points past the file start."""
    data = bytearray(scenario_file.read_bytes())
    data[-8:-4] = (len(data) * 2).to_bytes(4, 'little')
    path = tmp_path / 'oversized_footer.parquet'
    path.write_bytes(bytes(data))
    return path


@pytest.fixture
def garbled_footer_file(scenario_file: Path, tmp_path: Path) -> Path:
    """PAR1-framed file whose thrift footer bytes are garbage."""
    data = bytearray(scenario_file.read_bytes())
    footer_length = int.from_bytes(data[-8:-4], 'little')
    start = len(data) - 8 - footer_length
    data[start : len(data) - 8] = b'\xff' * footer_length
    path = tmp_path / 'garbled_footer.parquet'
    path.write_bytes(bytes(data))
    return path


@pytest.fixture
def corrupt_group_file(write_groups: WriteGroups) -> Path:
    """Five row groups of 20 rows; the data pages of group 2 are XOR-garbled."""
    path = write_groups([_id_val_table(start, 20) for start in range(0, 100, 20)])

    row_group = pq.read_metadata(path).row_group(2)
    data = bytearray(path.read_bytes())
    for i in range(row_group.num_columns):
        chunk = row_group.column(i)
        chunk_start = (
            chunk.dictionary_page_offset
            if chunk.has_dictionary_page
            else chunk.data_page_offset
        )
        chunk_end = chunk_start + chunk.total_compressed_size
        start = chunk.data_page_offset
        for offset in range(start, min(start + 40, chunk_end)):
            data[offset] ^= 0xFF
    path.write_bytes(bytes(data))
    return path


class FakeRowGroup:
    def __init__(self, index: int, values: list[tuple], declared: int | None = None):
        self.index = index
        self.values = values
        self.declared = len(values) if declared is None else declared

    def num_rows(self) -> int:
        return self.declared


class FakeSource:
    """
    In-memory ParquetSource.

    `groups` holds, per row group, either a list of value tuples or an
    exception instance raised when that group is requested.
    """

    def __init__(
        self,
        names: tuple[str, ...],
        groups: list,
        schema_error: Exception | None = None,
    ):
        self.schema = tuple(
            SchemaField(name=name, arrow_type='int64') for name in names
        )
        self.groups = groups
        self.schema_error = schema_error
        self.cursor = 0
        self.closed = False
        self.close_calls = 0
        self.groups_requested = 0

    def _ensure_open(self) -> None:
        if self.closed:
            raise ParquetClosedError('fake source is closed')

    def read_schema(self) -> tuple[SchemaField, ...]:
        self._ensure_open()
        if self.schema_error is not None:
            raise self.schema_error
        return self.schema

    def next_row_group(self) -> FakeRowGroup | None:
        self._ensure_open()
        if self.cursor >= len(self.groups):
            return None
        index = self.cursor
        self.cursor += 1
        self.groups_requested += 1
        group = self.groups[index]
        if isinstance(group, Exception):
            raise group
        return group if isinstance(group, FakeRowGroup) else FakeRowGroup(index, group)

    def assemble_row(
        self,
        row_group: FakeRowGroup,
        schema: tuple[SchemaField, ...],
        index: int,
    ) -> Row:
        self._ensure_open()
        if index >= len(row_group.values):
            raise ParquetDecodeError(
                f'row group {row_group.index} truncated at row {index}',
            )
        values = row_group.values[index]
        if len(values) == len(schema):
            names = tuple(field.name for field in schema)
        else:
            names = tuple(f'c{i}' for i in range(len(values)))
        return Row(names, values)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


@pytest.fixture
def fake_source() -> type[FakeSource]:
    return FakeSource


@pytest.fixture
def fake_row_group() -> type[FakeRowGroup]:
    return FakeRowGroup
