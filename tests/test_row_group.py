import pyarrow as pa
import pytest

from pydantic import ValidationError

from parquet_rows import (
    ArrowRowGroup,
    Dataset,
    ParquetDecodeError,
    ReaderConfig,
    Row,
    SchemaField,
)

SCHEMA = (
    SchemaField(name='id', arrow_type='int64'),
    SchemaField(name='val', arrow_type='string'),
)


@pytest.fixture
def table() -> pa.Table:
    return pa.table({'id': [1, 2], 'val': ['a', 'b']})


def test_assemble_rows_share_field_names(table: pa.Table) -> None:
    group = ArrowRowGroup(0, 2, table)

    first = group.assemble(SCHEMA, 0)
    second = group.assemble(SCHEMA, 1)

    assert first == (1, 'a')
    assert second == (2, 'b')
    assert first.fields is second.fields
    assert group.columns() == ['id', 'val']


@pytest.mark.parametrize(
    ('declared', 'decoded'),
    [
        (3, 2),
        (2, 3),
        (0, 1),
    ],
)
def test_declared_rows_disagree_with_decoded(declared: int, decoded: int) -> None:
    table = pa.table(
        {'id': list(range(decoded)), 'val': ['x'] * decoded},
    )

    with pytest.raises(
        ParquetDecodeError,
        match=f'declares {declared} rows but its pages decoded to {decoded}',
    ):
        ArrowRowGroup(4, declared, table)


def test_duplicate_column_names() -> None:
    table = pa.Table.from_arrays(
        [pa.array([1]), pa.array([2])],
        names=['id', 'id'],
    )
    group = ArrowRowGroup(0, 1, table)
    schema = (SchemaField(name='id', arrow_type='int64'),)

    with pytest.raises(ParquetDecodeError, match='row group 0'):
        group.assemble(schema, 0)


@pytest.mark.parametrize('index', [-1, 2, 10])
def test_index_out_of_range(table: pa.Table, index: int) -> None:
    group = ArrowRowGroup(0, 2, table)

    with pytest.raises(ParquetDecodeError, match='out of range'):
        group.assemble(SCHEMA, index)


def test_schema_data_mismatch(table: pa.Table) -> None:
    group = ArrowRowGroup(0, 2, table)
    schema = (*SCHEMA, SchemaField(name='extra', arrow_type='int64'))

    with pytest.raises(ParquetDecodeError, match='extra'):
        group.assemble(schema, 0)


def test_row_access() -> None:
    row = Row(('id', 'val'), (7, None))

    assert row[0] == 7
    assert row['val'] is None
    assert row.get('missing', 'x') == 'x'
    assert list(row) == [7, None]
    assert 7 in row
    assert row == Row(('id', 'val'), (7, None))
    assert row != Row(('key', 'val'), (7, None))
    assert repr(row) == 'Row(id=7, val=None)'
    with pytest.raises(KeyError):
        row['missing']


def test_row_width_must_match_names() -> None:
    with pytest.raises(ValueError, match='2 values for 1 fields'):
        Row(('id',), (1, 2))


def test_dataset_column_unknown() -> None:
    dataset = Dataset(rows=[Row(('id', 'val'), (1, 'a'))], schema=SCHEMA)

    assert len(dataset) == 1
    assert dataset.column('val') == ['a']
    with pytest.raises(KeyError, match='nope'):
        dataset.column('nope')


@pytest.mark.parametrize(
    'kwargs',
    [
        {'columns': ()},
        {'columns': ('a', 'b', 'a')},
        {'max_row_group_bytes': 0},
    ],
)
def test_reader_config_validation(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        ReaderConfig(**kwargs)


def test_reader_config_frozen() -> None:
    config = ReaderConfig(columns=['a', 'b'])

    assert config.columns == ('a', 'b')
    with pytest.raises(ValidationError):
        config.use_threads = False
