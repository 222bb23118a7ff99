from .config import ReaderConfig
from .enums import Repetition, Type
from .exceptions import (
    ParquetClosedError,
    ParquetDecodeError,
    ParquetNetworkError,
    ParquetOpenError,
    ParquetRowGroupTooLargeError,
    ParquetRowsError,
    ParquetSchemaError,
    ParquetUrlError,
)
from .materializer import RowGroupMaterializer, RowStream, iter_rows, materialize
from .parquet_file import ParquetFile
from .readers import ArrowParquetSource, ArrowRowGroup, open_source
from .schema import SchemaField
from .types import Dataset, Row

__all__ = [
    'ArrowParquetSource',
    'ArrowRowGroup',
    'Dataset',
    'ParquetClosedError',
    'ParquetDecodeError',
    'ParquetFile',
    'ParquetNetworkError',
    'ParquetOpenError',
    'ParquetRowGroupTooLargeError',
    'ParquetRowsError',
    'ParquetSchemaError',
    'ParquetUrlError',
    'ReaderConfig',
    'Repetition',
    'Row',
    'RowGroupMaterializer',
    'RowStream',
    'SchemaField',
    'Type',
    'iter_rows',
    'materialize',
    'open_source',
]
