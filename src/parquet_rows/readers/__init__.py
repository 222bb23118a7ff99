from .row_group import ArrowRowGroup
from .source import ArrowParquetSource, open_source

__all__ = [
    'ArrowParquetSource',
    'ArrowRowGroup',
    'open_source',
]
