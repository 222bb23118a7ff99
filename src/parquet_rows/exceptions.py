class ParquetRowsError(Exception):
    """Base class for all errors raised while materializing Parquet rows."""


class ParquetOpenError(ParquetRowsError):
    """The file is missing, unreadable, or not a Parquet container."""


class ParquetUrlError(ParquetOpenError):
    """A remote location is not a usable HTTP(S) URL or byte range."""


class ParquetNetworkError(ParquetOpenError):
    """A remote file could not be reached or does not support range requests."""


class ParquetSchemaError(ParquetRowsError):
    """The footer metadata is missing or malformed."""


class ParquetDecodeError(ParquetRowsError):
    """Row group data cannot be decoded into records matching the schema."""


class ParquetRowGroupTooLargeError(ParquetDecodeError):
    """A row group exceeds the configured size limit."""


class ParquetClosedError(ParquetRowsError):
    """A read was attempted on a closed source."""
