from enum import IntEnum


class Type(IntEnum):
    """Parquet physical types."""

    BOOLEAN = 0
    INT32 = 1
    INT64 = 2
    INT96 = 3
    FLOAT = 4
    DOUBLE = 5
    BYTE_ARRAY = 6
    FIXED_LEN_BYTE_ARRAY = 7


class Repetition(IntEnum):
    """Parquet schema repetition types."""

    REQUIRED = 0
    OPTIONAL = 1
    REPEATED = 2

    @classmethod
    def from_levels(
        cls,
        max_definition_level: int,
        max_repetition_level: int,
    ) -> 'Repetition':
        """Repetition of a top-level leaf column, derived from its max levels."""
        if max_repetition_level > 0:
            return cls.REPEATED
        if max_definition_level > 0:
            return cls.OPTIONAL
        return cls.REQUIRED
