from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReaderConfig(BaseModel):
    """Options controlling how a Parquet source is read."""

    model_config = ConfigDict(frozen=True)

    # Top-level fields to read, in output order; None reads every field
    columns: tuple[str, ...] | None = None
    # Lets pyarrow decode the columns of one row group in parallel
    use_threads: bool = True
    # Compressed size limit for a single row group
    max_row_group_bytes: int | None = Field(default=None, gt=0)

    @model_validator(mode='after')
    def _check_columns(self) -> Self:
        if self.columns is None:
            return self
        if not self.columns:
            raise ValueError('columns must name at least one field')
        duplicates = sorted(
            {name for name in self.columns if self.columns.count(name) > 1},
        )
        if duplicates:
            raise ValueError(f'columns contains duplicates: {duplicates}')
        return self
