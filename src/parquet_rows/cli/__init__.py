import logging
import sys

from contextlib import closing
from dataclasses import dataclass
from itertools import islice
from pathlib import Path

import click

from click_option_group import (
    RequiredMutuallyExclusiveOptionGroup,
    optgroup,
)
from pydantic import ValidationError

from parquet_rows._version import get_version
from parquet_rows.config import ReaderConfig
from parquet_rows.exceptions import ParquetRowsError
from parquet_rows.parquet_file import ParquetFile
from parquet_rows.serialization import create_converter

from .formatters import (
    format_row_json,
    format_rows_table,
    format_schema,
    format_summary,
)


@dataclass
class ReadContext:
    parquet_file: ParquetFile


def _fail(error: Exception) -> None:
    click.echo(f'Error: {error}', err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=get_version())
@click.option(
    '-v',
    '--verbose',
    count=True,
    help='Log progress to stderr (repeat for debug output)',
)
def cli(verbose: int):
    """parquet-rows - read Parquet files as rows"""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format='%(levelname)s %(name)s: %(message)s',
            stream=sys.stderr,
        )


@cli.command()
def version():
    """Show the installed version."""
    click.echo(get_version())


@cli.group()
@optgroup.group(
    'Parquet source file',
    cls=RequiredMutuallyExclusiveOptionGroup,
    help='A parquet file local path or remote HTTP(S) url',
)
@optgroup.option(
    '-f',
    '--file',
    'file_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to Parquet file',
)
@optgroup.option('-u', '--url', help='HTTP(S) URL to Parquet file')
@click.option(
    '-c',
    '--column',
    'columns',
    multiple=True,
    help='Field to read (repeatable, keeps the given order)',
)
@click.option(
    '--threads/--no-threads',
    default=True,
    help='Decode the columns of a row group in parallel',
)
@click.pass_context
def read(
    ctx,
    file_path: Path | None,
    url: str | None,
    columns: tuple[str, ...],
    threads: bool,
):
    """Read rows and schema from a Parquet file."""
    location = file_path if file_path else url
    if location is None:
        raise click.UsageError("Didn't get a file or a url")

    try:
        config = ReaderConfig(columns=columns or None, use_threads=threads)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint='--column') from None

    ctx.obj = ReadContext(parquet_file=ParquetFile(location, config))


@read.command()
@click.pass_obj
def summary(ctx: ReadContext):
    """Show row counts and the schema."""
    pf = ctx.parquet_file
    try:
        text = format_summary(
            str(pf.location),
            pf.num_rows(),
            pf.num_row_groups(),
            pf.schema,
        )
    except ParquetRowsError as e:
        _fail(e)
    click.echo(text)


@read.command()
@click.pass_obj
def schema(ctx: ReadContext):
    """Show the top-level fields rows are assembled from."""
    try:
        fields = ctx.parquet_file.schema
    except ParquetRowsError as e:
        _fail(e)
    click.echo(format_schema(fields))


@read.command()
@click.option(
    '--limit',
    '-n',
    type=click.IntRange(min=0),
    help='Stop after this many rows',
)
@click.option(
    '--format',
    'output_format',
    type=click.Choice(['table', 'json']),
    default='table',
    show_default=True,
    help='table for people, json for one object per line',
)
@click.pass_obj
def rows(ctx: ReadContext, limit: int | None, output_format: str):
    """Print rows in file order."""
    pf = ctx.parquet_file
    try:
        fields = pf.schema
        with closing(pf.rows()) as stream:
            selected = islice(stream, limit)
            if output_format == 'json':
                converter = create_converter()
                for row in selected:
                    click.echo(format_row_json(row, converter))
            else:
                click.echo(format_rows_table(fields, selected))
    except ParquetRowsError as e:
        _fail(e)


if __name__ == '__main__':
    cli()
