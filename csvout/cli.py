"""
Purpose: CLI for writing event records to delimited text files.
Description: Provides `csvout write` to project JSONL records onto CSV columns and
`csvout show-config` to print the resolved formatting options.
Key Functions/Classes: Click entrypoints `csvout`, `write`, `show_config`.
"""

from __future__ import annotations

import json
import sys
from typing import Optional, Tuple

import click

from .config import load_settings
from .errors import ConfigurationError, CsvOutputError
from .formatter import configure
from .io_jsonl import iter_records_from_jsonl
from .output_logging import get_logger, log_event, log_summary
from .sink import DestinationWriter


_ESCAPES = {"\\t": "\t", "\\n": "\n", "\\r": "\r"}


def _unescape(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    for raw, char in _ESCAPES.items():
        value = value.replace(raw, char)
    return value


@click.group()
def csvout() -> None:
    """Delimited-text output for structured event records."""


@csvout.command()
@click.option("--input-jsonl", required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "output", required=False, type=click.Path(dir_okay=False), help="Destination CSV file")
@click.option("--field", "fields", multiple=True, help="Field reference, e.g. foo or [foo][bar]. Repeatable.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML settings file")
@click.option("--col-sep", default=None, help="Column separator (\\t allowed)")
@click.option("--row-sep", default=None, help="Row separator (\\n, \\r\\n allowed)")
@click.option("--quote-char", default=None)
@click.option("--quoting", type=click.Choice(["all", "minimal", "none"]), default=None)
@click.option("--write-headers", is_flag=True, default=False)
@click.option("--headers", default=None, help="Explicit header labels, separated by the column separator")
@click.option("--spreadsheet-safe/--no-spreadsheet-safe", default=None)
def write(
    input_jsonl: str,
    output: Optional[str],
    fields: Tuple[str, ...],
    config_path: Optional[str],
    col_sep: Optional[str],
    row_sep: Optional[str],
    quote_char: Optional[str],
    quoting: Optional[str],
    write_headers: bool,
    headers: Optional[str],
    spreadsheet_safe: Optional[bool],
) -> None:
    """Append one row per JSONL record to the output file."""
    logger = get_logger()
    try:
        settings = load_settings(config_path)
        format_config = settings.format_config(
            col_sep=_unescape(col_sep),
            row_sep=_unescape(row_sep),
            quote_char=quote_char,
            quoting=quoting,
            write_headers=write_headers or None,
            headers=headers,
            spreadsheet_safe=spreadsheet_safe,
        )
        formatter = configure(list(fields) or settings.fields, format_config)
        log_event(logger, "formatter_configured", details={
            "fields": formatter.field_names,
            "quoting": format_config.quoting,
            "spreadsheet_safe": format_config.spreadsheet_safe,
        })
    except ConfigurationError as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(2)

    output = output or settings.path
    if not output:
        click.echo("❌ No output path given (use --output or `path` in the settings file)", err=True)
        sys.exit(2)

    total = 0
    with DestinationWriter(output, formatter, check_every_write=settings.check_every_write) as writer:
        try:
            for record in iter_records_from_jsonl(input_jsonl):
                total += 1
                writer.receive(record)
        except (CsvOutputError, ValueError, OSError) as e:
            failed_at = writer.rows_written + 1
            log_summary(logger, total=failed_at, written=writer.rows_written, failed=1, output=output)
            click.echo(f"❌ Error on record {failed_at}: {e}", err=True)
            sys.exit(1)
        written = writer.rows_written

    log_summary(logger, total=total, written=written, failed=0, output=output)
    click.echo(f"✅ Wrote {written} rows to {output}")


@csvout.command("show-config")
@click.option("--config", "config_path", required=True, type=click.Path(exists=True, dir_okay=False))
def show_config(config_path: str) -> None:
    """Print the resolved formatting options as JSON."""
    try:
        settings = load_settings(config_path)
        format_config = settings.format_config()
    except ConfigurationError as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(2)
    payload = {"path": settings.path, "fields": settings.fields, **format_config.model_dump()}
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def main() -> None:
    csvout()


if __name__ == "__main__":  # pragma: no cover
    main()
