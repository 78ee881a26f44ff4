"""
Purpose: Project records onto a fixed list of columns and render delimited rows.
Description: RowFormatter resolves each configured field, serializes the value,
and joins the cells according to the FormatConfig quoting policy. It holds no
per-destination state; callers say whether the destination still needs a header.
Key Functions/Classes: RowFormatter, FormattedRow, configure.

AIDEV-NOTE: Keep this module free of I/O so it can be shared across threads.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List, NamedTuple, Optional, Sequence

from .errors import ConfigurationError
from .field_ref import FieldReference, parse_field_reference, resolve
from .schema import FormatConfig, build_format_config
from .serializer import serialize_value


class FormattedRow(NamedTuple):
    header: Optional[str]
    data: str


class RowFormatter:
    def __init__(self, fields: Sequence[FieldReference], config: FormatConfig):
        self.fields = tuple(fields)
        self.config = config
        # Quote-minimal triggers; newlines always force quoting.
        self._specials = (config.col_sep, config.row_sep, config.quote_char, "\n", "\r")

    @property
    def field_names(self) -> List[str]:
        return [f.text for f in self.fields]

    def quote_cell(self, cell: str) -> str:
        q = self.config.quote_char
        if self.config.quoting == "none":
            return cell
        if self.config.quoting == "minimal" and not any(s in cell for s in self._specials):
            return cell
        return q + cell.replace(q, q + q) + q

    def join_cells(self, cells: Iterable[str]) -> str:
        return self.config.col_sep.join(self.quote_cell(c) for c in cells) + self.config.row_sep

    def header_line(self) -> str:
        labels = self.config.header_labels
        if labels is None:
            labels = self.field_names
        return self.join_cells(labels)

    def data_line(self, record: Mapping) -> str:
        safe = self.config.spreadsheet_safe
        return self.join_cells(serialize_value(resolve(record, f), safe) for f in self.fields)

    def format(self, record: Mapping, header_already_written: bool = True) -> FormattedRow:
        header = None
        if not header_already_written and self.config.header_requested:
            header = self.header_line()
        return FormattedRow(header, self.data_line(record))

    def format_record(self, record: Mapping, destination_is_new: bool = False) -> List[bytes]:
        """Return the byte strings to append, header first when one is due."""
        row = self.format(record, header_already_written=not destination_is_new)
        lines = [row.data] if row.header is None else [row.header, row.data]
        return [line.encode(self.config.encoding) for line in lines]


def configure(field_references: Sequence[str], options: Optional[FormatConfig | Mapping[str, Any]] = None) -> RowFormatter:
    """Validate the field list and options and build a RowFormatter.

    Raises ConfigurationError for an empty field list, a malformed reference,
    invalid options, or header labels that do not match the field count.
    """
    if isinstance(field_references, str):
        field_references = [field_references]
    if not field_references:
        raise ConfigurationError("At least one field is required")

    if options is None:
        config = FormatConfig()
    elif isinstance(options, FormatConfig):
        config = options
    else:
        config = build_format_config(**dict(options))

    fields = [parse_field_reference(ref) for ref in field_references]
    if config.header_labels is not None and len(config.header_labels) != len(fields):
        raise ConfigurationError(
            f"Got {len(config.header_labels)} header labels for {len(fields)} fields"
        )

    return RowFormatter(fields, config)
