"""
Purpose: csvout package for writing event records as delimited text.
Description: Resolves nested fields, escapes spreadsheet formulas, and renders quoted rows with optional headers.
Key Functions/Classes: `configure`, `RowFormatter`, `FormatConfig`, `DestinationWriter`.
"""

from .errors import ConfigurationError, CsvOutputError, FieldReferenceError, SerializationError
from .field_ref import ABSENT, FieldReference, parse_field_reference, resolve
from .formatter import FormattedRow, RowFormatter, configure
from .schema import FormatConfig, build_format_config
from .serializer import serialize_value
from .sink import DestinationWriter, HeaderTracker

__all__ = [
    "ABSENT",
    "ConfigurationError",
    "CsvOutputError",
    "DestinationWriter",
    "FieldReference",
    "FieldReferenceError",
    "FormatConfig",
    "FormattedRow",
    "HeaderTracker",
    "RowFormatter",
    "SerializationError",
    "build_format_config",
    "configure",
    "parse_field_reference",
    "resolve",
    "serialize_value",
]
