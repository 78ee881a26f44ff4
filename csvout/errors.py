"""
Purpose: Exception hierarchy for csvout.
Description: Configuration problems fail fast at construction; serialization problems surface per record.
Key Classes: CsvOutputError, ConfigurationError, FieldReferenceError, SerializationError.
"""

from __future__ import annotations


class CsvOutputError(Exception):
    """Base class for all csvout errors."""


class ConfigurationError(CsvOutputError, ValueError):
    """Invalid field list, field reference, or formatting option."""


class FieldReferenceError(ConfigurationError):
    def __init__(self, reference: str, reason: str):
        super().__init__(f"Invalid field reference {reference!r}: {reason}")
        self.reference = reference
        self.reason = reason


class SerializationError(CsvOutputError):
    """A resolved value cannot be rendered as a cell."""
