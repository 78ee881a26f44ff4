"""
Purpose: Field reference parsing and resolution against event records.
Description: Parses bare names ("foo") and bracketed paths ("[foo][one]") into
ordered segments, then walks a record one mapping at a time. A miss at any step
yields the ABSENT sentinel rather than raising.
Key Functions/Classes: FieldReference, parse_field_reference, resolve, ABSENT.

AIDEV-NOTE: Parsing is kept separate from resolution so references are validated once at configure time.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Tuple

from .errors import FieldReferenceError


class _Absent:
    """Sentinel for a field reference that did not locate a value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


class FieldReference:
    """A parsed field reference: the original text plus its path segments."""

    __slots__ = ("text", "segments")

    def __init__(self, text: str, segments: Tuple[str, ...]):
        self.text = text
        self.segments = segments

    def __repr__(self) -> str:
        return f"FieldReference({self.text!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldReference):
            return NotImplemented
        return self.segments == other.segments

    def __hash__(self) -> int:
        return hash(self.segments)


def parse_segments(text: str) -> Tuple[str, ...]:
    if not isinstance(text, str):
        raise FieldReferenceError(repr(text), "must be a string")
    if text == "":
        raise FieldReferenceError(text, "empty reference")

    if not text.startswith("["):
        if "[" in text or "]" in text:
            raise FieldReferenceError(text, "unbalanced brackets")
        return (text,)

    segments = []
    pos = 0
    while pos < len(text):
        match = _SEGMENT_RE.match(text, pos)
        if match is None:
            raise FieldReferenceError(text, f"unbalanced brackets at offset {pos}")
        if match.group(1) == "":
            raise FieldReferenceError(text, "empty brackets")
        segments.append(match.group(1))
        pos = match.end()
    return tuple(segments)


def parse_field_reference(text: str) -> FieldReference:
    return FieldReference(text, parse_segments(text))


def resolve(record: Mapping, reference: FieldReference | str) -> Any:
    """Return the value at `reference` in `record`, or ABSENT.

    Traversal stops with ABSENT when a key is missing or when an intermediate
    value is not a mapping. The record is never modified.
    """
    if isinstance(reference, str):
        reference = parse_field_reference(reference)

    current: Any = record
    for segment in reference.segments:
        if not isinstance(current, Mapping) or segment not in current:
            return ABSENT
        current = current[segment]
    return current
