"""
Purpose: Turn resolved record values into cell text.
Description: Composite values become compact JSON in insertion order; strings get
spreadsheet formula escaping when enabled; other scalars use their canonical text.
Key Functions: serialize_value, escape_formula, dump_json.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .constants import FORMULA_ESCAPE, FORMULA_TRIGGERS
from .errors import SerializationError
from .field_ref import ABSENT


def _plain(value: Any) -> Any:
    """Copy nested mappings/sequences into dicts/lists, rejecting non-string keys."""
    if isinstance(value, Mapping):
        out = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise SerializationError(f"Mapping keys must be strings, got {type(key).__name__}")
            out[key] = _plain(item)
        return out
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def dump_json(value: Any) -> str:
    try:
        return json.dumps(_plain(value), ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot encode value as JSON: {exc}") from exc


def escape_formula(text: str) -> str:
    if text.startswith(FORMULA_TRIGGERS):
        return FORMULA_ESCAPE + text
    return text


def serialize_value(value: Any, spreadsheet_safe: bool = True) -> str:
    # AIDEV-NOTE: None and ABSENT both render empty; see DESIGN.md open question.
    if value is ABSENT or value is None:
        return ""
    if isinstance(value, str):
        return escape_formula(value) if spreadsheet_safe else value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (Mapping, list, tuple)):
        return dump_json(value)
    raise SerializationError(f"Unsupported value type: {type(value).__name__}")
