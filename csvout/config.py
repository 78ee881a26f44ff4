"""
Purpose: Centralized configuration helpers for csv output.
Description: Loads environment variables for defaults and reads YAML settings files
into a validated OutputSettings model.
Key Functions/Classes: `OutputSettings`, `load_settings`, `get_default_col_sep`, `get_default_spreadsheet_safe`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import DEFAULT_COL_SEP, DEFAULT_ROW_SEP
from .errors import ConfigurationError
from .schema import FormatConfig, build_format_config


# AIDEV-NOTE: Load env from .env if present to ease local dev.
load_dotenv()


def get_default_col_sep() -> str:
    return os.getenv("CSVOUT_COL_SEP", DEFAULT_COL_SEP)


def get_default_row_sep() -> str:
    return os.getenv("CSVOUT_ROW_SEP", DEFAULT_ROW_SEP)


def get_default_spreadsheet_safe() -> bool:
    value = os.getenv("CSVOUT_SPREADSHEET_SAFE", "true")
    return value.strip().lower() not in {"0", "false", "no", "off"}


class OutputSettings(BaseModel):
    """Settings file contents: destination, fields and csv options."""
    model_config = ConfigDict(extra="forbid")

    path: Optional[str] = None
    fields: List[str] = Field(default_factory=list)
    csv_options: Dict[str, Any] = Field(default_factory=dict)
    write_headers: bool = False
    headers: Optional[Union[str, List[str]]] = None
    spreadsheet_safe: bool = Field(default_factory=get_default_spreadsheet_safe)
    check_every_write: bool = False

    @field_validator("fields", mode="before")
    @classmethod
    def _single_field(cls, value: Any) -> Any:
        # `fields: foo` is shorthand for a one-element list
        if isinstance(value, str):
            return [value]
        return value

    def format_config(self, **overrides: Any) -> FormatConfig:
        options: Dict[str, Any] = {
            "col_sep": get_default_col_sep(),
            "row_sep": get_default_row_sep(),
        }
        options.update(self.csv_options)
        options.update(
            write_headers=self.write_headers,
            spreadsheet_safe=self.spreadsheet_safe,
        )
        if self.headers is not None:
            options["headers"] = self.headers
        options.update({k: v for k, v in overrides.items() if v is not None})
        return build_format_config(**options)


def load_settings(path: Optional[str | Path] = None) -> OutputSettings:
    if path is None:
        return OutputSettings()
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"Settings file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Cannot parse settings file {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {p} must contain a mapping")
    try:
        return OutputSettings(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings in {p}: {exc}") from exc
