"""
Purpose: Typed formatting options for csv output.
Description: Defines the immutable FormatConfig shared by every format call, plus
a builder that reports validation failures as ConfigurationError.
Key Functions/Classes: FormatConfig, build_format_config.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .constants import (
    DEFAULT_COL_SEP,
    DEFAULT_ENCODING,
    DEFAULT_QUOTE_CHAR,
    DEFAULT_QUOTING,
    DEFAULT_ROW_SEP,
)
from .errors import ConfigurationError


class FormatConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    col_sep: str = DEFAULT_COL_SEP
    row_sep: str = DEFAULT_ROW_SEP
    quote_char: str = DEFAULT_QUOTE_CHAR
    quoting: Literal["all", "minimal", "none"] = DEFAULT_QUOTING
    write_headers: bool = False
    header_labels: Optional[Tuple[str, ...]] = Field(default=None, alias="headers")
    spreadsheet_safe: bool = True
    encoding: str = DEFAULT_ENCODING

    @model_validator(mode="before")
    @classmethod
    def _accept_csv_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # Ruby CSV style switch
        force_quotes = data.pop("force_quotes", None)
        if force_quotes:
            data.setdefault("quoting", "all")
        for key in ("headers", "header_labels"):
            labels = data.get(key)
            if isinstance(labels, str):
                data[key] = tuple(labels.split(data.get("col_sep") or DEFAULT_COL_SEP))
            elif isinstance(labels, list):
                data[key] = tuple(labels)
        return data

    @field_validator("col_sep", "row_sep")
    @classmethod
    def _non_empty_separator(cls, value: str) -> str:
        if value == "":
            raise ValueError("separators must not be empty")
        return value

    @field_validator("quote_char")
    @classmethod
    def _single_quote_char(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("quote_char must be exactly one character")
        return value

    @model_validator(mode="after")
    def _check_combination(self) -> "FormatConfig":
        if self.col_sep == self.row_sep:
            raise ValueError("col_sep and row_sep must differ")
        if self.quote_char in self.col_sep or self.quote_char in self.row_sep:
            raise ValueError("quote_char must not appear in col_sep or row_sep")
        return self

    @property
    def header_requested(self) -> bool:
        return self.write_headers or self.header_labels is not None


def build_format_config(**options: Any) -> FormatConfig:
    try:
        return FormatConfig(**options)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid format options: {exc}") from exc
