"""
Purpose: Constants for the csvout package.
Description: Centralizes default separators and escaping characters to avoid magic strings.
Key Constants: DEFAULT_COL_SEP, DEFAULT_ROW_SEP, DEFAULT_QUOTE_CHAR, FORMULA_TRIGGERS.
"""

from typing import Tuple

DEFAULT_COL_SEP: str = ","
DEFAULT_ROW_SEP: str = "\n"
DEFAULT_QUOTE_CHAR: str = '"'
DEFAULT_QUOTING: str = "minimal"
DEFAULT_ENCODING: str = "utf-8"

# AIDEV-NOTE: Leading characters that spreadsheet apps evaluate as a formula.
FORMULA_TRIGGERS: Tuple[str, ...] = ("=", "+", "-", "@")
FORMULA_ESCAPE: str = "'"
