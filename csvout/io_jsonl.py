"""
Purpose: JSONL read helpers for csv output.
Description: Streams event records from a JSONL file, keeping key insertion order.
Key Functions/Classes: `iter_records_from_jsonl`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable


def iter_records_from_jsonl(path: str | Path) -> Iterable[Dict[str, Any]]:
    """Read event records from a JSONL file, skipping blank lines."""
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            obj = json.loads(line)
            if not isinstance(obj, dict):
                raise ValueError(f"{path}:{lineno}: expected a JSON object, got {type(obj).__name__}")
            yield obj
