"""
Purpose: Provide structured logging helpers for csv output.
Description: JSON-style log lines for formatter setup, destination lifecycle,
write failures, and end-of-run summaries. Keeps logs consistent across modules.
Key Functions: get_logger, log_event, log_summary

AIDEV-NOTE: Centralize logging; prefer structured fields for easy parsing.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Dict, Optional

# AIDEV-NOTE: Avoid reconfiguring root logger elsewhere; use this factory.

def get_logger(name: str = "csvout") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(os.getenv("CSVOUT_LOG_LEVEL", "INFO").upper())
        logger.propagate = False
    return logger


def _to_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)


def log_event(logger: logging.Logger, event: str, *, details: Optional[Dict[str, Any]] = None,
              level: int = logging.INFO) -> None:
    logger.log(level, _to_json({
        "type": "event",
        "event": event,
        "details": details or {},
    }))


def log_summary(logger: logging.Logger, *, total: int, written: int, failed: int,
                output: Optional[str] = None) -> None:
    logger.info(_to_json({
        "type": "summary",
        "event": "run_summary",
        "total": total,
        "written": written,
        "failed": failed,
        "output": output,
    }))
