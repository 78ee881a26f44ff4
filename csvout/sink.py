"""
Purpose: Append formatted rows to a destination file.
Description: DestinationWriter owns the file handle and header bookkeeping and
delegates row rendering to a RowFormatter it holds. HeaderTracker records, per
destination path, whether a header has been written.
Key Functions/Classes: DestinationWriter, HeaderTracker, destination_is_empty_or_new.

AIDEV-NOTE: One writer per destination; the lock keeps header and data lines together.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO, Dict, Optional

from .formatter import RowFormatter
from .output_logging import get_logger, log_event


def destination_is_empty_or_new(path: str | Path) -> bool:
    p = Path(path)
    return not p.exists() or p.stat().st_size == 0


class HeaderTracker:
    """Thread-safe map of destination path -> header already written.

    Writers sharing a tracker hold `lock_for(path)` around a whole header and
    data write, so the header check and mark happen once per destination.
    """

    def __init__(self) -> None:
        self._written: Dict[Path, bool] = {}
        self._path_locks: Dict[Path, threading.Lock] = {}
        self._lock = threading.Lock()

    def lock_for(self, path: Path) -> threading.Lock:
        with self._lock:
            return self._path_locks.setdefault(path, threading.Lock())

    def is_written(self, path: Path) -> Optional[bool]:
        with self._lock:
            return self._written.get(path)

    def mark(self, path: Path, written: bool = True) -> None:
        with self._lock:
            self._written[path] = written


class DestinationWriter:
    def __init__(
        self,
        path: str | Path,
        formatter: RowFormatter,
        header_tracker: Optional[HeaderTracker] = None,
        check_every_write: bool = False,
    ) -> None:
        self.path = Path(path)
        self.formatter = formatter
        self.header_tracker = header_tracker or HeaderTracker()
        self.check_every_write = check_every_write
        self.rows_written = 0
        self._fh: Optional[BinaryIO] = None
        self._lock = threading.Lock()
        self._logger = get_logger()

    def __enter__(self) -> "DestinationWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def destination_is_empty_or_new(self) -> bool:
        return destination_is_empty_or_new(self.path)

    def _header_pending(self) -> bool:
        if self.check_every_write:
            return self.destination_is_empty_or_new()
        written = self.header_tracker.is_written(self.path)
        if written is None:
            written = not self.destination_is_empty_or_new()
            self.header_tracker.mark(self.path, written)
        return not written

    def _open(self) -> BinaryIO:
        if self._fh is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("ab")
            log_event(self._logger, "destination_opened", details={"path": str(self.path)})
        return self._fh

    def write(self, data: bytes) -> None:
        fh = self._open()
        try:
            fh.write(data)
        except OSError as exc:
            log_event(self._logger, "write_failed", details={"path": str(self.path), "error": str(exc)})
            raise

    def flush(self) -> None:
        if self._fh is not None:
            self._fh.flush()

    def receive(self, record: Mapping) -> None:
        """Format one record and append it, writing the header first if due."""
        with self.header_tracker.lock_for(self.path), self._lock:
            pending = self._header_pending()
            lines = self.formatter.format_record(record, destination_is_new=pending)
            if len(lines) > 1:
                self.write(lines[0])
                self.flush()
                self.header_tracker.mark(self.path)
                log_event(self._logger, "header_written", details={"path": str(self.path)})
            self.write(lines[-1])
            self.flush()
            self.header_tracker.mark(self.path)
            self.rows_written += 1

    def close(self) -> None:
        with self._lock:
            if self._fh is None:
                return
            self._fh.close()
            self._fh = None
            log_event(self._logger, "destination_closed", details={
                "path": str(self.path),
                "rows_written": self.rows_written,
            })
