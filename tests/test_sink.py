"""
Purpose: Tests for the destination writer.
Description: Ensures rows are appended in order and headers are written once per destination.
Key Tests: test_header_written_once, test_existing_file_gets_no_header, test_concurrent_writes_keep_lines.
"""

from __future__ import annotations

import csv
import threading
from pathlib import Path

import pytest

from csvout.formatter import configure
from csvout.sink import DestinationWriter, HeaderTracker, destination_is_empty_or_new


def _read_rows(path: Path):
    with path.open(newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def test_writes_single_line(tmp_path):
    p = tmp_path / "out.csv"
    with DestinationWriter(p, configure(["foo"])) as writer:
        writer.receive({"foo": "bar"})
    assert p.read_text(encoding="utf-8") == "bar\n"


def test_multiple_records_append(tmp_path):
    p = tmp_path / "out.csv"
    with DestinationWriter(p, configure(["foo", "baz"])) as writer:
        writer.receive({"foo": "bar", "baz": "quux"})
        writer.receive({"foo": "bar", "baz": "quux"})
    assert p.read_text(encoding="utf-8").splitlines() == ["bar,quux", "bar,quux"]


def test_custom_row_sep_stays_on_one_line(tmp_path):
    p = tmp_path / "out.csv"
    formatter = configure(["foo", "bar"], {"col_sep": "|", "row_sep": "\t"})
    with DestinationWriter(p, formatter) as writer:
        for _ in range(2):
            writer.receive({"foo": "one", "bar": "two"})
    assert p.read_text(encoding="utf-8") == "one|two\tone|two\t"


def test_header_written_once(tmp_path):
    p = tmp_path / "nested" / "out.csv"
    formatter = configure(["foo", "not_there", "baz"], {"write_headers": True})
    with DestinationWriter(p, formatter) as writer:
        for _ in range(3):
            writer.receive({"foo": "bar", "baz": "quux"})
    rows = _read_rows(p)
    assert rows[0] == ["foo", "not_there", "baz"]
    assert rows[1:] == [["bar", "", "quux"]] * 3


def test_header_labels_once_across_reopen(tmp_path):
    p = tmp_path / "out.csv"
    formatter = configure(["foo", "baz"], {"headers": ["Foo", "Baz"]})
    with DestinationWriter(p, formatter) as writer:
        writer.receive({"foo": "a", "baz": "b"})
    with DestinationWriter(p, formatter) as writer:
        writer.receive({"foo": "c", "baz": "d"})
    assert _read_rows(p) == [["Foo", "Baz"], ["a", "b"], ["c", "d"]]


def test_existing_file_gets_no_header(tmp_path):
    p = tmp_path / "out.csv"
    p.write_text("earlier\n", encoding="utf-8")
    with DestinationWriter(p, configure(["foo"], {"write_headers": True})) as writer:
        writer.receive({"foo": "bar"})
    assert p.read_text(encoding="utf-8") == "earlier\nbar\n"


def test_empty_file_gets_header(tmp_path):
    p = tmp_path / "out.csv"
    p.touch()
    assert destination_is_empty_or_new(p)
    with DestinationWriter(p, configure(["foo"], {"write_headers": True})) as writer:
        writer.receive({"foo": "bar"})
    assert p.read_text(encoding="utf-8") == "foo\nbar\n"


def test_shared_tracker_writes_header_once(tmp_path):
    p = tmp_path / "out.csv"
    tracker = HeaderTracker()
    formatter = configure(["foo"], {"write_headers": True})
    first = DestinationWriter(p, formatter, header_tracker=tracker)
    second = DestinationWriter(p, formatter, header_tracker=tracker)
    first.receive({"foo": "1"})
    second.receive({"foo": "2"})
    first.close()
    second.close()
    assert p.read_text(encoding="utf-8") == "foo\n1\n2\n"


def test_check_every_write_rewrites_header_after_truncate(tmp_path):
    p = tmp_path / "out.csv"
    formatter = configure(["foo"], {"write_headers": True})
    with DestinationWriter(p, formatter, check_every_write=True) as writer:
        writer.receive({"foo": "1"})
        writer.close()
        p.write_text("", encoding="utf-8")
        writer.receive({"foo": "2"})
    assert p.read_text(encoding="utf-8") == "foo\n2\n"


def test_concurrent_writes_keep_lines(tmp_path):
    p = tmp_path / "out.csv"
    formatter = configure(["n", "text"], {"write_headers": True})
    writer = DestinationWriter(p, formatter)

    def worker(start: int) -> None:
        for i in range(start, start + 50):
            writer.receive({"n": i, "text": "a,b\nc"})

    threads = [threading.Thread(target=worker, args=(k * 50,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    writer.close()

    rows = _read_rows(p)
    assert rows[0] == ["n", "text"]
    assert len(rows) == 201
    assert sorted(int(r[0]) for r in rows[1:]) == list(range(200))
    assert all(r[1] == "a,b\nc" for r in rows[1:])
    assert writer.rows_written == 200


def test_writers_sharing_tracker_write_one_header(tmp_path):
    p = tmp_path / "out.csv"
    tracker = HeaderTracker()
    formatter = configure(["n"], {"write_headers": True})
    writers = [DestinationWriter(p, formatter, header_tracker=tracker) for _ in range(8)]
    barrier = threading.Barrier(len(writers))

    def worker(writer: DestinationWriter, n: int) -> None:
        barrier.wait()
        for i in range(10):
            writer.receive({"n": n * 10 + i})

    threads = [threading.Thread(target=worker, args=(w, k)) for k, w in enumerate(writers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    for w in writers:
        w.close()

    rows = _read_rows(p)
    assert rows[0] == ["n"]
    assert rows.count(["n"]) == 1
    assert sorted(int(r[0]) for r in rows[1:]) == list(range(80))


class _FailingDataWriter(DestinationWriter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_on = b"boom\n"

    def write(self, data: bytes) -> None:
        if data == self.fail_on:
            self.fail_on = None
            raise OSError("disk full")
        super().write(data)


def test_header_not_repeated_after_failed_data_write(tmp_path):
    p = tmp_path / "out.csv"
    with _FailingDataWriter(p, configure(["foo"], {"write_headers": True})) as writer:
        with pytest.raises(OSError):
            writer.receive({"foo": "boom"})
        writer.receive({"foo": "ok"})
    assert p.read_text(encoding="utf-8") == "foo\nok\n"
