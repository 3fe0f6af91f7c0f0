from __future__ import annotations

from tupledump.core.store import Record, SliceStore
from tupledump.core.summary import StoreSummary, summarize_store


def test_summarize_counts_bytes() -> None:
    store = SliceStore([(b"k1", b"value"), (b"k2", b"v"), (b"key3", b"")])
    summary = summarize_store(store)
    assert summary == StoreSummary(records=3, key_bytes=8, value_bytes=6)
    assert summary.total_bytes == 14
    assert summary.average_key_size == 2
    assert summary.average_value_size == 2


def test_summary_lines() -> None:
    summary = StoreSummary()
    for i in range(1500):
        summary.add(Record(b"k" * 10, b"v" * 90))
    lines = summary.lines()
    assert lines[0] == "Records: 1,500"
    assert lines[1] == "Size: 150.0 kB (15.0 kB for keys and 135.0 kB for values)"
    assert lines[2] == "Average key size: 10 bytes"
    assert lines[3] == "Average value size: 90 bytes"


def test_empty_store_summary() -> None:
    summary = summarize_store([])
    assert summary.records == 0
    assert summary.lines()[2] == "Average key size: 0 bytes"
