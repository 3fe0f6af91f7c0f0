from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rich.filesize import decimal

from tupledump.core.store import Record


@dataclass
class StoreSummary:
    records: int = 0
    key_bytes: int = 0
    value_bytes: int = 0

    def add(self, record: Record) -> None:
        self.records += 1
        self.key_bytes += len(record.key)
        self.value_bytes += len(record.value)

    @property
    def total_bytes(self) -> int:
        return self.key_bytes + self.value_bytes

    @property
    def average_key_size(self) -> int:
        return self.key_bytes // self.records if self.records else 0

    @property
    def average_value_size(self) -> int:
        return self.value_bytes // self.records if self.records else 0

    def lines(self) -> list[str]:
        return [
            f"Records: {self.records:,}",
            f"Size: {decimal(self.total_bytes)} "
            f"({decimal(self.key_bytes)} for keys and {decimal(self.value_bytes)} for values)",
            f"Average key size: {decimal(self.average_key_size)}",
            f"Average value size: {decimal(self.average_value_size)}",
        ]


def summarize_store(records: Iterable[Record]) -> StoreSummary:
    summary = StoreSummary()
    for record in records:
        summary.add(record)
    return summary
