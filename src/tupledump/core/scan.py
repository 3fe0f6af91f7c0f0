from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TextIO

from tupledump.core.format_spec import Schema, describe_schema, parse_format_spec
from tupledump.core.lex import DecodeError
from tupledump.core.prefix import PrefixExceedsSchema, build_prefix
from tupledump.core.render import compose_line, render_side
from tupledump.core.store import Record, Seeker, prefix_scan

logger = logging.getLogger(__name__)


class RecordDecodeError(DecodeError):
    """A stored record does not match the configured format.

    Decode failures stop the whole scan: the store is assumed to come from a
    trusted producer, so a mismatch means the format is wrong.
    """

    def __init__(self, record: Record, side: str, cause: DecodeError):
        super().__init__(f"cannot decode {side} of record with key {record.key.hex()}: {cause}")
        self.record = record
        self.side = side
        self.cause = cause


@dataclass(frozen=True)
class RecordPrinter:
    key_schema: Schema | None = None
    value_schema: Schema | None = None
    key_prefix: bytes = b""

    @classmethod
    def from_formats(
        cls, key_format: str = "", value_format: str = "", key_prefix: str = ""
    ) -> RecordPrinter:
        """Parse all configuration up front; raises `ConfigError` on bad input."""
        key_schema = parse_format_spec(key_format) if key_format else None
        value_schema = parse_format_spec(value_format) if value_format else None
        prefix = b""
        if key_prefix:
            if key_schema is None:
                raise PrefixExceedsSchema(len(key_prefix.split(",")), 0)
            prefix = build_prefix(key_schema, key_prefix)
        if key_schema is not None:
            logger.debug("key format: %s", describe_schema(key_schema))
        if value_schema is not None:
            logger.debug("value format: %s", describe_schema(value_schema))
        if prefix:
            logger.info("scanning keys with prefix %s", prefix.hex())
        return cls(key_schema=key_schema, value_schema=value_schema, key_prefix=prefix)

    def format(self, record: Record) -> str:
        try:
            key_text = render_side(self.key_schema, record.key)
        except DecodeError as e:
            raise RecordDecodeError(record, "key", e) from e
        try:
            value_text = render_side(self.value_schema, record.value)
        except DecodeError as e:
            raise RecordDecodeError(record, "value", e) from e
        return compose_line(key_text, value_text)

    def iter_lines(self, store: Seeker) -> Iterator[str]:
        """Yield one formatted line per matching record, in store order."""
        records = prefix_scan(store, self.key_prefix)
        try:
            for record in records:
                yield self.format(record)
        finally:
            records.close()

    def print_records(self, store: Seeker, sink: TextIO, *, limit: int | None = None) -> int:
        """Write formatted records to `sink`, one `write` per line.

        Returns the number of records printed.
        """
        count = 0
        if limit is not None and limit <= 0:
            return count
        lines = self.iter_lines(store)
        try:
            for line in lines:
                sink.write(line)
                count += 1
                if count == limit:
                    break
        finally:
            lines.close()
        logger.info("printed %d records", count)
        return count
