"""Turn decoded keys and values into printable text lines."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tupledump.core import lex
from tupledump.core.format_spec import RawMode, Schema
from tupledump.core.types import FieldType


@dataclass(frozen=True)
class DecodedRecord:
    values: tuple[Any, ...]
    remainder: bytes = b""


def byte_dump(data: bytes) -> str:
    """Render bytes as space-separated decimal octets: ``[1 2 3]``."""
    return "[" + " ".join(str(b) for b in data) + "]"


def _render_int(value: Any) -> str:
    return str(int(value))


def _render_bool(value: Any) -> str:
    return "true" if value else "false"


def _render_string(value: Any) -> str:
    return value


def _render_bytes(value: Any) -> str:
    return byte_dump(bytes(value))


_SCALAR_RENDERERS: dict[str, Callable[[Any], str]] = {
    "int": _render_int,
    "bool": _render_bool,
    "string": _render_string,
    "bytes": _render_bytes,
}


def render_value(value: Any, ftype: FieldType) -> str:
    render = _SCALAR_RENDERERS[ftype.kind]
    if ftype.is_sequence:
        return "[" + " ".join(render(item) for item in value) + "]"
    return render(value)


def render_raw(data: bytes, mode: RawMode) -> str:
    if mode is RawMode.BYTES:
        return byte_dump(data)
    if mode is RawMode.TEXT:
        return data.decode("utf-8", errors="replace")
    return ""


def decode_side(schema: Schema, data: bytes) -> DecodedRecord:
    """Decode `data` with the schema's field types.

    Raises `lex.DecodeError` for truncated or malformed input.
    """
    values, remainder = lex.decode(data, schema.types)
    return DecodedRecord(values=tuple(values), remainder=remainder)


def render_decoded(schema: Schema, decoded: DecodedRecord) -> str:
    tokens = [
        render_value(value, spec.type)
        for spec, value in zip(schema.fields, decoded.values)
        if not spec.ignored
    ]
    if decoded.remainder and schema.raw is not RawMode.NONE:
        tokens.append(render_raw(decoded.remainder, schema.raw))
    return ",".join(tokens)


def render_side(schema: Schema | None, data: bytes) -> str:
    """Render one side of a record according to `schema`.

    A missing or field-less schema prints the whole side raw, or nothing
    when no raw mode was requested.
    """
    if schema is None:
        return ""
    if not schema.decodes:
        return render_raw(data, schema.raw)
    return render_decoded(schema, decode_side(schema, data))


def compose_line(key_text: str, value_text: str) -> str:
    """Join the rendered key and value sides into one output line."""
    return f"{key_text}: {value_text}\n"


def format_record(
    key_schema: Schema | None,
    key: bytes,
    value_schema: Schema | None,
    value: bytes,
) -> str:
    return compose_line(render_side(key_schema, key), render_side(value_schema, value))
