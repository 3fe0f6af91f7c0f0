from __future__ import annotations

from typing import Any

from tupledump.core import lex
from tupledump.core.format_spec import ConfigError, Schema
from tupledump.core.types import FieldType

TRUE_LITERALS = {"1", "t", "T", "TRUE", "true", "True"}
FALSE_LITERALS = {"0", "f", "F", "FALSE", "false", "False"}


class InvalidPrefixValue(ConfigError):
    def __init__(self, literal: str, field_type: FieldType, reason: str):
        super().__init__(f"Invalid key prefix value {literal!r} for {field_type.token}: {reason}")
        self.literal = literal
        self.field_type = field_type
        self.reason = reason


class PrefixExceedsSchema(ConfigError):
    def __init__(self, supplied: int, available: int):
        super().__init__(
            f"Key prefix has {supplied} values but the key format has only {available} fields"
        )
        self.supplied = supplied
        self.available = available


def parse_literal(literal: str, ftype: FieldType) -> Any:
    """Parse one prefix literal as a value of `ftype`."""
    if ftype.is_sequence:
        raise InvalidPrefixValue(literal, ftype, "sequence fields cannot be used in a prefix")
    if ftype is FieldType.STRING:
        return literal
    if ftype is FieldType.BYTES:
        return literal.encode("utf-8")
    if ftype is FieldType.BOOL:
        if literal in TRUE_LITERALS:
            return True
        if literal in FALSE_LITERALS:
            return False
        raise InvalidPrefixValue(literal, ftype, "expected true or false")
    if not literal.isascii() or "_" in literal:
        raise InvalidPrefixValue(literal, ftype, "not an integer")
    base = 0 if literal.lstrip("+-")[:2].lower() in ("0x", "0o", "0b") else 10
    try:
        value = int(literal, base)
    except ValueError:
        raise InvalidPrefixValue(literal, ftype, "not an integer") from None
    lo, hi = ftype.int_range()
    if not lo <= value <= hi:
        raise InvalidPrefixValue(literal, ftype, f"out of range [{lo}, {hi}]")
    return value


def parse_prefix_values(schema: Schema, literals: str) -> list[Any]:
    if not literals:
        return []
    parts = [p.strip() for p in literals.split(",")]
    if len(parts) > len(schema.fields):
        raise PrefixExceedsSchema(len(parts), len(schema.fields))
    return [parse_literal(text, spec.type) for text, spec in zip(parts, schema.fields)]


def build_prefix(schema: Schema, literals: str) -> bytes:
    """Encode the leading key fields given as comma-separated literals.

    An empty literal string gives an empty prefix, i.e. no restriction.
    Ignored fields still count: visibility only affects printing.
    """
    values = parse_prefix_values(schema, literals)
    if not values:
        return b""
    return lex.encode(values, schema.types[: len(values)])
