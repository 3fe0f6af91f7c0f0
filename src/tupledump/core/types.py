"""Field types understood by format specs."""

from __future__ import annotations

from enum import Enum


class UnknownFieldType(LookupError):
    """Raised when a format token does not name a field type."""


INT_BITS = {
    "int8": 8,
    "int16": 16,
    "int32": 32,
    "int64": 64,
    "uint8": 8,
    "uint16": 16,
    "uint32": 32,
    "uint64": 64,
}


class FieldType(Enum):
    BYTES = "[]byte"
    BYTES_LIST = "[][]byte"
    STRING = "string"
    STRING_LIST = "[]string"
    BOOL = "bool"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    INT8_LIST = "[]int8"
    INT16_LIST = "[]int16"
    INT32_LIST = "[]int32"
    INT64_LIST = "[]int64"
    UINT8_LIST = "[]uint8"
    UINT16_LIST = "[]uint16"
    UINT32_LIST = "[]uint32"
    UINT64_LIST = "[]uint64"

    @property
    def token(self) -> str:
        return self.value

    @property
    def is_sequence(self) -> bool:
        # []byte is a scalar byte string, not a sequence of values
        return self is not FieldType.BYTES and self.value.startswith("[]")

    @property
    def element(self) -> FieldType:
        """Scalar type of a sequence's elements (the type itself for scalars)."""
        if not self.is_sequence:
            return self
        return FieldType(self.value[2:])

    @property
    def kind(self) -> str:
        """One of 'bytes', 'string', 'bool' or 'int', describing the element."""
        base = self.element.value
        if base == "[]byte":
            return "bytes"
        if base in INT_BITS:
            return "int"
        return base

    @property
    def bits(self) -> int | None:
        return INT_BITS.get(self.element.value)

    @property
    def signed(self) -> bool:
        return self.kind == "int" and not self.element.value.startswith("u")

    def int_range(self) -> tuple[int, int]:
        """Inclusive (min, max) for integer types."""
        bits = self.bits
        if bits is None:
            raise ValueError(f"{self.token} is not an integer type")
        if self.signed:
            return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        return 0, (1 << bits) - 1


_BY_TOKEN = {t.value: t for t in FieldType}


def lookup(token: str) -> FieldType:
    try:
        return _BY_TOKEN[token]
    except KeyError:
        raise UnknownFieldType(token) from None


def known_tokens() -> list[str]:
    return list(_BY_TOKEN)
