"""Order-preserving ("lexicographic") tuple encoding.

Encoded tuples compare byte-wise in the same order as the tuples compare
field by field:

- unsigned integers: fixed width, big endian
- signed integers: fixed width, big endian, sign bit flipped
- bool: one byte, 0x00 or 0x01
- string, []byte, []uint8: 0x00 escaped as 0x00 0xFF, terminated by 0x00 0x01
- other sequences: every element preceded by 0x01, terminated by 0x00
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from tupledump.core.types import FieldType

ESCAPE = b"\x00\xff"
TERMINATOR = b"\x00\x01"
ELEMENT_MARK = 0x01
LIST_END = 0x00


class EncodeError(ValueError):
    pass


class DecodeError(ValueError):
    def __init__(self, message: str, offset: int | None = None):
        if offset is not None:
            message = f"{message} at offset {offset}"
        super().__init__(message)
        self.offset = offset


# Byte-string encoded types; []uint8 shares the wire format of []byte
_BYTE_STRINGS = (FieldType.BYTES, FieldType.STRING, FieldType.UINT8_LIST)


def encode(values: Sequence[Any], types: Sequence[FieldType]) -> bytes:
    if len(values) != len(types):
        raise EncodeError(f"{len(values)} values for {len(types)} field types")
    out = bytearray()
    for value, ftype in zip(values, types):
        _encode_one(out, value, ftype)
    return bytes(out)


def decode(data: bytes, types: Sequence[FieldType]) -> tuple[list[Any], bytes]:
    """Decode one value per type from the front of `data`.

    Returns the values and whatever bytes remain. Raises `DecodeError` when
    `data` is truncated or malformed for the requested types.
    """
    data = bytes(data)
    values: list[Any] = []
    pos = 0
    for ftype in types:
        value, pos = _decode_one(data, pos, ftype)
        values.append(value)
    return values, data[pos:]


def _encode_one(out: bytearray, value: Any, ftype: FieldType) -> None:
    if ftype in _BYTE_STRINGS:
        _encode_bytes(out, _as_bytes(value, ftype))
        return
    if ftype.is_sequence:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise EncodeError(f"{ftype.token} needs a sequence, got {type(value).__name__}")
        element = ftype.element
        for item in value:
            out.append(ELEMENT_MARK)
            _encode_one(out, item, element)
        out.append(LIST_END)
        return
    if ftype is FieldType.BOOL:
        if not isinstance(value, bool):
            raise EncodeError(f"bool needs True or False, got {value!r}")
        out.append(1 if value else 0)
        return
    _encode_int(out, value, ftype)


def _as_bytes(value: Any, ftype: FieldType) -> bytes:
    if ftype is FieldType.STRING:
        if not isinstance(value, str):
            raise EncodeError(f"string needs str, got {type(value).__name__}")
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    try:
        return bytes(value)
    except (TypeError, ValueError) as e:
        raise EncodeError(f"{ftype.token} needs bytes: {e}") from None


def _encode_bytes(out: bytearray, raw: bytes) -> None:
    out += raw.replace(b"\x00", ESCAPE)
    out += TERMINATOR


def _encode_int(out: bytearray, value: Any, ftype: FieldType) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodeError(f"{ftype.token} needs int, got {value!r}")
    lo, hi = ftype.int_range()
    if not lo <= value <= hi:
        raise EncodeError(f"{value} out of range for {ftype.token}")
    bits = ftype.bits or 0
    if ftype.signed:
        value += 1 << (bits - 1)
    out += value.to_bytes(bits // 8, "big")


def _decode_one(data: bytes, pos: int, ftype: FieldType) -> tuple[Any, int]:
    if ftype in _BYTE_STRINGS:
        raw, pos = _decode_bytes(data, pos)
        if ftype is FieldType.STRING:
            return raw.decode("utf-8", errors="replace"), pos
        if ftype is FieldType.UINT8_LIST:
            return list(raw), pos
        return raw, pos
    if ftype.is_sequence:
        element = ftype.element
        items: list[Any] = []
        while True:
            if pos >= len(data):
                raise DecodeError(f"unterminated {ftype.token}", pos)
            mark = data[pos]
            pos += 1
            if mark == LIST_END:
                return items, pos
            if mark != ELEMENT_MARK:
                raise DecodeError(f"bad element marker 0x{mark:02x} in {ftype.token}", pos - 1)
            item, pos = _decode_one(data, pos, element)
            items.append(item)
    if ftype is FieldType.BOOL:
        if pos >= len(data):
            raise DecodeError("truncated bool", pos)
        b = data[pos]
        if b > 1:
            raise DecodeError(f"bad bool byte 0x{b:02x}", pos)
        return b == 1, pos + 1
    width = (ftype.bits or 0) // 8
    if pos + width > len(data):
        raise DecodeError(f"truncated {ftype.token}", pos)
    value = int.from_bytes(data[pos : pos + width], "big")
    if ftype.signed:
        value -= 1 << (width * 8 - 1)
    return value, pos + width


def _decode_bytes(data: bytes, pos: int) -> tuple[bytes, int]:
    out = bytearray()
    while True:
        zero = data.find(b"\x00", pos)
        if zero == -1 or zero + 1 >= len(data):
            raise DecodeError("unterminated byte string", pos)
        out += data[pos:zero]
        follow = data[zero + 1]
        if follow == TERMINATOR[1]:
            return bytes(out), zero + 2
        if follow != ESCAPE[1]:
            raise DecodeError(f"bad escape 0x00 0x{follow:02x}", zero)
        out.append(0)
        pos = zero + 2
