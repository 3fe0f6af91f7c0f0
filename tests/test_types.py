from __future__ import annotations

import pytest

from tupledump.core.types import FieldType, UnknownFieldType, known_tokens, lookup


def test_lookup_every_token() -> None:
    for token in known_tokens():
        assert lookup(token).token == token
    assert len(known_tokens()) == len(FieldType)


def test_lookup_unknown() -> None:
    with pytest.raises(UnknownFieldType):
        lookup("uint99")
    with pytest.raises(UnknownFieldType):
        lookup("raw")


def test_kinds_and_sequences() -> None:
    assert FieldType.BYTES.kind == "bytes" and not FieldType.BYTES.is_sequence
    assert FieldType.BYTES_LIST.is_sequence and FieldType.BYTES_LIST.element is FieldType.BYTES
    assert FieldType.STRING_LIST.kind == "string"
    assert FieldType.UINT8_LIST.element is FieldType.UINT8
    assert FieldType.INT64_LIST.kind == "int"
    assert FieldType.BOOL.kind == "bool"


def test_int_ranges() -> None:
    assert FieldType.UINT8.int_range() == (0, 255)
    assert FieldType.INT8.int_range() == (-128, 127)
    assert FieldType.UINT64.int_range() == (0, 2**64 - 1)
    assert FieldType.INT16_LIST.int_range() == (-32768, 32767)
    assert FieldType.INT32.signed and not FieldType.UINT32.signed
    with pytest.raises(ValueError):
        FieldType.STRING.int_range()
