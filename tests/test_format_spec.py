from __future__ import annotations

import pytest

from tupledump.core.format_spec import (
    FieldSpec,
    InvalidFormatToken,
    RawMode,
    Schema,
    describe_schema,
    parse_format_spec,
)
from tupledump.core.types import FieldType


def test_parse_fields_and_ignored_flags() -> None:
    schema = parse_format_spec("string,-uint64,[]int32")
    assert schema.fields == (
        FieldSpec(FieldType.STRING, False),
        FieldSpec(FieldType.UINT64, True),
        FieldSpec(FieldType.INT32_LIST, False),
    )
    assert schema.raw is RawMode.NONE
    assert schema.decodes


def test_raw_tokens_never_take_a_field_slot() -> None:
    # raw in the middle must not shift the ignored flag onto the wrong field
    schema = parse_format_spec("uint32,raw_string,-string")
    assert schema.types == (FieldType.UINT32, FieldType.STRING)
    assert [f.ignored for f in schema.fields] == [False, True]
    assert schema.raw is RawMode.TEXT

    schema = parse_format_spec("raw,-bool,int8")
    assert [f.ignored for f in schema.fields] == [True, False]
    assert schema.raw is RawMode.BYTES


def test_last_raw_token_wins() -> None:
    assert parse_format_spec("raw,raw_string").raw is RawMode.TEXT
    assert parse_format_spec("raw_string,raw").raw is RawMode.BYTES


def test_empty_and_raw_only() -> None:
    empty = parse_format_spec("")
    assert empty == Schema()
    assert empty.is_empty and not empty.decodes

    raw_only = parse_format_spec("raw")
    assert raw_only.fields == () and raw_only.raw is RawMode.BYTES
    assert not raw_only.is_empty and not raw_only.decodes


def test_whitespace_and_empty_tokens_skipped() -> None:
    schema = parse_format_spec(" string , ,uint8,")
    assert schema.types == (FieldType.STRING, FieldType.UINT8)


def test_invalid_token() -> None:
    with pytest.raises(InvalidFormatToken) as ei:
        parse_format_spec("string,uint99")
    assert ei.value.token == "uint99"
    assert "uint99" in str(ei.value)


def test_lone_dash_is_invalid() -> None:
    with pytest.raises(InvalidFormatToken):
        parse_format_spec("string,-")


def test_describe_round_trips() -> None:
    text = "string,-uint64,raw"
    assert describe_schema(parse_format_spec(text)) == text
