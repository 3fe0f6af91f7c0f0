from __future__ import annotations

from pathlib import Path

import pytest

from tupledump.core.presets import (
    CONFIG_ENV,
    Preset,
    PresetError,
    get_preset,
    load_presets,
    parse_presets,
    resolve_config_path,
)

PRESETS = """
presets:
  flows:
    description: Flow records
    key_format: "string,uint64"
    value_format: "-int64,raw_string"
  ids:
    key_format: uint32
    key_prefix: 42
"""


def test_parse_presets() -> None:
    presets = parse_presets(PRESETS)
    assert presets["flows"] == Preset(
        name="flows",
        key_format="string,uint64",
        value_format="-int64,raw_string",
        description="Flow records",
    )
    assert presets["ids"].key_prefix == "42"
    assert presets["ids"].value_format == ""


@pytest.mark.parametrize(
    "text",
    [
        "- a\n- b\n",
        "presets: [1, 2]\n",
        "presets:\n  x: nope\n",
        "presets:\n  x:\n    key_format: [a]\n",
        "presets:\n  x:\n    colour: red\n",
        "presets: {unclosed\n",
    ],
)
def test_invalid_presets(text: str) -> None:
    with pytest.raises(PresetError):
        parse_presets(text)


def test_missing_file_means_no_presets(tmp_path: Path) -> None:
    assert load_presets(tmp_path / "missing.yaml") == {}


def test_get_preset_from_file(tmp_path: Path) -> None:
    p = tmp_path / "presets.yaml"
    p.write_text(PRESETS, encoding="utf-8")
    assert get_preset("flows", str(p)).key_format == "string,uint64"
    with pytest.raises(PresetError) as ei:
        get_preset("other", str(p))
    assert "flows" in str(ei.value)


def test_config_path_resolution(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "env.yaml"))
    assert resolve_config_path() == tmp_path / "env.yaml"
    assert resolve_config_path(str(tmp_path / "x.yaml")) == tmp_path / "x.yaml"
    monkeypatch.delenv(CONFIG_ENV)
    assert resolve_config_path().name == "presets.yaml"
