"""Named format presets loaded from a YAML file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from tupledump.core.format_spec import ConfigError

CONFIG_ENV = "TUPLEDUMP_CONFIG"


class PresetError(ConfigError):
    pass


@dataclass(frozen=True)
class Preset:
    name: str
    key_format: str = ""
    value_format: str = ""
    key_prefix: str = ""
    description: str = ""


def get_default_config_path() -> Path:
    """Get platform-appropriate presets file location."""
    if os.name == "nt":  # Windows
        base = os.environ.get("APPDATA", os.path.expanduser("~"))
        return Path(base) / "tupledump" / "presets.yaml"
    return Path.home() / ".config" / "tupledump" / "presets.yaml"


def resolve_config_path(explicit: str | None = None) -> Path:
    if explicit:
        return Path(explicit)
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env)
    return get_default_config_path()


def parse_presets(text: str, source: str = "<string>") -> dict[str, Preset]:
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise PresetError(f"{source}: YAML parse error: {e}") from None
    if not isinstance(data, dict):
        raise PresetError(f"{source}: top-level YAML must be a mapping with 'presets'")
    raw = data.get("presets") or {}
    if not isinstance(raw, dict):
        raise PresetError(f"{source}: presets must be a mapping of name -> preset")

    presets: dict[str, Preset] = {}
    for name, entry in raw.items():
        ctx = f"{source}: presets[{name}]"
        if not isinstance(entry, dict):
            raise PresetError(f"{ctx} must be a mapping")
        values: dict[str, str] = {}
        for field in ("key_format", "value_format", "key_prefix", "description"):
            v = entry.get(field, "")
            if v is None:
                v = ""
            if not isinstance(v, (str, int)) or isinstance(v, bool):
                raise PresetError(f"{ctx}.{field} must be a string")
            values[field] = str(v)
        unknown = set(entry) - {"key_format", "value_format", "key_prefix", "description"}
        if unknown:
            raise PresetError(f"{ctx}: unknown keys {', '.join(sorted(map(str, unknown)))}")
        presets[str(name)] = Preset(name=str(name), **values)
    return presets


def load_presets(path: Path) -> dict[str, Preset]:
    """Load presets from `path`; a missing file means no presets."""
    if not path.exists():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PresetError(f"Cannot read {path}: {e}") from None
    return parse_presets(text, str(path))


def get_preset(name: str, config_path: str | None = None) -> Preset:
    path = resolve_config_path(config_path)
    presets = load_presets(path)
    if name not in presets:
        known = ", ".join(sorted(presets)) or "none defined"
        raise PresetError(f"Unknown preset {name!r} in {path} ({known})")
    return presets[name]
