from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, TypeAlias
import tomllib

from callsnip.invariants import never
from callsnip.synthesis.model import DEFAULT_SPECIAL_LITERALS, Dialect, SnippetConfig

DEFAULT_CONFIG_NAME = "callsnip.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def snippet_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("snippet", {})
    return section if isinstance(section, dict) else {}


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def _string_table(value: TomlValue) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {
        str(key): item
        for key, item in value.items()
        if isinstance(item, str)
    }


def merge_payload(payload: Mapping[str, object], defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        if key == "special_literals" and isinstance(value, dict):
            if not value:
                continue
            merged[key] = {**_string_table(defaults.get(key)), **value}
            continue
        merged[key] = value
    return merged


def snippet_config(
    section: TomlTable | None,
    *,
    default_dialect: Dialect = Dialect.TYPESCRIPT,
) -> SnippetConfig:
    """Build a SnippetConfig from a ``[snippet]`` table.

    Special literals from the table extend the built-in ones and may replace
    them by name.
    """
    if section is None or not isinstance(section, dict):
        section = {}
    dialect_value = section.get("dialect")
    if dialect_value in (None, ""):
        dialect = default_dialect
    else:
        try:
            dialect = Dialect(str(dialect_value).strip().lower())
        except ValueError:
            never("unknown snippet dialect", dialect=dialect_value)
    numbered = section.get("numbered_placeholders")
    special_literals = dict(DEFAULT_SPECIAL_LITERALS)
    special_literals.update(_string_table(section.get("special_literals")))
    return SnippetConfig(
        dialect=dialect,
        numbered_placeholders=True if numbered is None else _as_bool(numbered),
        special_literals=MappingProxyType(special_literals),
    )
