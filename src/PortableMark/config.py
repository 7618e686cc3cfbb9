from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .assets import AssetResolver, BaseUrlResolver, IdentityResolver
from .registry import KeyGenerator, RandomKeys, SequentialKeys

KEY_STYLES = ("random", "sequential")


@dataclass
class ConvertOptions:
    strikethrough: bool = True
    tables: bool = True
    footnotes: bool = True
    tasklists: bool = True
    front_matter: bool = True
    key_style: str = "random"
    key_length: int = 12
    asset_base_url: str | None = None
    include_metadata: bool = False
    indent: int | None = 2

    def __post_init__(self) -> None:
        if self.key_style not in KEY_STYLES:
            raise ValueError(f"key_style must be one of {', '.join(KEY_STYLES)}, got {self.key_style!r}")
        if self.key_length < 1:
            raise ValueError("key_length must be positive")

    def make_keys(self) -> KeyGenerator:
        if self.key_style == "sequential":
            return SequentialKeys()
        return RandomKeys(self.key_length)

    def make_resolver(self) -> AssetResolver:
        if self.asset_base_url:
            return BaseUrlResolver(self.asset_base_url)
        return IdentityResolver()


def options_from_mapping(data: dict[str, Any]) -> ConvertOptions:
    """Build options from a parsed YAML mapping, rejecting unknown keys and wrong types."""
    known = {f.name: f for f in fields(ConvertOptions)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown option(s): {', '.join(unknown)}")

    defaults = ConvertOptions()
    for name, value in data.items():
        expected = type(getattr(defaults, name))
        if name in ("asset_base_url", "indent") and value is None:
            continue
        if name == "asset_base_url":
            expected = str
        # bool is an int subclass; keep them apart both ways
        if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
            raise ValueError(f"Option {name!r} must be of type {expected.__name__}, got {value!r}")
    return ConvertOptions(**data)


def load_options(path: str | Path) -> ConvertOptions:
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("Options file root must be a mapping of option names to values.")
    return options_from_mapping(data)
