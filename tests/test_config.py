import textwrap
from pathlib import Path

import pytest

from PortableMark.assets import BaseUrlResolver, IdentityResolver
from PortableMark.config import ConvertOptions, load_options
from PortableMark.registry import RandomKeys, SequentialKeys


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "options.yaml"
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


def test_load_options_from_yaml(tmp_path: Path):
    path = _write(
        tmp_path,
        """
        key_style: sequential
        tables: false
        asset_base_url: https://cdn.example.com/media
        indent: null
        """,
    )
    options = load_options(path)
    assert options.key_style == "sequential"
    assert options.tables is False
    assert options.indent is None
    assert isinstance(options.make_keys(), SequentialKeys)
    assert isinstance(options.make_resolver(), BaseUrlResolver)


def test_empty_file_gives_defaults(tmp_path: Path):
    options = load_options(_write(tmp_path, ""))
    assert options == ConvertOptions()
    assert isinstance(options.make_keys(), RandomKeys)
    assert isinstance(options.make_resolver(), IdentityResolver)


def test_root_must_be_mapping(tmp_path: Path):
    with pytest.raises(ValueError, match="mapping"):
        load_options(_write(tmp_path, "- tables\n- footnotes\n"))


def test_unknown_option_rejected(tmp_path: Path):
    with pytest.raises(ValueError, match="Unknown option"):
        load_options(_write(tmp_path, "smart_quotes: true\n"))


def test_wrong_type_rejected(tmp_path: Path):
    with pytest.raises(ValueError, match="key_length"):
        load_options(_write(tmp_path, "key_length: true\n"))


def test_invalid_key_style():
    with pytest.raises(ValueError, match="key_style"):
        ConvertOptions(key_style="uuid")
