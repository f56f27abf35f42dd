"""Tests for loading ``config.yml``."""

from __future__ import annotations

from dataclasses import replace

import pytest
import yaml

from hdmat.interfaces.config import ConversionConfig
from hdmat.utils.config import config_from_mapping, load_config
from hdmat.utils.paths import resolve_destination


def test_project_config_matches_defaults() -> None:
    config = load_config()
    assert replace(config, version="0.0.0") == ConversionConfig()


def test_load_from_yaml(tmp_path) -> None:
    path = tmp_path / "config.yml"
    path.write_text(
        yaml.safe_dump(
            {
                "version": "1.2.3",
                "conversion": {
                    "stride": 2,
                    "verbose": False,
                    "mass_patterns": ["mass", "flux"],
                    "parameters": {"horizontal_velocity": "current u"},
                },
                "store": {"chunk_columns": 16, "compression": "gzip", "compression_level": 4},
            }
        ),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.version == "1.2.3"
    assert config.stride == 2
    assert config.verbose is False
    assert config.mass_patterns == ("mass", "flux")
    assert config.horizontal_velocity == "current u"
    assert config.vertical_velocity == "v velocity"
    assert config.chunk_columns == 16
    assert config.compression == "gzip"
    assert config.compression_level == 4
    assert config["transpose_block_rows"] == 4096


def test_empty_file_gives_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == ConversionConfig()


def test_missing_explicit_path(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yml")


def test_single_mass_pattern_string() -> None:
    config = config_from_mapping({"conversion": {"mass_patterns": "Mass"}, "store": None})
    assert config.mass_patterns == ("Mass",)
    assert config.compression is None


def test_with_overrides_skips_none() -> None:
    config = ConversionConfig(stride=4).with_overrides(stride=None, all_parameters=False)
    assert config.stride == 4
    assert config.all_parameters is False
    assert config.get("missing", "fallback") == "fallback"


def test_resolve_destination(tmp_path) -> None:
    source = tmp_path / "run" / "HD.dfsu"
    assert resolve_destination(source, None) == (tmp_path / "run" / "HD.h5").resolve()
    assert resolve_destination(source, tmp_path) == (tmp_path / "HD.h5").resolve()
    assert resolve_destination(source, tmp_path / "x.h5") == (tmp_path / "x.h5").resolve()
