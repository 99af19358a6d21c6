"""Tests for TOML config file loading."""

from pathlib import Path

import pytest

from sushe.config.toml_parser import TomlParseError, load_toml_file


class TestLoadTomlFile:
    """Tests for load_toml_file."""

    def test_missing_file(self, temp_dir: Path) -> None:
        assert load_toml_file(temp_dir / "missing.toml") == {}

    def test_valid_file(self, temp_dir: Path) -> None:
        path = temp_dir / "config.toml"
        path.write_text('[pipeline]\nmax_height = 720\n[tools]\nffmpeg = "/x"\n')
        assert load_toml_file(path) == {
            "pipeline": {"max_height": 720},
            "tools": {"ffmpeg": "/x"},
        }

    def test_invalid_file_lenient(self, temp_dir: Path, caplog) -> None:
        path = temp_dir / "config.toml"
        path.write_text("[pipeline\n")
        assert load_toml_file(path) == {}
        assert "Failed to load TOML file" in caplog.text

    def test_invalid_file_strict(self, temp_dir: Path) -> None:
        path = temp_dir / "config.toml"
        path.write_text("max_height = \n")
        with pytest.raises(TomlParseError, match="Failed to parse"):
            load_toml_file(path, strict=True)
