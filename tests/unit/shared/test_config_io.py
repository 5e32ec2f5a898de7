"""Tests for config I/O utilities."""

import logging
from pathlib import Path

import pytest

from redistest.domain.config import FixtureConfig
from redistest.shared.config_io import (
    extract_fixture_section,
    find_config_file,
    load_config_data,
    load_fixture_config,
)


class TestLoadConfigData:
    """Tests for load_config_data."""

    def test_missing_file_raises(self, tmp_path: Path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config_data(tmp_path / "redistest.toml")

    def test_invalid_toml_raises_value_error(self, tmp_path: Path):
        """Test malformed TOML raises ValueError."""
        path = tmp_path / "redistest.toml"
        path.write_text("probe_attempts = [")
        with pytest.raises(ValueError, match="Invalid TOML"):
            load_config_data(path)


class TestExtractFixtureSection:
    """Tests for extract_fixture_section."""

    def test_pyproject_uses_tool_table(self):
        """Test pyproject settings live under [tool.redistest]."""
        data = {"project": {"name": "x"}, "tool": {"redistest": {"probe_attempts": 3}}}
        assert extract_fixture_section(Path("pyproject.toml"), data) == {
            "probe_attempts": 3
        }

    def test_pyproject_without_table_is_empty(self):
        """Test a pyproject without our table yields no overrides."""
        assert extract_fixture_section(Path("pyproject.toml"), {"tool": {}}) == {}

    def test_standalone_uses_top_level(self):
        """Test redistest.toml settings are top-level keys."""
        data = {"executable": "valkey-server"}
        assert extract_fixture_section(Path("redistest.toml"), data) == data

    def test_non_table_section_raises(self):
        """Test a scalar [tool.redistest] is rejected."""
        with pytest.raises(ValueError, match="must be a table"):
            extract_fixture_section(Path("pyproject.toml"), {"tool": {"redistest": 1}})

    def test_non_table_tool_raises(self):
        """Test a scalar top-level tool key is rejected."""
        with pytest.raises(ValueError, match="must be a table"):
            extract_fixture_section(Path("pyproject.toml"), {"tool": "x"})


class TestFindConfigFile:
    """Tests for find_config_file."""

    def test_none_when_absent(self, tmp_path: Path):
        """Test no file found in an empty directory."""
        assert find_config_file(tmp_path) is None

    def test_standalone_wins_over_pyproject(self, tmp_path: Path):
        """Test redistest.toml takes priority."""
        (tmp_path / "pyproject.toml").write_text("")
        (tmp_path / "redistest.toml").write_text("")
        assert find_config_file(tmp_path) == tmp_path / "redistest.toml"


class TestLoadFixtureConfig:
    """Tests for load_fixture_config."""

    def test_defaults_without_files(self, tmp_path: Path):
        """Test defaults are returned when no config exists."""
        assert load_fixture_config(tmp_path) == FixtureConfig.default()

    def test_reads_pyproject_table(self, tmp_path: Path):
        """Test overrides are read from [tool.redistest]."""
        (tmp_path / "pyproject.toml").write_text(
            "[tool.redistest]\n"
            "probe_attempts = 50\n"
            "probe_interval = 0.05\n"
            'extra_directives = ["maxmemory 10mb"]\n'
        )

        config = load_fixture_config(tmp_path)

        assert config.probe_attempts == 50
        assert config.probe_interval == 0.05
        assert config.extra_directives == ("maxmemory 10mb",)

    def test_reads_standalone_file(self, tmp_path: Path):
        """Test overrides are read from redistest.toml."""
        (tmp_path / "redistest.toml").write_text('executable = "valkey-server"\n')
        assert load_fixture_config(tmp_path).executable == "valkey-server"

    def test_applies_over_base(self, tmp_path: Path):
        """Test file overrides are applied on top of a given base."""
        (tmp_path / "redistest.toml").write_text("probe_attempts = 2\n")
        base = FixtureConfig(shutdown_timeout=1.0)

        config = load_fixture_config(tmp_path, base=base)

        assert config.probe_attempts == 2
        assert config.shutdown_timeout == 1.0

    def test_malformed_file_falls_back_with_warning(self, tmp_path: Path, caplog):
        """Test a broken file logs a warning and yields defaults."""
        (tmp_path / "redistest.toml").write_text("probe_attempts = [")

        with caplog.at_level(logging.WARNING):
            config = load_fixture_config(tmp_path)

        assert config == FixtureConfig.default()
        assert "Failed to load fixture config" in caplog.text

    def test_invalid_values_fall_back(self, tmp_path: Path):
        """Test invalid settings are ignored rather than raised."""
        (tmp_path / "redistest.toml").write_text("probe_attempts = 0\n")
        assert load_fixture_config(tmp_path) == FixtureConfig.default()

    def test_wrong_types_fall_back(self, tmp_path: Path):
        """Test type errors in settings are ignored rather than raised."""
        (tmp_path / "redistest.toml").write_text('probe_attempts = "many"\n')
        assert load_fixture_config(tmp_path) == FixtureConfig.default()

    def test_scalar_tool_key_falls_back_with_warning(self, tmp_path: Path, caplog):
        """Test a pyproject whose tool key is not a table yields defaults."""
        (tmp_path / "pyproject.toml").write_text('tool = "x"\n')

        with caplog.at_level(logging.WARNING):
            config = load_fixture_config(tmp_path)

        assert config == FixtureConfig.default()
        assert "Failed to load fixture config" in caplog.text
