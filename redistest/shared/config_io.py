"""Configuration I/O for reading fixture settings from TOML files.

Settings are looked up in the project root, highest priority first:
1. redistest.toml (top-level keys)
2. pyproject.toml ([tool.redistest] table)
3. Built-in defaults
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from redistest.domain.config import FixtureConfig

logger = logging.getLogger(__name__)

STANDALONE_CONFIG = "redistest.toml"
PYPROJECT = "pyproject.toml"


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to a TOML file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def extract_fixture_section(path: Path, data: dict[str, Any]) -> dict[str, Any]:
    """Pick the fixture settings out of a parsed file.

    Args:
        path: File the data came from (decides the layout)
        data: Parsed TOML

    Returns:
        The fixture settings (empty if the file has none)

    Raises:
        ValueError: If the settings are not a table
    """
    if path.name == PYPROJECT:
        tool = data.get("tool", {})
        if not isinstance(tool, dict):
            raise ValueError(f"[tool] in {path} must be a table")
        section = tool.get("redistest", {})
    else:
        section = data
    if not isinstance(section, dict):
        raise ValueError(f"Fixture settings in {path} must be a table")
    return section


def find_config_file(root: Path) -> Path | None:
    """Return the highest priority config file present in root, if any."""
    for name in (STANDALONE_CONFIG, PYPROJECT):
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_fixture_config(root: Path, base: FixtureConfig | None = None) -> FixtureConfig:
    """Load fixture configuration for a project.

    Missing files yield the defaults. A malformed or invalid file is
    logged and ignored rather than failing every test that uses the fixture.

    Args:
        root: Project root to look in
        base: Config to apply the file's overrides to (default: defaults)

    Returns:
        FixtureConfig with any file overrides applied
    """
    config = base or FixtureConfig.default()
    path = find_config_file(root)
    if path is None:
        return config

    try:
        data = extract_fixture_section(path, load_config_data(path))
        config = FixtureConfig.from_partial(config, data)
        logger.debug("Loaded fixture config from %s", path)
    except (FileNotFoundError, ValueError, TypeError) as e:
        logger.warning(
            "Failed to load fixture config from %s: %s. Using defaults.",
            path,
            e,
        )
    return config
