"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class ConfigError(Exception):
    """Error in ghx-engine configuration."""


class ExportFormat(StrEnum):
    TOML = "toml"
    JSON = "json"


@dataclass(slots=True, frozen=True)
class GhxConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    document: Path | None = None
    output: Path | None = None
    format: ExportFormat | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _path_option(section: dict[str, object], key: str, project_root: Path) -> Path | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str):
        msg = f"Invalid [tool.ghx_engine].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def _format_option(section: dict[str, object]) -> ExportFormat | None:
    if "format" not in section:
        return None
    value = section["format"]
    if not isinstance(value, str):
        msg = "Invalid [tool.ghx_engine].format: expected string"
        raise ConfigError(msg)
    try:
        return ExportFormat(value.lower())
    except ValueError:
        choices = ", ".join(repr(f.value) for f in ExportFormat)
        msg = f"Invalid [tool.ghx_engine].format {value!r}: expected one of {choices}"
        raise ConfigError(msg) from None


def load_config(pyproject_path: Path) -> GhxConfig:
    """Load and validate [tool.ghx_engine] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed GhxConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("ghx_engine", {})
    if not isinstance(section, dict):
        msg = "Invalid [tool.ghx_engine]: expected a table"
        raise ConfigError(msg)
    if not section:
        return GhxConfig(project_root=project_root)

    return GhxConfig(
        document=_path_option(section, "document", project_root),
        output=_path_option(section, "output", project_root),
        format=_format_option(section),
        project_root=project_root,
    )


def get_config() -> GhxConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        GhxConfig (may be empty if no pyproject.toml or no [tool.ghx_engine] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return GhxConfig()
    return load_config(pyproject_path)
