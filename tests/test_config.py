"""Tests for the configuration module."""

from pathlib import Path

import pytest

from ghx_engine._cli.config import (
    ConfigError,
    ExportFormat,
    GhxConfig,
    find_pyproject_toml,
    get_config,
    load_config,
)


def _write_pyproject(directory: Path, body: str) -> Path:
    pyproject = directory / "pyproject.toml"
    pyproject.write_text(body)
    return pyproject


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = _write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        result = find_pyproject_toml(tmp_path)

        assert result == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = _write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        subdir = tmp_path / "documents" / "bridges"
        subdir.mkdir(parents=True)

        result = find_pyproject_toml(subdir)

        assert result == pyproject

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        """Should return None when no pyproject.toml is found."""
        result = find_pyproject_toml(tmp_path)

        assert result is None


class TestLoadConfig:
    """Tests for loading [tool.ghx_engine]."""

    def test_full_section(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.ghx_engine]
document = "bridge.ghx"
output = "out/result.json"
format = "JSON"
""",
        )

        config = load_config(pyproject)

        assert config == GhxConfig(
            document=tmp_path / "bridge.ghx",
            output=tmp_path / "out" / "result.json",
            format=ExportFormat.JSON,
            project_root=tmp_path,
        )

    def test_absolute_paths_are_kept(self, tmp_path: Path) -> None:
        document = tmp_path / "elsewhere" / "doc.ghx"
        pyproject = _write_pyproject(tmp_path, f'[tool.ghx_engine]\ndocument = "{document.as_posix()}"\n')

        assert load_config(pyproject).document == document

    def test_missing_section(self, tmp_path: Path) -> None:
        """Should return an empty config rooted at the project."""
        pyproject = _write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        config = load_config(pyproject)

        assert config == GhxConfig(project_root=tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(tmp_path, "[tool.ghx_engine\n")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)

    def test_non_string_path(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(tmp_path, "[tool.ghx_engine]\noutput = 3\n")

        with pytest.raises(ConfigError, match=r"output: expected string path"):
            load_config(pyproject)

    def test_unknown_format(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(tmp_path, '[tool.ghx_engine]\nformat = "yaml"\n')

        with pytest.raises(ConfigError, match="expected one of 'toml', 'json'"):
            load_config(pyproject)

    def test_section_must_be_a_table(self, tmp_path: Path) -> None:
        pyproject = _write_pyproject(tmp_path, '[tool]\nghx_engine = "bridge.ghx"\n')

        with pytest.raises(ConfigError, match="expected a table"):
            load_config(pyproject)


class TestGetConfig:
    """Tests for get_config function."""

    def test_reads_from_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_pyproject(tmp_path, '[tool.ghx_engine]\ndocument = "doc.ghx"\n')
        monkeypatch.chdir(tmp_path)

        assert get_config().document == tmp_path.resolve() / "doc.ghx"
