"""Tests for version lookup."""

from importlib.metadata import PackageNotFoundError
from pathlib import Path
from unittest.mock import patch

from edgekit._version import get_version


class TestGetVersion:
    """Tests for get_version."""

    def test_reads_source_pyproject(self, tmp_path: Path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[project]\nname = "edgekit"\nversion = "9.9.9"\n')

        assert get_version(pyproject) == "9.9.9"

    def test_other_project_falls_back_to_metadata(self, tmp_path: Path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[project]\nname = "something-else"\nversion = "1.0.0"\n')

        with patch("edgekit._version.version", return_value="0.3.0"):
            assert get_version(pyproject) == "0.3.0"

    def test_not_installed_and_no_pyproject(self, tmp_path: Path):
        with patch("edgekit._version.version", side_effect=PackageNotFoundError("edgekit")):
            assert get_version(tmp_path / "missing.toml") == "0.0.0"

    def test_malformed_pyproject_is_ignored(self, tmp_path: Path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project\n")

        with patch("edgekit._version.version", return_value="0.3.0"):
            assert get_version(pyproject) == "0.3.0"
