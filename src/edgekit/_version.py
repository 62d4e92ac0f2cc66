"""Version lookup for edgekit."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "edgekit"
UNKNOWN_VERSION = "0.0.0"

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version(pyproject: Path = _PYPROJECT) -> str:
    """Prefer the source checkout's pyproject.toml, then installed metadata."""
    try:
        with open(pyproject, "rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        project = {}

    if project.get("name") == DISTRIBUTION and project.get("version"):
        return str(project["version"])

    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return UNKNOWN_VERSION
