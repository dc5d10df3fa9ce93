"""
Package version for the Token Layer SDK.

Installed distributions report their metadata version. A source checkout
reads ``[project].version`` from the adjacent pyproject.toml.
"""
import importlib.metadata
import pathlib
from typing import Optional

import tomli

DISTRIBUTION_NAME = "tokenlayer-sdk"
FALLBACK_VERSION = "0.1.0"
PYPROJECT_PATH = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"


def _pyproject_version(path: Optional[pathlib.Path] = None) -> Optional[str]:
    try:
        with (path or PYPROJECT_PATH).open("rb") as f:
            project = tomli.load(f).get("project", {})
    except (FileNotFoundError, tomli.TOMLDecodeError):
        return None
    version = project.get("version") if isinstance(project, dict) else None
    return version if isinstance(version, str) else None


def get_version() -> str:
    """Version of the installed distribution, else of the source tree"""
    try:
        return importlib.metadata.version(DISTRIBUTION_NAME)
    except importlib.metadata.PackageNotFoundError:
        return _pyproject_version() or FALLBACK_VERSION


__version__ = get_version()
