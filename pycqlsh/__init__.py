"""pycqlsh: an interactive and batch CQL shell for Cassandra, with a local DuckDB engine."""
from __future__ import annotations
from importlib import metadata
from pathlib import Path
import re

DIST_NAME = "pycqlsh"
DEV_VERSION = "0.0.0.dev0"
_VERSION_LINE = re.compile(r'^version\s*=\s*"([^"]+)"', re.MULTILINE)


def _source_tree_version() -> str:
    """Version declared in the checkout's pyproject.toml (running uninstalled)."""
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        match = _VERSION_LINE.search(pyproject.read_text(encoding="utf-8"))
    except OSError:
        return DEV_VERSION
    return match.group(1) if match else DEV_VERSION


def _installed_version() -> str:
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return _source_tree_version()


__version__ = _installed_version()

__all__ = ["__version__"]
