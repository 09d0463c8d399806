"""Render Go goroutine dumps as weighted Graphviz call graphs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gostack2dot")
except PackageNotFoundError:  # pragma: no cover - package metadata absent in dev mode
    __version__ = "0.0.0"

__all__ = ["__version__"]
