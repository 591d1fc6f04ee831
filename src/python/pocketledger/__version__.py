"""Package version identifier."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

VERSION_FILE = Path(__file__).resolve().parents[3] / "VERSION"


def _read_version() -> str:
    try:
        return version("pocketledger")
    except PackageNotFoundError:
        # Source checkout that was never installed
        return VERSION_FILE.read_text(encoding="utf-8").strip()


__version__ = _read_version()
