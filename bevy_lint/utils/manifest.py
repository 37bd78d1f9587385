"""Cargo manifest helpers."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict

from .fileio import read_toml_file

MANIFEST_NAME = "Cargo.toml"


def locate_manifest(source_path: Path) -> Path | None:
    """Find the ``Cargo.toml`` nearest to ``source_path``, searching upwards.

    The search starts from the analyzed file's own directory, not from the
    working directory.
    """

    start = source_path if source_path.is_dir() else source_path.parent
    for directory in (start.resolve(), *start.resolve().parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    return None


def load_manifest(path: Path) -> Dict[str, Any] | None:
    """Parse a manifest, returning ``None`` if it is missing, unreadable or invalid."""

    try:
        return read_toml_file(path)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None


def get_table(document: Dict[str, Any], *keys: str) -> Dict[str, Any] | None:
    """Follow ``keys`` through nested tables, returning ``None`` if any step is missing."""

    current: Any = document
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current if isinstance(current, dict) else None
