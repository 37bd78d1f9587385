"""Utility helpers for the linter."""

from .fileio import read_text_file, read_toml_file, read_yaml_file
from .manifest import load_manifest, locate_manifest
from .program import Program, load_program
from .ty import detuple, generic_type_at, match_type, peel_refs

__all__ = [
    "read_yaml_file",
    "read_toml_file",
    "read_text_file",
    "locate_manifest",
    "load_manifest",
    "Program",
    "load_program",
    "detuple",
    "generic_type_at",
    "match_type",
    "peel_refs",
]
