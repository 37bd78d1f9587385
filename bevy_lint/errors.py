"""Exception types raised by the linter."""

from __future__ import annotations


class BevyLintError(Exception):
    """Base class for all linter errors."""


class RegistrationError(BevyLintError):
    """The lint catalog is inconsistent (duplicate lints, groups or hooks).

    This is a programming error in the catalog and aborts start-up.
    """


class UnknownLintError(BevyLintError, ValueError):
    """A lint level toggle named neither a registered lint nor a group."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown lint or lint group: `{name}`")
        self.name = name


class LintPassError(BevyLintError):
    """A lint pass hit an internal inconsistency while visiting one node.

    The dispatcher logs these and carries on with the rest of the tree.
    """


class ProgramLoadError(BevyLintError, ValueError):
    """A typed program dump could not be understood."""
