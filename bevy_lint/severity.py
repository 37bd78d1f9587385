"""Lint level definitions."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Level(str, Enum):
    """Enumerate the supported lint levels, weakest first."""

    ALLOW = "allow"
    WARN = "warn"
    DENY = "deny"
    FORBID = "forbid"

    @property
    def rank(self) -> int:
        """Return an integer ranking so levels can be compared."""

        ordering = {
            Level.ALLOW: 0,
            Level.WARN: 1,
            Level.DENY: 2,
            Level.FORBID: 3,
        }
        return ordering[self]

    @property
    def label(self) -> str:
        """Return the heading used when rendering a diagnostic at this level."""

        if self.is_error:
            return "error"
        if self is Level.WARN:
            return "warning"
        return "allowed"

    @property
    def is_error(self) -> bool:
        return self.rank >= Level.DENY.rank

    @classmethod
    def from_str(cls, value: object) -> Optional["Level"]:
        """Parse a level name, returning ``None`` when it is not recognized."""

        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None
