"""Lint groups, for toggling many lints at once."""

from __future__ import annotations

from typing import Dict

from .errors import RegistrationError
from .registry import LintStore

GROUPS: Dict[str, str] = {
    "bevy::correctness": "lints for code that is outright wrong or useless",
    "bevy::suspicious": "lints for code that is most likely wrong or useless",
    "bevy::complexity": "lints for code that does something simple in a complex way",
    "bevy::performance": "lints for code that can be written to run faster",
    "bevy::style": "lints for code that should be written more idiomatically",
    "bevy::pedantic": "lints that are strict and may have false positives",
    "bevy::restriction": "opt-in lints that restrict the use of certain features",
    "bevy::nursery": "unstable lints that may be buggy",
}

ALL = "bevy::all"


def register_groups(store: LintStore) -> None:
    """Register every group from the memberships the registered lints declare.

    Must run after the lints themselves are registered. Empty groups are still
    registered so that toggling them is not an error.
    """

    for lint in store.lints:
        for group in lint.groups:
            if group not in GROUPS:
                raise RegistrationError(f"lint `{lint.name}` declares unknown group `{group}`")
    for group in GROUPS:
        store.register_group(group, [lint.name for lint in store.lints if group in lint.groups])
    store.register_group(ALL, [lint.name for lint in store.lints])
