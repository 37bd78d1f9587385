"""Lint declarations and the registry that holds them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Tuple

from .errors import RegistrationError, UnknownLintError
from .severity import Level

TOOL_NAMESPACE = "bevy"


def qualify(name: str) -> str:
    """Prefix a short lint or group name with the tool namespace."""

    name = name.strip().replace("-", "_")
    if "::" in name:
        return name
    return f"{TOOL_NAMESPACE}::{name}"


@dataclass(frozen=True)
class Lint:
    """A single lint: its unique name, default level and description."""

    name: str
    default_level: Level
    desc: str
    groups: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", qualify(self.name))
        object.__setattr__(self, "groups", tuple(qualify(group) for group in self.groups))

    @property
    def short_name(self) -> str:
        return self.name.split("::", 1)[1]


@dataclass(frozen=True)
class LintGroup:
    name: str
    members: Tuple[str, ...]


PassFactory = Callable[[], object]


class LintStore:
    """Registry of lints, lint passes and groups for one process.

    Registration happens once at start-up and is append-only. Passes run in
    the order they were registered.
    """

    def __init__(self) -> None:
        self._lints: Dict[str, Lint] = {}
        self._groups: Dict[str, LintGroup] = {}
        self._pass_factories: List[PassFactory] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_lint(self, lint: Lint) -> None:
        if lint.name in self._lints:
            raise RegistrationError(f"lint `{lint.name}` is registered twice")
        if lint.name in self._groups:
            raise RegistrationError(f"lint `{lint.name}` has the same name as a group")
        self._lints[lint.name] = lint

    def register_lints(self, lints: Iterable[Lint]) -> None:
        for lint in lints:
            self.register_lint(lint)

    def register_pass(self, factory: PassFactory) -> None:
        self._pass_factories.append(factory)

    def register_group(self, name: str, members: Iterable[str]) -> None:
        name = qualify(name)
        if name in self._groups:
            raise RegistrationError(f"lint group `{name}` is registered twice")
        if name in self._lints:
            raise RegistrationError(f"lint group `{name}` has the same name as a lint")
        qualified = tuple(qualify(member) for member in members)
        for member in qualified:
            if member not in self._lints:
                raise RegistrationError(f"lint group `{name}` names unknown lint `{member}`")
        self._groups[name] = LintGroup(name, qualified)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def lints(self) -> List[Lint]:
        return list(self._lints.values())

    @property
    def groups(self) -> List[LintGroup]:
        return list(self._groups.values())

    def get_lint(self, name: str) -> Lint:
        try:
            return self._lints[qualify(name)]
        except KeyError:
            raise UnknownLintError(name) from None

    def is_known(self, name: str) -> bool:
        name = qualify(name)
        return name in self._lints or name in self._groups

    def create_passes(self) -> List[object]:
        """Instantiate every registered pass, in registration order."""

        return [factory() for factory in self._pass_factories]

    # ------------------------------------------------------------------
    # Level handling
    # ------------------------------------------------------------------
    def expand(self, toggles: Iterable[Tuple[str, Level]]) -> List[Tuple[str, Level]]:
        """Flatten lint/group toggles into per-lint toggles.

        Later toggles override earlier ones for the same lint, so
        ``[("bevy::restriction", DENY), ("bevy::zst_query", ALLOW)]`` denies the
        whole group except ``zst_query``. The result is in registration order.
        """

        levels: Dict[str, Level] = {}
        for name, level in toggles:
            name = qualify(name)
            if name in self._groups:
                for member in self._groups[name].members:
                    levels[member] = level
            elif name in self._lints:
                levels[name] = level
            else:
                raise UnknownLintError(name)
        return [(lint, levels[lint]) for lint in self._lints if lint in levels]

    def resolve_levels(self, *toggle_lists: Iterable[Tuple[str, Level]]) -> Dict[str, Level]:
        """Compute the effective level of every lint.

        Starts from each lint's default and applies the toggle lists in order.
        A lint that reaches ``forbid``, whether by default or by a toggle, can
        never be lowered again.
        """

        levels = {name: lint.default_level for name, lint in self._lints.items()}
        for toggles in toggle_lists:
            for name, level in self._expand_in_order(toggles):
                if levels[name] is Level.FORBID and level is not Level.FORBID:
                    continue
                levels[name] = level
        return levels

    def _expand_in_order(self, toggles: Iterable[Tuple[str, Level]]) -> List[Tuple[str, Level]]:
        expanded: List[Tuple[str, Level]] = []
        for name, level in toggles:
            expanded.extend(self.expand([(name, level)]))
        return expanded

    def describe(self) -> Mapping[str, Tuple[Level, str]]:
        return {name: (lint.default_level, lint.desc) for name, lint in self._lints.items()}
