"""Wire the lint catalog into a host and run lint sessions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .config import LintConfig
from .dispatch import Dispatcher, LateContext
from .errors import RegistrationError
from .groups import register_groups
from .host import Host, ProgramHost
from .registry import LintStore
from .result import LintReport
from .rules import register_lints, register_passes
from .severity import Level
from .utils.program import Program

logger = logging.getLogger(__name__)

RegisterHook = Callable[[LintStore], None]


class Callbacks:
    """Registration hooks installed by independent analysis extensions.

    Installing appends to an ordered list, so an extension never replaces a
    hook somebody else installed. Every hook runs, in installation order,
    when the store is populated.
    """

    def __init__(self) -> None:
        self._register_hooks: List[RegisterHook] = []

    def install(self, hook: RegisterHook) -> None:
        if hook in self._register_hooks:
            raise RegistrationError(f"registration hook {hook!r} is installed twice")
        self._register_hooks.append(hook)

    @property
    def hooks(self) -> Sequence[RegisterHook]:
        return tuple(self._register_hooks)

    def register_lints(self, store: LintStore) -> None:
        for hook in self._register_hooks:
            hook(store)


def register_bevy_lints(store: LintStore) -> None:
    register_lints(store)
    register_passes(store)
    register_groups(store)


def install(callbacks: Callbacks) -> Callbacks:
    """Add the Bevy lints to ``callbacks``, keeping any hooks already there."""

    callbacks.install(register_bevy_lints)
    return callbacks


class Linter:
    """Holds the lint catalog for the process and runs one session per crate.

    The store is populated once, here. The configuration is reloaded from
    scratch at the start of every ``lint`` call.
    """

    def __init__(self, callbacks: Optional[Callbacks] = None) -> None:
        if callbacks is None:
            callbacks = install(Callbacks())
        self.store = LintStore()
        callbacks.register_lints(self.store)
        self.config = LintConfig(self.store)
        logger.debug(
            "registered %d lints, %d groups", len(self.store.lints), len(self.store.groups)
        )

    def lint(
        self,
        program: Program,
        toggles: Iterable[Tuple[str, Level]] = (),
        host: Optional[Host] = None,
        manifest_path: Optional[Path] = None,
    ) -> LintReport:
        """Lint ``program`` and return the diagnostics.

        Levels come from the lint defaults, then ``toggles`` (command-line
        ``--warn``/``--deny`` style flags), then the manifest configuration,
        which is applied last.
        """

        self.config.load(program.source_path, manifest_path)
        levels = self.store.resolve_levels(list(toggles), self.config.level_overrides())
        cx = LateContext(host or ProgramHost(program), self.config, levels)
        dispatcher = Dispatcher(self.store.create_passes())
        report = dispatcher.run(cx, program.crate)
        logger.debug("linted crate `%s`: %d diagnostics", program.crate.name, len(report.diagnostics))
        return report
