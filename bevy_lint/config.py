"""Per-lint configuration read from ``[package.metadata.bevy_lint]`` in ``Cargo.toml``.

Each key under the table is a lint name. The value is either a level string::

    [package.metadata.bevy_lint]
    zst_query = "warn"

or a table holding an optional ``level`` and any lint-specific parameters::

    [package.metadata.bevy_lint]
    panicking_world_methods = { level = "deny", ignore = ["resource"] }

``[workspace.metadata.bevy_lint]`` is read too; package entries replace
workspace entries for the same lint.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, TypeVar

from .registry import LintStore, qualify
from .severity import Level
from .utils.manifest import get_table, load_manifest, locate_manifest

logger = logging.getLogger(__name__)

CONFIG_SECTION = "bevy_lint"

R = TypeVar("R")

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class ConfigEntry:
    """The level override and extra parameters configured for one lint."""

    level: Optional[Level] = None
    params: Mapping[str, Any] = field(default_factory=dict)


class _ReadWriteLock:
    """Many concurrent readers, or one writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class LintConfig:
    """The lint configuration of the crate currently being linted.

    ``load`` replaces the whole map at the start of every session, so nothing
    configured for one project leaks into the next.
    """

    def __init__(self, store: Optional[LintStore] = None) -> None:
        self._store = store
        self._lock = _ReadWriteLock()
        self._entries: Dict[str, ConfigEntry] = {}
        self._manifest_path: Optional[Path] = None

    @property
    def manifest_path(self) -> Optional[Path]:
        return self._manifest_path

    def load(self, source_path: Optional[Path], manifest_path: Optional[Path] = None) -> None:
        """Read configuration for the crate containing ``source_path``.

        Never raises for a missing or broken manifest: the map is cleared and
        every lint falls back to its defaults.
        """

        entries: Dict[str, ConfigEntry] = {}
        if manifest_path is None and source_path is not None:
            manifest_path = locate_manifest(source_path)

        document = load_manifest(manifest_path) if manifest_path is not None else None
        if document is None:
            logger.debug("no readable manifest for %s, using default lint configuration", source_path)
        else:
            for section in (("workspace", "metadata", CONFIG_SECTION), ("package", "metadata", CONFIG_SECTION)):
                table = get_table(document, *section)
                if table is not None:
                    entries.update(self._parse_table(table, ".".join(section)))

        with self._lock.write():
            self._entries = entries
            self._manifest_path = manifest_path if document is not None else None

    def clear(self) -> None:
        with self._lock.write():
            self._entries = {}
            self._manifest_path = None

    def _parse_table(self, table: Dict[str, Any], section: str) -> Dict[str, ConfigEntry]:
        entries: Dict[str, ConfigEntry] = {}
        for key, value in table.items():
            name = qualify(key)
            if self._store is not None and not self._store.is_known(name):
                logger.warning("[%s] ignoring configuration for unknown lint `%s`", section, key)
                continue
            if isinstance(value, str):
                level = Level.from_str(value)
                if level is None:
                    logger.warning("[%s] `%s` has unrecognized level %r", section, key, value)
                    continue
                entries[name] = ConfigEntry(level=level)
            elif isinstance(value, dict):
                params = dict(value)
                raw_level = params.pop("level", None)
                level = Level.from_str(raw_level) if raw_level is not None else None
                if raw_level is not None and level is None:
                    logger.warning("[%s] `%s` has unrecognized level %r", section, key, raw_level)
                entries[name] = ConfigEntry(level=level, params=MappingProxyType(params))
            else:
                logger.warning("[%s] `%s` must be a level string or a table, found %r", section, key, value)
        return entries

    def with_config(self, lint_name: str, func: Callable[[Mapping[str, Any]], R]) -> R:
        """Call ``func`` with the parameters configured for ``lint_name``.

        ``func`` receives an empty mapping when nothing is configured.
        """

        with self._lock.read():
            entry = self._entries.get(qualify(lint_name))
            return func(entry.params if entry is not None else _EMPTY)

    def get(self, lint_name: str) -> Optional[ConfigEntry]:
        with self._lock.read():
            return self._entries.get(qualify(lint_name))

    def level_overrides(self) -> List[Tuple[str, Level]]:
        """Return the configured ``(lint, level)`` pairs in manifest order."""

        with self._lock.read():
            return [(name, entry.level) for name, entry in self._entries.items() if entry.level is not None]

    def snapshot(self) -> Dict[str, ConfigEntry]:
        with self._lock.read():
            return dict(self._entries)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)
