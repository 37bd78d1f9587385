"""Canonical paths of the Bevy types the lints match against."""

from __future__ import annotations

from typing import Iterable


class TypePath(tuple):
    """The namespace segments identifying a type's definition site."""

    def __new__(cls, segments: Iterable[str]) -> "TypePath":
        segments = tuple(segments)
        if not segments or not all(isinstance(segment, str) and segment for segment in segments):
            raise ValueError(f"invalid type path: {segments!r}")
        return super().__new__(cls, segments)

    @classmethod
    def parse(cls, text: str) -> "TypePath":
        return cls(text.split("::"))

    @property
    def name(self) -> str:
        return self[-1]

    def matches(self, other: Iterable[str]) -> bool:
        """Exact comparison over every segment."""

        return tuple(self) == tuple(other)

    def ends_with(self, suffix: Iterable[str]) -> bool:
        """Compare only the final segments, for when the import location is unknown."""

        suffix = tuple(suffix)
        return 0 < len(suffix) <= len(self) and tuple(self[-len(suffix) :]) == suffix

    def __str__(self) -> str:
        return "::".join(self)

    def __repr__(self) -> str:
        return f"TypePath({str(self)!r})"


APP = TypePath(["bevy_app", "app", "App"])
APP_EXIT = TypePath(["bevy_app", "app", "AppExit"])
EVENTS = TypePath(["bevy_ecs", "event", "Events"])
QUERY = TypePath(["bevy_ecs", "system", "query", "Query"])
WORLD = TypePath(["bevy_ecs", "world", "World"])
