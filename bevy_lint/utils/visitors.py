"""Tree walking helpers for lints that search inside a function body."""

from __future__ import annotations

from typing import Iterator

from bevy_lint.tree import Expr


def walk_exprs(expr: Expr) -> Iterator[Expr]:
    """Yield ``expr`` and every expression below it, in pre-order source order."""

    stack = [expr]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))
