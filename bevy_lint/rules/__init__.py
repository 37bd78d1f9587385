"""Lint passes and their registration."""

from __future__ import annotations

from typing import List, Protocol, Tuple

from bevy_lint.registry import Lint, LintStore


class LintPass(Protocol):
    """Protocol implemented by all lint passes.

    A pass also defines one or more hooks, each called as ``hook(cx, node)``:
    ``check_crate``, ``check_item``, ``check_fn``, ``check_stmt``,
    ``check_expr`` or ``check_ty``.
    """

    lints: Tuple[Lint, ...]


def builtin_lints() -> List[Lint]:
    from .insert_event_resource import INSERT_EVENT_RESOURCE
    from .main_return_without_appexit import MAIN_RETURN_WITHOUT_APPEXIT
    from .panicking_methods import PANICKING_QUERY_METHODS, PANICKING_WORLD_METHODS
    from .zst_query import ZST_QUERY

    return [
        INSERT_EVENT_RESOURCE,
        MAIN_RETURN_WITHOUT_APPEXIT,
        PANICKING_QUERY_METHODS,
        PANICKING_WORLD_METHODS,
        ZST_QUERY,
    ]


def register_lints(store: LintStore) -> None:
    store.register_lints(builtin_lints())


def register_passes(store: LintStore) -> None:
    from . import insert_event_resource, main_return_without_appexit, panicking_methods, zst_query

    store.register_pass(insert_event_resource.get_pass)
    store.register_pass(main_return_without_appexit.get_pass)
    store.register_pass(panicking_methods.get_pass)
    store.register_pass(zst_query.get_pass)
