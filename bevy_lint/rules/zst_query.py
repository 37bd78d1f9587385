"""Detect queries that fetch a zero-sized type.

Zero-sized types have no runtime data. In Bevy they are usually marker
components, which are better used as filters::

    fn move_player(query: Query<(&mut Transform, &Player)>) {}   // flagged
    fn move_player(query: Query<&mut Transform, With<Player>>) {} // use instead
"""

from __future__ import annotations

from typing import Optional

from bevy_lint import paths
from bevy_lint.dispatch import LateContext
from bevy_lint.registry import Lint
from bevy_lint.severity import Level
from bevy_lint.tree import HirTy, Ty
from bevy_lint.utils.ty import detuple, generic_type_at, is_normalizable, match_type, peel_refs

from . import LintPass

ZST_QUERY = Lint(
    "zst_query",
    Level.ALLOW,
    "query for a zero-sized type",
    groups=("restriction",),
)

# `Query<'w, 's, D, F>`: the data argument comes after the two lifetimes.
QUERY_DATA_INDEX = 2


class ZstQuery:
    lints = (ZST_QUERY,)

    def check_ty(self, cx: LateContext, hir_ty: HirTy) -> None:
        if not match_type(cx.lower_ty(hir_ty), paths.QUERY):
            return

        query_data = generic_type_at(hir_ty, QUERY_DATA_INDEX)
        if query_data is None:
            return

        for element in detuple(query_data):
            # Judge `Foo`, not `&Foo` or `&mut Foo`.
            peeled = peel_refs(cx.lower_ty(element))
            if not is_zero_sized(cx, peeled):
                continue
            cx.span_lint_and_help(
                ZST_QUERY,
                element.span,
                ZST_QUERY.desc,
                f"consider using a filter instead: `With<{peeled}>`",
            )


def is_zero_sized(cx: LateContext, ty: Ty) -> Optional[bool]:
    """Return whether ``ty`` has no size, or ``None`` when its layout is unknown."""

    if not is_normalizable(ty):
        return None
    size = cx.layout_size(ty)
    if size is None:
        return None
    return size == 0


def get_pass() -> LintPass:
    return ZstQuery()
