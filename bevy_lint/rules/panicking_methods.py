"""Detect ``Query`` and ``World`` methods that panic when a non-panicking alternative exists.

``world.resource::<R>()`` panics when ``R`` is missing, while
``world.get_resource::<R>()`` returns an ``Option`` the caller can handle.

Lint parameter ``ignore``: method names that should not be reported::

    [package.metadata.bevy_lint]
    panicking_world_methods = { level = "warn", ignore = ["resource"] }
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from bevy_lint import paths
from bevy_lint.dispatch import LateContext
from bevy_lint.paths import TypePath
from bevy_lint.registry import Lint
from bevy_lint.severity import Level
from bevy_lint.tree import Expr, HirTy, MethodCall
from bevy_lint.utils.ty import match_type

from . import LintPass

PANICKING_QUERY_METHODS = Lint(
    "panicking_query_methods",
    Level.ALLOW,
    "called a `Query` method that can panic when a non-panicking alternative exists",
    groups=("restriction",),
)

PANICKING_WORLD_METHODS = Lint(
    "panicking_world_methods",
    Level.ALLOW,
    "called a `World` method that can panic when a non-panicking alternative exists",
    groups=("restriction",),
)

QUERY_ALTERNATIVES: Dict[str, str] = {
    "single": "get_single",
    "single_mut": "get_single_mut",
    "many": "get_many",
    "many_mut": "get_many_mut",
}

WORLD_ALTERNATIVES: Dict[str, str] = {
    "entity": "get_entity",
    "entity_mut": "get_entity_mut",
    "many_entities": "get_many_entities",
    "many_entities_mut": "get_many_entities_mut",
    "resource": "get_resource",
    "resource_mut": "get_resource_mut",
    "resource_ref": "get_resource_ref",
    "non_send_resource": "get_non_send_resource",
    "non_send_resource_mut": "get_non_send_resource_mut",
    "run_schedule": "try_run_schedule",
    "schedule_scope": "try_schedule_scope",
}

TARGETS = (
    (paths.QUERY, PANICKING_QUERY_METHODS, QUERY_ALTERNATIVES),
    (paths.WORLD, PANICKING_WORLD_METHODS, WORLD_ALTERNATIVES),
)


class PanickingMethods:
    lints = (PANICKING_QUERY_METHODS, PANICKING_WORLD_METHODS)

    def check_expr(self, cx: LateContext, expr: Expr) -> None:
        if not isinstance(expr, MethodCall) or expr.receiver is None:
            return
        receiver_ty = cx.expr_ty(expr.receiver)
        for path, lint, alternatives in TARGETS:
            if not match_type(receiver_ty, path):
                continue
            alternative = alternatives.get(expr.method)
            if alternative is None or expr.method in cx.with_config(lint, ignored_methods):
                return
            cx.span_lint_and_help(lint, expr.span, lint.desc, self._help(cx, expr, path, alternative))
            return

    def _help(self, cx: LateContext, expr: MethodCall, path: TypePath, alternative: str) -> str:
        call = self._rewrite_call(cx, expr, alternative)
        if call is None:
            return f"use `{path.name}::{alternative}()` instead"
        return f"use `{call}`"

    def _rewrite_call(self, cx: LateContext, expr: MethodCall, alternative: str) -> Optional[str]:
        receiver = cx.snippet(expr.receiver.span)
        if receiver is None:
            return None

        generics = ""
        if expr.segment.args:
            texts: List[str] = []
            for arg in expr.segment.args:
                if not isinstance(arg, HirTy):
                    continue
                text = cx.snippet(arg.span)
                if text is None:
                    return None
                texts.append(text)
            if texts:
                generics = f"::<{', '.join(texts)}>"

        args: List[str] = []
        for arg in expr.args:
            text = cx.snippet(arg.span)
            if text is None:
                return None
            args.append(text)
        return f"{receiver}.{alternative}{generics}({', '.join(args)})"


def ignored_methods(params: Mapping[str, Any]) -> FrozenSet[str]:
    value = params.get("ignore", ())
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return frozenset()
    return frozenset(str(item) for item in value)


def get_pass() -> LintPass:
    return PanickingMethods()
