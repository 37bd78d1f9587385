"""Detect ``fn main()`` entrypoints that call ``App::run()`` but do not return ``AppExit``.

``AppExit`` tells whether the app exited successfully or with an error.
Returning it from ``main`` sets the process exit code::

    fn main() { App::new().run(); }            // flagged
    fn main() -> AppExit { App::new().run() }  // use instead

Entrypoints that already return something other than ``()`` are left alone.
"""

from __future__ import annotations

from functools import partial
from typing import List, Optional, Tuple

from bevy_lint import paths
from bevy_lint.dispatch import LateContext
from bevy_lint.registry import Lint
from bevy_lint.result import Applicability, Diagnostic
from bevy_lint.severity import Level
from bevy_lint.span import Span
from bevy_lint.tree import Block, FnDecl, MethodCall, Semi, Tup, TupleTy
from bevy_lint.utils.ty import match_type
from bevy_lint.utils.visitors import walk_exprs

from . import LintPass

MAIN_RETURN_WITHOUT_APPEXIT = Lint(
    "main_return_without_appexit",
    Level.WARN,
    "an entrypoint that calls `App::run()` does not return `AppExit`",
    groups=("pedantic",),
)


class MainReturnWithoutAppExit:
    lints = (MAIN_RETURN_WITHOUT_APPEXIT,)

    def check_fn(self, cx: LateContext, fn: FnDecl) -> None:
        if not fn.entrypoint or fn.body is None:
            return
        return_edit = self._return_type_edit(cx, fn)
        if return_edit is None:
            return

        for call in self._app_run_calls(cx, fn.body):
            cx.span_lint_and_then(
                MAIN_RETURN_WITHOUT_APPEXIT,
                call.span,
                MAIN_RETURN_WITHOUT_APPEXIT.desc,
                partial(self._suggest, return_edit, self._trailing_semi(fn.body, call)),
            )

    def _suggest(self, return_edit: Tuple[Span, str], semi_span: Optional[Span], diagnostic: Diagnostic) -> None:
        return_span, replacement = return_edit
        diagnostic.add_suggestion(return_span, replacement, Applicability.MAYBE_INCORRECT)
        if semi_span is not None:
            diagnostic.add_suggestion(
                semi_span,
                "",
                Applicability.MAYBE_INCORRECT,
                "remove the `;` to return the `AppExit`",
            )

    def _return_type_edit(self, cx: LateContext, fn: FnDecl) -> Optional[Tuple[Span, str]]:
        """The edit that makes ``fn`` return ``AppExit``, or ``None`` if it returns a non-unit type.

        A missing return type gets ``-> AppExit`` inserted. A written ``()`` is
        replaced by ``AppExit``, keeping its arrow.
        """

        if fn.output is None:
            if fn.output_span is not None:
                return fn.output_span, "-> AppExit"
            return Span(fn.body.span.lo, fn.body.span.lo), "-> AppExit"
        if isinstance(fn.output, TupleTy) and not fn.output.elems:
            return fn.output.span, "AppExit"
        resolved = cx.lower_ty(fn.output)
        if isinstance(resolved, Tup) and resolved.is_unit:
            return fn.output.span, "AppExit"
        return None

    def _app_run_calls(self, cx: LateContext, body: Block) -> List[MethodCall]:
        return [
            expr
            for expr in walk_exprs(body)
            if isinstance(expr, MethodCall)
            and expr.method == "run"
            and expr.receiver is not None
            and match_type(cx.expr_ty(expr.receiver), paths.APP)
        ]

    def _trailing_semi(self, body: Block, call: MethodCall) -> Optional[Span]:
        """The ``;`` after ``call`` when it is the last statement of ``body``."""

        if body.tail is not None or not body.stmts:
            return None
        last = body.stmts[-1]
        if isinstance(last, Semi) and last.expr is call and last.span.hi > call.span.hi:
            return Span(call.span.hi, last.span.hi)
        return None


def get_pass() -> LintPass:
    return MainReturnWithoutAppExit()
