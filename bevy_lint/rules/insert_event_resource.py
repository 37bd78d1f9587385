"""Detect ``Events<T>`` inserted as a plain resource instead of registered with ``App::add_event()``.

Inserting the ``Events<T>`` resource does not run the rest of event
registration, so the events are never updated. ``App::add_event::<T>()``
does the whole job::

    App::new().init_resource::<Events<MyEvent>>().run();   // flagged
    App::new().add_event::<MyEvent>().run();               // use instead
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from bevy_lint import paths
from bevy_lint.dispatch import LateContext
from bevy_lint.registry import Lint
from bevy_lint.result import Applicability
from bevy_lint.severity import Level
from bevy_lint.span import Span
from bevy_lint.tree import Adt, Call, Expr, HirTy, MethodCall, PathExpr, PathTy, Ty
from bevy_lint.utils.ty import generic_type_at, match_type, peel_refs

from . import LintPass

INSERT_EVENT_RESOURCE = Lint(
    "insert_event_resource",
    Level.DENY,
    "called `App::insert_resource(Events<T>)` or `App::init_resource::<Events<T>>()` "
    "instead of `App::add_event::<T>()`",
    groups=("suspicious",),
)

PLACEHOLDER = "T"
HELP = "inserting an `Events` resource does not fully setup that event"


class InsertEventResource:
    """Flag ``insert_resource``/``init_resource`` calls that insert ``Events<T>``."""

    lints = (INSERT_EVENT_RESOURCE,)

    def check_expr(self, cx: LateContext, expr: Expr) -> None:
        if not isinstance(expr, MethodCall) or expr.receiver is None:
            return
        # The receiver may be `App` or `&mut App`.
        if not match_type(cx.expr_ty(expr.receiver), paths.APP):
            return

        method_span = expr.method_span or expr.span
        if expr.method == "insert_resource":
            self._check_insert_resource(cx, expr.args, method_span)
        elif expr.method == "init_resource":
            self._check_init_resource(cx, expr, method_span)

    def _check_insert_resource(self, cx: LateContext, args: Sequence[Expr], method_span: Span) -> None:
        if len(args) != 1:
            return
        ty = cx.expr_ty(args[0])
        if not match_type(ty, paths.EVENTS):
            return

        written = self._turbofish_event_ty(args[0])
        if written is not None:
            event_ty, applicability = cx.snippet_with_applicability(
                written.span, PLACEHOLDER, Applicability.MACHINE_APPLICABLE
            )
        else:
            event_ty, applicability = self._event_ty_from_type(peel_refs(ty))
        cx.span_lint_and_sugg(
            INSERT_EVENT_RESOURCE,
            method_span,
            "called `App::insert_resource(Events<T>)` instead of `App::add_event::<T>()`",
            HELP,
            f"add_event::<{event_ty}>()",
            applicability,
        )

    def _check_init_resource(self, cx: LateContext, expr: MethodCall, method_span: Span) -> None:
        # `init_resource` takes exactly one type argument.
        type_args = expr.segment.args or ()
        if len(type_args) != 1 or not isinstance(type_args[0], HirTy):
            return
        resource_hir_ty = type_args[0]
        if not match_type(cx.lower_ty(resource_hir_ty), paths.EVENTS):
            return

        event_ty, applicability = self._event_ty_from_hir(cx, resource_hir_ty)
        cx.span_lint_and_sugg(
            INSERT_EVENT_RESOURCE,
            method_span,
            "called `App::init_resource::<Events<T>>()` instead of `App::add_event::<T>()`",
            HELP,
            f"add_event::<{event_ty}>()",
            applicability,
        )

    def _turbofish_event_ty(self, arg: Expr) -> Optional[HirTy]:
        """Find ``T`` in an argument written as ``Events::<T>::default()`` or ``Events::<T>::new()``."""

        if not isinstance(arg, Call) or not isinstance(arg.func, PathExpr):
            return None
        for segment in arg.func.segments:
            if segment.name != paths.EVENTS.name or not segment.args:
                continue
            type_args = [ty for ty in segment.args if isinstance(ty, HirTy)]
            return type_args[0] if len(type_args) == 1 else None
        return None

    def _event_ty_from_type(self, events_ty: Ty) -> Tuple[str, Applicability]:
        """Print ``T`` for the semantic type ``Events<T>``.

        The printed name is not qualified, so it may not be in scope where the
        suggestion lands.
        """

        if not isinstance(events_ty, Adt) or not events_ty.args:
            return PLACEHOLDER, Applicability.HAS_PLACEHOLDERS
        return str(events_ty.args[0]), Applicability.MAYBE_INCORRECT

    def _event_ty_from_hir(self, cx: LateContext, events_hir_ty: HirTy) -> Tuple[str, Applicability]:
        """Recover the source text of ``T`` from the written type ``Events<T>``.

        Works on a best-effort basis: an alias, a path without generic
        arguments, or an unavailable snippet gives the placeholder ``T`` with
        ``HasPlaceholders``.
        """

        if not isinstance(events_hir_ty, PathTy):
            return PLACEHOLDER, Applicability.HAS_PLACEHOLDERS
        args = events_hir_ty.segments[-1].args if events_hir_ty.segments else None
        if not args or len(args) != 1:
            return PLACEHOLDER, Applicability.HAS_PLACEHOLDERS
        event_hir_ty = generic_type_at(events_hir_ty, 0)
        if event_hir_ty is None:
            return PLACEHOLDER, Applicability.HAS_PLACEHOLDERS
        return cx.snippet_with_applicability(event_hir_ty.span, PLACEHOLDER, Applicability.MACHINE_APPLICABLE)


def get_pass() -> LintPass:
    return InsertEventResource()
