"""Single-pass traversal of the typed tree, fanning nodes out to lint passes."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .config import LintConfig
from .errors import LintPassError
from .host import Host
from .registry import Lint
from .result import Applicability, Diagnostic, LintReport
from .severity import Level
from .span import Span
from .tree import (
    Block,
    Closure,
    Crate,
    Expr,
    ExprStmt,
    FnDecl,
    HirTy,
    Item,
    Let,
    MethodCall,
    Module,
    Semi,
    Stmt,
    StructDecl,
    Ty,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")

HOOKS: Tuple[str, ...] = (
    "check_crate",
    "check_item",
    "check_fn",
    "check_stmt",
    "check_expr",
    "check_ty",
)


class LateContext:
    """What a lint pass sees while visiting a node: type queries, config and diagnostics."""

    def __init__(
        self,
        host: Host,
        config: LintConfig,
        levels: Mapping[str, Level],
        report: Optional[LintReport] = None,
    ) -> None:
        self.host = host
        self.config = config
        self.levels = dict(levels)
        self.report = report if report is not None else LintReport()

    # ------------------------------------------------------------------
    # Type and source queries
    # ------------------------------------------------------------------
    def expr_ty(self, expr: Expr) -> Ty:
        return self.host.expr_ty(expr)

    def lower_ty(self, hir_ty: HirTy) -> Ty:
        return self.host.lower_ty(hir_ty)

    def layout_size(self, ty: Ty) -> Optional[int]:
        return self.host.layout_size(ty)

    def snippet(self, span: Span) -> Optional[str]:
        return self.host.snippet(span)

    def snippet_with_applicability(
        self,
        span: Span,
        default: str,
        applicability: Applicability,
    ) -> Tuple[str, Applicability]:
        """Return the source under ``span``, or ``default`` with a downgraded applicability."""

        text = self.snippet(span)
        if text is None:
            return default, applicability.downgrade(Applicability.HAS_PLACEHOLDERS)
        return text, applicability

    def with_config(self, lint: Lint, func: Callable[[Mapping[str, Any]], R]) -> R:
        return self.config.with_config(lint.name, func)

    def level_of(self, lint: Lint) -> Level:
        return self.levels.get(lint.name, lint.default_level)

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------
    def span_lint_and_then(
        self,
        lint: Lint,
        span: Span,
        message: str,
        decorate: Optional[Callable[[Diagnostic], None]] = None,
    ) -> Optional[Diagnostic]:
        level = self.level_of(lint)
        if level is Level.ALLOW:
            return None
        diagnostic = Diagnostic(lint=lint.name, level=level, span=span, message=message)
        if decorate is not None:
            decorate(diagnostic)
        self.report.add_diagnostic(diagnostic)
        return diagnostic

    def span_lint(self, lint: Lint, span: Span, message: str) -> Optional[Diagnostic]:
        return self.span_lint_and_then(lint, span, message)

    def span_lint_and_help(self, lint: Lint, span: Span, message: str, help: str) -> Optional[Diagnostic]:
        def decorate(diagnostic: Diagnostic) -> None:
            diagnostic.help = help

        return self.span_lint_and_then(lint, span, message, decorate)

    def span_lint_and_sugg(
        self,
        lint: Lint,
        span: Span,
        message: str,
        help: str,
        replacement: str,
        applicability: Applicability,
    ) -> Optional[Diagnostic]:
        def decorate(diagnostic: Diagnostic) -> None:
            diagnostic.help = help
            diagnostic.add_suggestion(span, replacement, applicability, help)

        return self.span_lint_and_then(lint, span, message, decorate)


class Dispatcher:
    """Walk a crate once, calling every pass's hooks at every node.

    A pass takes part in a hook by defining the method (``check_expr`` and so
    on). At each node the interested passes run in registration order. The
    walk is pre-order and follows source order.
    """

    def __init__(self, passes: Sequence[object]) -> None:
        self.passes = list(passes)
        self._hooks: Dict[str, List[Callable[..., None]]] = {
            hook: [getattr(lint_pass, hook) for lint_pass in self.passes if callable(getattr(lint_pass, hook, None))]
            for hook in HOOKS
        }

    def interested(self, hook: str) -> int:
        return len(self._hooks[hook])

    def run(self, cx: LateContext, crate: Crate) -> LintReport:
        self._fire("check_crate", cx, crate)
        for item in crate.items:
            self.visit_item(cx, item)
        return cx.report

    def _fire(self, hook: str, cx: LateContext, node: object) -> None:
        for func in self._hooks[hook]:
            try:
                func(cx, node)
            except LintPassError as exc:
                owner = type(getattr(func, "__self__", func)).__name__
                logger.warning("%s.%s failed on %s: %s", owner, hook, type(node).__name__, exc)

    # ------------------------------------------------------------------
    # Walk
    # ------------------------------------------------------------------
    def visit_item(self, cx: LateContext, item: Item) -> None:
        self._fire("check_item", cx, item)
        if isinstance(item, FnDecl):
            self._fire("check_fn", cx, item)
            for param in item.params:
                self.visit_ty(cx, param.ty)
            if item.output is not None:
                self.visit_ty(cx, item.output)
            if item.body is not None:
                self.visit_expr(cx, item.body)
        elif isinstance(item, StructDecl):
            for field in item.fields:
                self.visit_ty(cx, field.ty)
        elif isinstance(item, Module):
            for child in item.items:
                self.visit_item(cx, child)

    def visit_stmt(self, cx: LateContext, stmt: Stmt) -> None:
        self._fire("check_stmt", cx, stmt)
        if isinstance(stmt, Let):
            if stmt.ty_ann is not None:
                self.visit_ty(cx, stmt.ty_ann)
            if stmt.init is not None:
                self.visit_expr(cx, stmt.init)
        elif isinstance(stmt, (Semi, ExprStmt)) and stmt.expr is not None:
            self.visit_expr(cx, stmt.expr)

    def visit_expr(self, cx: LateContext, expr: Expr) -> None:
        self._fire("check_expr", cx, expr)
        if isinstance(expr, Block):
            for stmt in expr.stmts:
                self.visit_stmt(cx, stmt)
            if expr.tail is not None:
                self.visit_expr(cx, expr.tail)
            return
        if isinstance(expr, MethodCall):
            if expr.receiver is not None:
                self.visit_expr(cx, expr.receiver)
            for arg in expr.segment.args or ():
                if isinstance(arg, HirTy):
                    self.visit_ty(cx, arg)
            for arg in expr.args:
                self.visit_expr(cx, arg)
            return
        if isinstance(expr, Closure):
            for param in expr.params:
                self.visit_ty(cx, param.ty)
        for child in expr.children():
            self.visit_expr(cx, child)

    def visit_ty(self, cx: LateContext, hir_ty: HirTy) -> None:
        self._fire("check_ty", cx, hir_ty)
        for child in hir_ty.children():
            self.visit_ty(cx, child)
