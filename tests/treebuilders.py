"""Small helpers for building typed trees over a snippet of Rust source."""

from bevy_lint.driver import Linter
from bevy_lint.span import Span
from bevy_lint.tree import (
    Block,
    Call,
    Crate,
    FnDecl,
    Lifetime,
    MethodCall,
    PathExpr,
    PathSegment,
    PathTy,
    Semi,
    parse_ty,
)
from bevy_lint.utils.program import Program

APP = "bevy_app::app::App"


def span_of(text, needle, occurrence=0):
    start = -1
    for _ in range(occurrence + 1):
        start = text.index(needle, start + 1)
    return Span(start, start + len(needle))


def path_ty(text, needle, res, args=None, occurrence=0):
    """A written path type; ``args`` apply to its last segment."""

    name = needle.split("<", 1)[0].split("::")[-1]
    segment = PathSegment(name, tuple(args) if args is not None else None)
    return PathTy(span=span_of(text, needle, occurrence), res=parse_ty(res), segments=(segment,))


def elided():
    return Lifetime("'_")


def app_new(text, occurrence=0):
    """``App::new()`` as a call expression."""

    call_span = span_of(text, "App::new()", occurrence)
    func = PathExpr(span=Span(call_span.lo, call_span.hi - 2), ty=parse_ty(APP), path="App::new")
    return Call(span=call_span, ty=parse_ty(APP), func=func)


def method_call(text, receiver, name, ty, args=(), generics=None, end=None):
    """``receiver.name(args)``.

    The call ends at the first ``)`` after the method name, or at the last
    character of ``end`` when given (``end`` must finish with ``)``).
    """

    name_start = text.index(f".{name}", receiver.span.hi) + 1
    if end is None:
        close = text.index(")", name_start)
    else:
        close = text.index(end, name_start) + len(end) - 1
    span = Span(receiver.span.lo, close + 1)
    return MethodCall(
        span=span,
        ty=parse_ty(ty),
        receiver=receiver,
        segment=PathSegment(name, tuple(generics) if generics is not None else None),
        args=list(args),
        method_span=Span(name_start, close + 1),
    )


def main_fn(text, stmts=(), tail=None, output=None, entrypoint=True, name="main"):
    fn_span = Span(text.index(f"fn {name}"), len(text.rstrip()))
    body_lo = text.index("{", fn_span.lo)
    head_end = text.index(")", fn_span.lo) + 1
    return FnDecl(
        name=name,
        span=fn_span,
        output=output,
        output_span=Span(head_end, head_end) if output is None else None,
        body=Block(span=Span(body_lo, fn_span.hi), ty=parse_ty("()"), stmts=list(stmts), tail=tail),
        entrypoint=entrypoint,
    )


def semi(text, expr):
    semi_at = text.index(";", expr.span.hi)
    return Semi(span=Span(expr.span.lo, semi_at + 1), expr=expr)


def make_program(text, items, layouts=None):
    return Program(crate=Crate(name="demo", items=list(items)), source_text=text, layouts=dict(layouts or {}))


def run_lints(program, toggles=(), linter=None):
    linter = linter or Linter()
    return linter.lint(program, toggles=toggles)
