"""The typed program tree handed to the linter by the host frontend.

Two families of types live here. *Semantic* types (``Ty``) are what type
checking resolved an expression or type reference to; they always carry the
canonical definition path, however the type was imported. *HIR* types
(``HirTy``) are the type references as written in source, with spans, and the
semantic type they resolved to in ``res``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from .paths import TypePath
from .span import Span

PRIMITIVES = frozenset(
    {
        "bool",
        "char",
        "str",
        "u8",
        "u16",
        "u32",
        "u64",
        "u128",
        "usize",
        "i8",
        "i16",
        "i32",
        "i64",
        "i128",
        "isize",
        "f32",
        "f64",
    }
)


# ----------------------------------------------------------------------
# Semantic types
# ----------------------------------------------------------------------
class Ty:
    """Base class for semantic types."""

    def walk(self) -> Iterator["Ty"]:
        yield self


@dataclass(frozen=True)
class Adt(Ty):
    """A nominal type (struct, enum, primitive) and its generic arguments."""

    path: TypePath
    args: Tuple[Ty, ...] = ()

    def walk(self) -> Iterator[Ty]:
        yield self
        for arg in self.args:
            yield from arg.walk()

    def __str__(self) -> str:
        if self.args:
            return f"{self.path.name}<{', '.join(str(arg) for arg in self.args)}>"
        return self.path.name


@dataclass(frozen=True)
class Ref(Ty):
    inner: Ty
    mutable: bool = False

    def walk(self) -> Iterator[Ty]:
        yield self
        yield from self.inner.walk()

    def __str__(self) -> str:
        return f"&mut {self.inner}" if self.mutable else f"&{self.inner}"


@dataclass(frozen=True)
class Tup(Ty):
    """A tuple type; the empty tuple is the unit type ``()``."""

    elems: Tuple[Ty, ...] = ()

    def walk(self) -> Iterator[Ty]:
        yield self
        for elem in self.elems:
            yield from elem.walk()

    @property
    def is_unit(self) -> bool:
        return not self.elems

    def __str__(self) -> str:
        if len(self.elems) == 1:
            return f"({self.elems[0]},)"
        return f"({', '.join(str(elem) for elem in self.elems)})"


@dataclass(frozen=True)
class Param(Ty):
    """A generic parameter that has not been substituted."""

    name: str

    def __str__(self) -> str:
        return self.name


UNIT = Tup(())

_TOKEN = re.compile(r"\s*(::|&|<|>|\(|\)|,|'[A-Za-z_][A-Za-z0-9_]*|[A-Za-z_][A-Za-z0-9_]*)")


def _tokenize(text: str) -> List[str]:
    tokens: List[str] = []
    position = 0
    stripped = text.rstrip()
    while position < len(stripped):
        match = _TOKEN.match(stripped, position)
        if match is None:
            raise ValueError(f"cannot parse type {text!r} at offset {position}")
        tokens.append(match.group(1))
        position = match.end()
    return tokens


class _TyParser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.position = 0

    def peek(self) -> Optional[str]:
        return self.tokens[self.position] if self.position < len(self.tokens) else None

    def take(self, expected: Optional[str] = None) -> str:
        token = self.peek()
        if token is None or (expected is not None and token != expected):
            raise ValueError(f"cannot parse type {self.text!r}: expected {expected or 'more input'}")
        self.position += 1
        return token

    def parse(self) -> Ty:
        ty = self.parse_ty()
        if self.peek() is not None:
            raise ValueError(f"cannot parse type {self.text!r}: trailing {self.peek()!r}")
        return ty

    def parse_ty(self) -> Ty:
        token = self.peek()
        if token == "&":
            self.take("&")
            if self.peek() is not None and self.peek().startswith("'"):
                self.take()
            mutable = self.peek() == "mut"
            if mutable:
                self.take("mut")
            return Ref(self.parse_ty(), mutable)
        if token == "(":
            self.take("(")
            elems: List[Ty] = []
            while self.peek() != ")":
                elems.append(self.parse_ty())
                if self.peek() == ",":
                    self.take(",")
                elif self.peek() != ")":
                    raise ValueError(f"cannot parse type {self.text!r}: expected `,` or `)`")
            self.take(")")
            return Tup(tuple(elems))
        return self.parse_path()

    def parse_path(self) -> Ty:
        segments = [self.take()]
        while self.peek() == "::":
            self.take("::")
            segments.append(self.take())
        args: List[Ty] = []
        if self.peek() == "<":
            self.take("<")
            while self.peek() != ">":
                if self.peek() is not None and self.peek().startswith("'"):
                    # Lifetimes carry no identity.
                    self.take()
                else:
                    args.append(self.parse_ty())
                if self.peek() == ",":
                    self.take(",")
                elif self.peek() != ">":
                    raise ValueError(f"cannot parse type {self.text!r}: expected `,` or `>`")
            self.take(">")
        if len(segments) == 1 and segments[0] not in PRIMITIVES and not args:
            return Param(segments[0])
        return Adt(TypePath(segments), tuple(args))


def parse_ty(text: str) -> Ty:
    """Build a semantic type from its fully qualified textual form.

    ``bevy_ecs::event::Events<demo::MyEvent>`` becomes an ``Adt`` with one
    argument. A lone name that is not a primitive (``T``) is a generic
    parameter.
    """

    return _TyParser(text).parse()


# ----------------------------------------------------------------------
# HIR type references
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Lifetime:
    name: str
    span: Optional[Span] = None


@dataclass(frozen=True)
class PathSegment:
    name: str
    args: Optional[Tuple[Union["HirTy", Lifetime], ...]] = None
    span: Optional[Span] = None


@dataclass(frozen=True)
class HirTy:
    span: Span
    res: Ty

    def children(self) -> Tuple["HirTy", ...]:
        return ()


@dataclass(frozen=True)
class PathTy(HirTy):
    segments: Tuple[PathSegment, ...] = ()

    def children(self) -> Tuple[HirTy, ...]:
        return tuple(
            arg
            for segment in self.segments
            for arg in (segment.args or ())
            if isinstance(arg, HirTy)
        )


@dataclass(frozen=True)
class RefTy(HirTy):
    inner: Optional[HirTy] = None
    mutable: bool = False

    def children(self) -> Tuple[HirTy, ...]:
        return (self.inner,) if self.inner is not None else ()


@dataclass(frozen=True)
class TupleTy(HirTy):
    elems: Tuple[HirTy, ...] = ()

    def children(self) -> Tuple[HirTy, ...]:
        return self.elems


@dataclass(frozen=True)
class InferTy(HirTy):
    """The ``_`` placeholder type."""


# ----------------------------------------------------------------------
# Expressions and statements
# ----------------------------------------------------------------------
@dataclass
class Expr:
    span: Span
    ty: Ty

    def children(self) -> List["Expr"]:
        return []


@dataclass
class Lit(Expr):
    value: str = ""


@dataclass
class PathExpr(Expr):
    """A path in expression position, such as ``Events::<MyEvent>::default``.

    ``segments`` is empty when the frontend did not record the written path.
    """

    path: str = ""
    segments: Tuple[PathSegment, ...] = ()


@dataclass
class Call(Expr):
    func: Optional[Expr] = None
    args: List[Expr] = field(default_factory=list)

    def children(self) -> List[Expr]:
        return ([self.func] if self.func is not None else []) + list(self.args)


@dataclass
class MethodCall(Expr):
    """``receiver.segment(args)``; ``method_span`` runs from the method name to the call's end."""

    receiver: Optional[Expr] = None
    segment: PathSegment = field(default_factory=lambda: PathSegment(""))
    args: List[Expr] = field(default_factory=list)
    method_span: Optional[Span] = None

    @property
    def method(self) -> str:
        return self.segment.name

    def children(self) -> List[Expr]:
        return ([self.receiver] if self.receiver is not None else []) + list(self.args)


@dataclass
class Stmt:
    span: Span


@dataclass
class Let(Stmt):
    name: str = "_"
    init: Optional[Expr] = None
    ty_ann: Optional[HirTy] = None


@dataclass
class Semi(Stmt):
    """An expression followed by ``;``."""

    expr: Optional[Expr] = None


@dataclass
class ExprStmt(Stmt):
    """A block-like expression in statement position without ``;``."""

    expr: Optional[Expr] = None


@dataclass
class Block(Expr):
    stmts: List[Stmt] = field(default_factory=list)
    tail: Optional[Expr] = None

    def children(self) -> List[Expr]:
        exprs: List[Expr] = []
        for stmt in self.stmts:
            if isinstance(stmt, Let) and stmt.init is not None:
                exprs.append(stmt.init)
            elif isinstance(stmt, (Semi, ExprStmt)) and stmt.expr is not None:
                exprs.append(stmt.expr)
        if self.tail is not None:
            exprs.append(self.tail)
        return exprs


@dataclass
class FnParam:
    name: str
    ty: HirTy


@dataclass
class Closure(Expr):
    params: List[FnParam] = field(default_factory=list)
    body: Optional[Expr] = None

    def children(self) -> List[Expr]:
        return [self.body] if self.body is not None else []


# ----------------------------------------------------------------------
# Items
# ----------------------------------------------------------------------
@dataclass
class Item:
    name: str
    span: Span


@dataclass
class FnDecl(Item):
    """A function. ``output`` is ``None`` when no return type is written; ``output_span``
    is then the empty span where ``-> T`` would go."""

    params: List[FnParam] = field(default_factory=list)
    output: Optional[HirTy] = None
    output_span: Optional[Span] = None
    body: Optional[Block] = None
    entrypoint: bool = False


@dataclass
class FieldDecl:
    name: str
    ty: HirTy


@dataclass
class StructDecl(Item):
    fields: List[FieldDecl] = field(default_factory=list)


@dataclass
class Module(Item):
    items: List[Item] = field(default_factory=list)


@dataclass
class Crate:
    name: str
    items: List[Item] = field(default_factory=list)
    source_path: Optional[str] = None
