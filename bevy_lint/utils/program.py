"""Load typed program dumps written by the host frontend.

A dump is a YAML (or JSON) mapping::

    crate: demo
    source: src/main.rs          # relative to the dump file
    layouts:                     # byte sizes the frontend computed
      demo::Marker: 0
    items:
      - fn: main
        entrypoint: true
        span: [0, 40]
        output: null
        output_span: [9, 9]
        body: {block: [...], span: [10, 40], ty: "()"}

Every expression has a ``span`` and a ``ty`` (its type-checked semantic type,
written fully qualified). Type references have a ``span`` and a ``res``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from bevy_lint.errors import ProgramLoadError
from bevy_lint.span import SourceMap, Span
from bevy_lint.tree import (
    UNIT,
    Block,
    Call,
    Closure,
    Crate,
    Expr,
    ExprStmt,
    FieldDecl,
    FnDecl,
    FnParam,
    HirTy,
    InferTy,
    Item,
    Let,
    Lifetime,
    Lit,
    MethodCall,
    Module,
    PathExpr,
    PathSegment,
    PathTy,
    RefTy,
    Semi,
    Stmt,
    StructDecl,
    TupleTy,
    Ty,
    parse_ty,
)

from .fileio import read_text_file, read_yaml_file


@dataclass
class Program:
    """A type-checked crate together with its source text and layout table."""

    crate: Crate
    source_text: str = ""
    layouts: Dict[str, int] = field(default_factory=dict)

    @property
    def source_path(self) -> Optional[Path]:
        return Path(self.crate.source_path) if self.crate.source_path else None

    def source_map(self) -> SourceMap:
        return SourceMap(self.source_text, self.crate.source_path or "<unknown>")


def load_program(path: Path) -> Program:
    """Load a program dump into a ``Program``."""

    try:
        data = read_yaml_file(path)
    except yaml.YAMLError as exc:
        raise ProgramLoadError(f"Program dump at {path} is not valid YAML: {exc}") from exc
    if data is None:
        raise ProgramLoadError(f"Program dump not found: {path}")
    if not isinstance(data, dict):
        raise ProgramLoadError(f"Program dump at {path} is not a mapping")

    source = data.get("source")
    source_path: Optional[Path] = None
    if source is not None:
        source_path = Path(str(source))
        if not source_path.is_absolute():
            source_path = path.parent / source_path
    text = data.get("text")
    if text is None:
        text = read_text_file(source_path) if source_path is not None else ""

    layouts = data.get("layouts") or {}
    if not isinstance(layouts, dict) or not all(isinstance(v, int) for v in layouts.values()):
        raise ProgramLoadError(f"`layouts` in {path} must map type paths to byte sizes")

    try:
        items = [build_item(item) for item in _list(data, "items")]
    except KeyError as exc:
        raise ProgramLoadError(f"missing key {exc} in program dump {path}") from exc
    crate = Crate(
        name=str(data.get("crate", path.stem)),
        items=items,
        source_path=str(source_path) if source_path is not None else None,
    )
    return Program(crate=crate, source_text=str(text), layouts={str(k): v for k, v in layouts.items()})


# ----------------------------------------------------------------------
# Builders
# ----------------------------------------------------------------------
def _span(data: Dict[str, Any], key: str = "span") -> Span:
    value = data.get(key)
    try:
        return Span.from_seq(value)
    except (TypeError, ValueError) as exc:
        raise ProgramLoadError(f"invalid `{key}` {value!r} in {_describe(data)}") from exc


def _ty(data: Dict[str, Any], key: str) -> Ty:
    value = data.get(key)
    if value is None:
        return UNIT
    try:
        return parse_ty(str(value))
    except ValueError as exc:
        raise ProgramLoadError(str(exc)) from exc


def _list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ProgramLoadError(f"`{key}` must be a list in {_describe(data)}")
    return value


def _mapping(value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ProgramLoadError(f"expected a mapping, found {value!r}")
    return value


def _describe(data: Dict[str, Any]) -> str:
    keys = ", ".join(str(key) for key in list(data)[:3])
    return f"node {{{keys}, ...}}"


def build_item(value: Any) -> Item:
    data = _mapping(value)
    if "fn" in data:
        body = build_expr(data["body"]) if data.get("body") is not None else None
        if body is not None and not isinstance(body, Block):
            raise ProgramLoadError(f"body of fn `{data['fn']}` must be a block")
        return FnDecl(
            name=str(data["fn"]),
            span=_span(data),
            params=[_param(param) for param in _list(data, "params")],
            output=build_hir_ty(data["output"]) if data.get("output") is not None else None,
            output_span=_span(data, "output_span") if data.get("output_span") is not None else None,
            body=body,
            entrypoint=bool(data.get("entrypoint", False)),
        )
    if "struct" in data:
        return StructDecl(
            name=str(data["struct"]),
            span=_span(data),
            fields=[FieldDecl(str(_mapping(f)["name"]), build_hir_ty(f["ty"])) for f in _list(data, "fields")],
        )
    if "mod" in data:
        return Module(
            name=str(data["mod"]),
            span=_span(data),
            items=[build_item(item) for item in _list(data, "items")],
        )
    raise ProgramLoadError(f"unknown item kind in {_describe(data)}")


def _param(value: Any) -> FnParam:
    data = _mapping(value)
    return FnParam(name=str(data.get("name", "_")), ty=build_hir_ty(data["ty"]))


def build_hir_ty(value: Any) -> HirTy:
    data = _mapping(value)
    span = _span(data)
    res = _ty(data, "res")
    if "path" in data:
        names = data["path"]
        if isinstance(names, str):
            names = names.split("::")
        args = data.get("args")
        segments = [PathSegment(str(name)) for name in names]
        if args is not None:
            segments[-1] = PathSegment(segments[-1].name, tuple(_generic_arg(arg) for arg in args))
        return PathTy(span=span, res=res, segments=tuple(segments))
    if "ref" in data:
        return RefTy(span=span, res=res, inner=build_hir_ty(data["ref"]), mutable=bool(data.get("mut", False)))
    if "tuple" in data:
        return TupleTy(span=span, res=res, elems=tuple(build_hir_ty(elem) for elem in _list(data, "tuple")))
    if "infer" in data:
        return InferTy(span=span, res=res)
    raise ProgramLoadError(f"unknown type reference kind in {_describe(data)}")


def _generic_arg(value: Any) -> HirTy | Lifetime:
    if isinstance(value, str) and value.startswith("'"):
        return Lifetime(value)
    data = _mapping(value)
    if "lifetime" in data:
        return Lifetime(str(data["lifetime"]), _span(data) if "span" in data else None)
    return build_hir_ty(data)


def _path_segment(value: Any) -> PathSegment:
    if isinstance(value, str):
        return PathSegment(value)
    data = _mapping(value)
    args = data.get("args")
    return PathSegment(
        str(data["name"]),
        tuple(_generic_arg(arg) for arg in args) if args is not None else None,
        _span(data) if "span" in data else None,
    )


def build_expr(value: Any) -> Expr:
    data = _mapping(value)
    span = _span(data)
    ty = _ty(data, "ty")
    if "method_call" in data:
        generics = data.get("generics")
        segment = PathSegment(
            str(data["method_call"]),
            tuple(_generic_arg(arg) for arg in generics) if generics is not None else None,
        )
        return MethodCall(
            span=span,
            ty=ty,
            receiver=build_expr(data["receiver"]),
            segment=segment,
            args=[build_expr(arg) for arg in _list(data, "args")],
            method_span=_span(data, "method_span") if "method_span" in data else span,
        )
    if "call" in data:
        return Call(span=span, ty=ty, func=build_expr(data["call"]), args=[build_expr(arg) for arg in _list(data, "args")])
    if "block" in data:
        return Block(
            span=span,
            ty=ty,
            stmts=[build_stmt(stmt) for stmt in _list(data, "block")],
            tail=build_expr(data["tail"]) if data.get("tail") is not None else None,
        )
    if "closure" in data:
        return Closure(
            span=span,
            ty=ty,
            params=[_param(param) for param in _list(data, "closure")],
            body=build_expr(data["body"]),
        )
    if "path" in data:
        return PathExpr(
            span=span,
            ty=ty,
            path=str(data["path"]),
            segments=tuple(_path_segment(segment) for segment in _list(data, "segments")),
        )
    if "lit" in data:
        return Lit(span=span, ty=ty, value=str(data["lit"]))
    raise ProgramLoadError(f"unknown expression kind in {_describe(data)}")


def build_stmt(value: Any) -> Stmt:
    data = _mapping(value)
    span = _span(data)
    if "let" in data:
        return Let(
            span=span,
            name=str(data["let"]),
            init=build_expr(data["init"]) if data.get("init") is not None else None,
            ty_ann=build_hir_ty(data["ty"]) if data.get("ty") is not None else None,
        )
    if "semi" in data:
        return Semi(span=span, expr=build_expr(data["semi"]))
    if "expr" in data:
        return ExprStmt(span=span, expr=build_expr(data["expr"]))
    raise ProgramLoadError(f"unknown statement kind in {_describe(data)}")
