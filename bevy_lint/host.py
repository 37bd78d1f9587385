"""The capabilities the linter needs from the compiler frontend."""

from __future__ import annotations

from typing import Dict, Optional, Protocol

from .span import SourceMap, Span
from .tree import Adt, Expr, HirTy, Ref, Tup, Ty
from .utils.program import Program
from .utils.ty import is_normalizable

POINTER_SIZE = 8

PRIMITIVE_SIZES: Dict[str, int] = {
    "bool": 1,
    "char": 4,
    "u8": 1,
    "u16": 2,
    "u32": 4,
    "u64": 8,
    "u128": 16,
    "usize": POINTER_SIZE,
    "i8": 1,
    "i16": 2,
    "i32": 4,
    "i64": 8,
    "i128": 16,
    "isize": POINTER_SIZE,
    "f32": 4,
    "f64": 8,
}


class Host(Protocol):
    """Type queries and source access provided by the frontend."""

    def expr_ty(self, expr: Expr) -> Ty:
        """Return the type-checked type of ``expr``."""

    def lower_ty(self, hir_ty: HirTy) -> Ty:
        """Return the semantic type a written type reference resolved to."""

    def layout_size(self, ty: Ty) -> Optional[int]:
        """Return the byte size of ``ty``, or ``None`` if it has no computable layout."""

    def snippet(self, span: Span) -> Optional[str]:
        """Return the source text under ``span``, or ``None`` if unavailable."""


class ProgramHost:
    """A ``Host`` answering from a loaded program dump."""

    def __init__(self, program: Program) -> None:
        self.program = program
        self.source_map: SourceMap = program.source_map()

    def expr_ty(self, expr: Expr) -> Ty:
        return expr.ty

    def lower_ty(self, hir_ty: HirTy) -> Ty:
        return hir_ty.res

    def layout_size(self, ty: Ty) -> Optional[int]:
        if not is_normalizable(ty):
            return None
        return self._size_of(ty)

    def _size_of(self, ty: Ty) -> Optional[int]:
        if isinstance(ty, Ref):
            return POINTER_SIZE
        if isinstance(ty, Tup):
            total = 0
            for elem in ty.elems:
                size = self._size_of(elem)
                if size is None:
                    return None
                total += size
            return total
        if isinstance(ty, Adt):
            key = str(ty.path)
            if key in self.program.layouts:
                return self.program.layouts[key]
            return PRIMITIVE_SIZES.get(key)
        return None

    def snippet(self, span: Span) -> Optional[str]:
        if not self.program.source_text:
            return None
        return self.source_map.snippet(span)
