"""Semantic type matching helpers."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from bevy_lint.tree import Adt, HirTy, Param, PathTy, Ref, TupleTy, Ty


def peel_refs(ty: Ty) -> Ty:
    """Strip every ``&``/``&mut`` layer, leaving owning wrappers alone."""

    while isinstance(ty, Ref):
        ty = ty.inner
    return ty


def match_type(ty: Optional[Ty], path: Iterable[str]) -> bool:
    """Return ``True`` if ``ty``'s definition is ``path``, whatever its generic arguments.

    References are peeled first, so ``App``, ``&App`` and ``&mut &App`` all match
    ``bevy_app::app::App``.
    """

    if ty is None:
        return False
    ty = peel_refs(ty)
    return isinstance(ty, Adt) and ty.path.matches(path)


def is_normalizable(ty: Ty) -> bool:
    """A type still mentioning a generic parameter has no concrete layout."""

    return not any(isinstance(part, Param) for part in ty.walk())


def generic_type_at(hir_ty: HirTy, index: int) -> Optional[HirTy]:
    """Return the ``index``th generic argument of a path type, if it is a type.

    Lifetimes count towards ``index``, so for ``Query<'w, 's, D, F>`` index 2
    is ``D``. Returns ``None`` when ``hir_ty`` is not a path, when its last
    segment has no (or too few) generic arguments, as for a type alias, or when
    the argument at ``index`` is a lifetime.
    """

    if not isinstance(hir_ty, PathTy) or not hir_ty.segments or index < 0:
        return None
    args = hir_ty.segments[-1].args
    if not args or index >= len(args):
        return None
    arg = args[index]
    return arg if isinstance(arg, HirTy) else None


class detuple:
    """Iterate the element types of a tuple type, or just the type itself.

    ``Query<&A>`` and ``Query<(&A, &B)>`` are both written at call sites, so
    lints treat the data argument as a list of element types. The iterable is
    lazy and can be iterated any number of times.
    """

    def __init__(self, hir_ty: HirTy) -> None:
        self.hir_ty = hir_ty

    def __iter__(self) -> Iterator[HirTy]:
        if isinstance(self.hir_ty, TupleTy):
            yield from self.hir_ty.elems
        else:
            yield self.hir_ty
