# Bladeworks: Clifford Algebra Table Engine
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Sparse multivector container.

Provides an immutable, object-oriented wrapper around a ``{mask: coefficient}``
mapping to enable operator overloading (e.g., ``A * B`` for the geometric
product, ``A ^ B`` for the wedge).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterator, Mapping, Optional, Set, Tuple

import torch

from .basis import BasisBlade, popcount
from .errors import BladeLookupError

if TYPE_CHECKING:
    from .algebra import Algebra


def _format_coefficient(c: float) -> str:
    return f"{c:g}"


class Multivector:
    """Weighted sum of basis blades of one algebra.

    Coefficients that are exactly zero are never stored; iteration follows
    the canonical blade order of the algebra.

    Allows natural mathematical syntax like ``A * B``, ``A ^ B``, ``A & B``
    (meet), ``A | B`` (left contraction), ``~A``.

    Attributes:
        algebra (Algebra): The owning algebra.
        terms (Mapping[int, float]): Read-only ``{mask: coefficient}`` view.
    """

    __slots__ = ("algebra", "_terms")

    def __init__(self, algebra: "Algebra", terms: Optional[Mapping] = None):
        """Initializes a Multivector.

        Args:
            algebra (Algebra): The algebra instance.
            terms (Mapping, optional): Coefficients keyed by blade mask or by
                label. Non-canonical labels such as ``"e21"`` are reordered
                with the matching sign; repeated keys accumulate.

        Raises:
            ParseError: A label cannot be decomposed.
            BladeLookupError: A mask is outside the algebra.
        """
        accum: Dict[int, float] = {}
        for key, value in (terms or {}).items():
            if isinstance(key, str):
                mask, sign = algebra.basis.parse(key)
                value = sign * value
            else:
                mask = int(key)
                if not 0 <= mask < algebra.dim:
                    raise BladeLookupError(f"Blade mask {key!r} is outside {algebra.signature}")
            accum[mask] = accum.get(mask, 0.0) + float(value)

        index_of = algebra.basis.index_of
        self.algebra = algebra
        self._terms = {
            mask: accum[mask]
            for mask in sorted(accum, key=index_of.__getitem__)
            if accum[mask] != 0.0
        }

    @classmethod
    def _wrap(cls, algebra: "Algebra", terms: Dict[int, float]) -> "Multivector":
        """Adopt ``terms`` that are already pruned and canonically ordered."""
        mv = cls.__new__(cls)
        mv.algebra = algebra
        mv._terms = terms
        return mv

    @classmethod
    def from_labels(cls, algebra: "Algebra", mapping: Mapping[str, float]) -> "Multivector":
        """Creates a Multivector from ``{label: coefficient}``."""
        return cls(algebra, mapping)

    @classmethod
    def from_tensor(cls, algebra: "Algebra", tensor: torch.Tensor) -> "Multivector":
        """Creates a Multivector from a dense ``[dim]`` tensor indexed by mask."""
        from .validation import check_tensor
        check_tensor(tensor, algebra, "tensor")
        return algebra.from_dense(tensor)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def terms(self) -> Mapping[int, float]:
        return MappingProxyType(self._terms)

    def items(self) -> Iterator[Tuple[BasisBlade, float]]:
        """``(blade, coefficient)`` pairs in canonical order."""
        basis = self.algebra.basis
        for mask, coeff in self._terms.items():
            yield basis.blade(mask), coeff

    def to_labels(self) -> Dict[str, float]:
        """``{label: coefficient}`` in canonical order."""
        basis = self.algebra.basis
        return {basis.label(mask): coeff for mask, coeff in self._terms.items()}

    def to_tensor(self) -> torch.Tensor:
        """Dense coefficient tensor ``[dim]`` indexed by mask."""
        return self.algebra.to_dense(self)

    def grades(self) -> Set[int]:
        return {popcount(mask) for mask in self._terms}

    @property
    def scalar_part(self) -> float:
        return self._terms.get(0, 0.0)

    def is_zero(self) -> bool:
        return not self._terms

    def __getitem__(self, key) -> float:
        """Coefficient of a blade given by label or mask (0.0 if absent)."""
        if isinstance(key, str):
            mask, sign = self.algebra.basis.parse(key)
            return sign * self._terms.get(mask, 0.0)
        return self._terms.get(int(key), 0.0)

    def __len__(self) -> int:
        return len(self._terms)

    def __bool__(self) -> bool:
        return bool(self._terms)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Multivector):
            return NotImplemented
        return self.algebra is other.algebra and self._terms == other._terms

    __hash__ = None

    def __repr__(self) -> str:
        return f"Multivector({self.to_labels()!r}, algebra={self.algebra.signature})"

    def __str__(self) -> str:
        """Compact form, e.g. ``(e1+2e2)``, ``-e12``, ``3`` or ``0``."""
        s = ""
        for label, c in self.to_labels().items():
            cs = "" if c == 1 else ("-" if c == -1 else _format_coefficient(c))
            if label == self.algebra.basis.label(0):
                s += _format_coefficient(c) if not s or c < 0 else "+" + _format_coefficient(c)
            elif not s:
                s += cs + label
            elif c > 0:
                s += "+" + cs + label
            else:
                s += cs + label
        if len(self._terms) > 1:
            s = "(" + s + ")"
        return s or "0"

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def _coerce(self, other) -> Optional["Multivector"]:
        if isinstance(other, Multivector):
            return other
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.algebra.scalar(other)
        return None

    def __add__(self, other):
        """Sum; plain numbers are added to the scalar part."""
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.algebra.add(self, other)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.algebra.sub(self, other)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.algebra.sub(other, self)

    def __neg__(self):
        return self.algebra.scale(-1, self)

    def __mul__(self, other):
        """Geometric Product (A * B), or scaling by a number."""
        if isinstance(other, Multivector):
            return self.algebra.geometric_product(self, other)
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.algebra.scale(other, self)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.algebra.scale(other, self)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.algebra.scale(1.0 / other, self)
        return NotImplemented

    def __xor__(self, other):
        """Wedge product (A ^ B)."""
        if not isinstance(other, Multivector):
            return NotImplemented
        return self.algebra.wedge(self, other)

    def __and__(self, other):
        """Anti-wedge / meet (A & B)."""
        if not isinstance(other, Multivector):
            return NotImplemented
        return self.algebra.anti_wedge(self, other)

    def __or__(self, other):
        """Left contraction (A | B)."""
        if not isinstance(other, Multivector):
            return NotImplemented
        return self.algebra.left_contraction(self, other)

    def __invert__(self):
        """Reversion (~A)."""
        return self.algebra.reverse(self)

    # ------------------------------------------------------------------
    # Named operations
    # ------------------------------------------------------------------

    def grade(self, k: int) -> "Multivector":
        """Projects to grade k."""
        return self.algebra.grade_select(self, k)

    def meet(self, other: "Multivector") -> "Multivector":
        return self.algebra.anti_wedge(self, other)

    def dual(self) -> "Multivector":
        return self.algebra.dual(self)

    def undual(self) -> "Multivector":
        return self.algebra.undual(self)

    def norm_squared(self) -> float:
        return self.algebra.norm_squared(self)

    def normalize(self) -> "Multivector":
        return self.algebra.normalize(self)

    def inverse(self) -> "Multivector":
        return self.algebra.inverse(self)

    def sandwich(self, x: "Multivector") -> "Multivector":
        """Apply this versor to ``x``: ``self x ~self``."""
        return self.algebra.sandwich(self, x)

    def scalar_product(self, other: "Multivector") -> float:
        return self.algebra.scalar_product(self, other)
