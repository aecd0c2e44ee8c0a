# Bladeworks: Clifford Algebra Table Engine
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import torch

from log import get_logger

from .basis import Basis, BasisBlade, popcount
from .duality import DualTable, build_anti_wedge_table, build_dual_table
from .errors import AlgebraicError, ConstructionError
from .metric import (
    child_metric_tensors,
    identity_transforms,
    metric_scalar_product,
    propagate_transforms,
    root_metric_tensors,
)
from .multivector import Multivector
from .signature import Signature, SpecEntry
from .tables import (
    CayleyTable,
    build_geometric_table,
    build_left_contraction_table,
    build_wedge_table,
)
from .validation import check_multivector

logger = get_logger(__name__)

Number = Union[int, float]


class Algebra:
    """Clifford algebra over an explicit, ordered basis.

    Everything is built eagerly in the constructor: the canonical blade
    order, the geometric / wedge / left-contraction Cayley tables, the
    left and right complement tables, the anti-wedge table and the
    per-grade transform and metric matrices. Nothing is mutated afterwards,
    so an algebra can be shared freely between threads.

    Supports degenerate (null) vectors: ``Cl(p, q, r)`` has ``p``
    positive, ``q`` negative and ``r`` null basis vectors.

    An algebra may also be declared as a change of basis of a ``parent``
    algebra (e.g. the null basis ``eo, ei`` of conformal geometric algebra).
    The product tables still come from the declared squares; the parent and
    transform only determine the metric tensors :attr:`metrics`.

    Attributes:
        signature (Signature): Ordered generators.
        basis (Basis): Blades in canonical order and the mask/label maps.
        n (int): Number of generators.
        dim (int): Number of blades (2^n).
        parent (Algebra | None): Algebra this one is a basis change of.
        transforms (tuple[torch.Tensor, ...]): M[0..n].
        metrics (tuple[torch.Tensor, ...]): G[0..n].
        grade_masks (list[torch.Tensor]): Boolean [Dim] selector per grade.
        device (str): Device of every table.
    """

    _CACHED_TABLES: Dict[tuple, tuple] = {}

    def __init__(
        self,
        signature: Signature,
        parent: Optional["Algebra"] = None,
        transform=None,
        device="cpu",
    ):
        """Build the algebra and all of its tables.

        Args:
            signature (Signature): Generators in declared order.
            parent (Algebra, optional): Algebra whose basis ``transform`` maps from.
            transform (optional): ``[n, n]`` matrix M[1]; column ``j`` writes our
                ``j``-th vector over the parent's vectors. Required with ``parent``.
            device (str, optional): Device for the tables. Defaults to 'cpu'.

        Raises:
            ConstructionError: Invalid signature, parent or transform.
        """
        if not isinstance(signature, Signature):
            raise ConstructionError(f"Expected a Signature, got {type(signature).__name__}")
        if parent is None and transform is not None:
            raise ConstructionError("A transform needs a parent algebra")
        if parent is not None and transform is None:
            raise ConstructionError("A parent algebra needs a transform matrix")

        self.signature = signature
        self.n = signature.n
        self.dim = 1 << self.n
        self.device = device
        self.parent = parent
        self.basis = Basis(signature)

        # Product tables depend on the squares only
        cache_key = (signature.squares, str(device))
        if cache_key not in Algebra._CACHED_TABLES:
            logger.debug("Building product tables for squares %s", signature.squares)
            Algebra._CACHED_TABLES[cache_key] = self._generate_tables()
        (
            self.geometric_table,
            self.wedge_table,
            self.left_contraction_table,
            self.left_dual_table,
            self.right_dual_table,
            self.anti_wedge_table,
            self.grade_masks,
            self.rev_signs,
        ) = Algebra._CACHED_TABLES[cache_key]

        if parent is None:
            transforms = identity_transforms(self.basis, device)
            metrics = root_metric_tensors(self.basis, device)
        else:
            m1 = self._check_parent(parent, transform)
            transforms = propagate_transforms(self.basis, parent, m1)
            metrics = child_metric_tensors(parent, transforms)
        self.transforms = tuple(transforms)
        self.metrics = tuple(metrics)

        if parent is not None:
            self._check_declared_squares()
        logger.debug("Built %r", self)

    # ------------------------------------------------------------------
    # Named constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_counts(cls, p: int = 3, q: int = 0, r: int = 0, device="cpu") -> "Algebra":
        """Root algebra ``Cl(p, q, r)`` with subscripts ``"1" .. "n"``.

        Null vectors come first, then positive, then negative ones.
        """
        return cls(Signature.from_counts(p, q, r), device=device)

    @classmethod
    def from_squares(cls, squares: Iterable[int], device="cpu") -> "Algebra":
        """Root algebra from per-vector squares, subscripts by position."""
        return cls(Signature.from_squares(squares), device=device)

    @classmethod
    def from_basis_spec(cls, spec: Iterable[SpecEntry], device="cpu") -> "Algebra":
        """Root algebra from explicit ``{square, label}`` entries."""
        return cls(Signature.from_spec(spec), device=device)

    @classmethod
    def from_basis_spec_with_parent(
        cls,
        spec: Iterable[SpecEntry],
        parent: "Algebra",
        transform,
        device=None,
    ) -> "Algebra":
        """Child algebra: explicit basis plus a change of basis from ``parent``.

        Args:
            spec: ``{square, label}`` entries of the new basis.
            parent (Algebra): The algebra the basis is expressed in.
            transform: ``[n, n]`` grade-1 transform M[1].
            device (str, optional): Defaults to the parent's device.
        """
        if device is None:
            device = parent.device if isinstance(parent, Algebra) else "cpu"
        return cls(Signature.from_spec(spec), parent=parent, transform=transform, device=device)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def _generate_tables(self) -> tuple:
        """Precompute the Cayley tables, complements, grade masks and reversion signs."""
        squares = self.signature.squares
        geometric = build_geometric_table(squares, self.device)
        wedge = build_wedge_table(self.n, self.device)
        left_contraction = build_left_contraction_table(geometric, self.n)
        left_dual = build_dual_table(wedge, "left")
        right_dual = build_dual_table(wedge, "right")
        anti_wedge = build_anti_wedge_table(wedge, left_dual, right_dual)

        grades = torch.tensor([popcount(m) for m in range(self.dim)], device=self.device)
        grade_masks = [grades == k for k in range(self.n + 1)]

        # Blade of grade k gets (-1)^(k(k-1)/2)
        rev_signs = torch.tensor(
            [(-1) ** (g * (g - 1) // 2) for g in grades.tolist()],
            dtype=torch.float64, device=self.device,
        )
        return (geometric, wedge, left_contraction, left_dual, right_dual,
                anti_wedge, grade_masks, rev_signs)

    def _check_parent(self, parent, transform) -> torch.Tensor:
        if not isinstance(parent, Algebra):
            raise ConstructionError(f"Parent must be an Algebra, got {type(parent).__name__}")
        if parent.n != self.n:
            raise ConstructionError(
                f"Parent has {parent.n} basis vectors but the basis spec has {self.n}"
            )
        try:
            m1 = torch.as_tensor(transform, dtype=torch.float64).to(self.device)
        except (TypeError, ValueError, RuntimeError) as exc:
            raise ConstructionError(f"Transform is not a numeric matrix: {exc}") from exc
        if m1.shape != (self.n, self.n):
            raise ConstructionError(
                f"Transform must be {self.n}x{self.n}, got shape {tuple(m1.shape)}"
            )
        if not bool(torch.isfinite(m1).all()):
            raise ConstructionError("Transform contains non-finite entries")
        if self.n and float(torch.linalg.det(m1)) == 0.0:
            logger.warning("Transform for %s is singular; the new basis is degenerate", self.signature)
        return m1.clone()

    def _check_declared_squares(self) -> None:
        """Warn when a declared square disagrees with the propagated metric."""
        if self.n == 0:
            return
        derived = torch.diagonal(self.metrics[1]).tolist()
        for vec, g in zip(self.signature.vectors, derived):
            if not math.isclose(vec.square, g, abs_tol=1e-12):
                logger.warning(
                    "e%s is declared with square %d but the parent metric gives %g",
                    vec.label, vec.square, g,
                )

    # ------------------------------------------------------------------
    # Descriptive properties
    # ------------------------------------------------------------------

    @property
    def num_grades(self) -> int:
        """Counts the number of grades (n + 1)."""
        return self.n + 1

    @property
    def p(self) -> int:
        return self.signature.counts[0]

    @property
    def q(self) -> int:
        return self.signature.counts[1]

    @property
    def r(self) -> int:
        return self.signature.counts[2]

    @property
    def squares(self) -> Tuple[int, ...]:
        return self.signature.squares

    @property
    def subscripts(self) -> Tuple[str, ...]:
        return self.signature.labels

    @property
    def blade_labels(self) -> List[str]:
        """Blade names in canonical order (``e``, ``e1``, ``e2``, ``e12``, ...)."""
        return self.basis.labels

    def cayley_table(self, kind: str) -> CayleyTable:
        """Product table by name: geometric, wedge, anti_wedge or left_contraction."""
        tables = {
            "geometric": self.geometric_table,
            "wedge": self.wedge_table,
            "anti_wedge": self.anti_wedge_table,
            "left_contraction": self.left_contraction_table,
        }
        try:
            return tables[kind]
        except KeyError:
            raise ValueError(f"Unknown table {kind!r}, expected one of {sorted(tables)}") from None

    def dual_table(self, side: str) -> DualTable:
        if side == "left":
            return self.left_dual_table
        if side == "right":
            return self.right_dual_table
        raise ValueError(f"side must be 'left' or 'right', got {side!r}")

    def __repr__(self) -> str:
        vectors = ", ".join(f"e{v.label}^2={v.square:+d}" for v in self.signature.vectors)
        parent = f", parent={self.parent.signature}" if self.parent is not None else ""
        return f"Algebra({self.signature}: {vectors}{parent})"

    # ------------------------------------------------------------------
    # Building multivectors
    # ------------------------------------------------------------------

    def multivector(self, terms: Optional[Mapping] = None) -> Multivector:
        """Multivector from a ``{label or mask: coefficient}`` mapping."""
        return Multivector(self, terms)

    def blade(self, label: str, coefficient: Number = 1.0) -> Multivector:
        """Single blade by name; ``"e21"`` gives ``-e12``."""
        mask, sign = self.basis.parse(label)
        return Multivector(self, {mask: sign * coefficient})

    def scalar(self, value: Number) -> Multivector:
        return Multivector(self, {0: value})

    def vector(self, coefficients: Sequence[Number]) -> Multivector:
        """Injects coefficients into the grade-1 subspace, in declared order."""
        if len(coefficients) != self.n:
            raise ValueError(f"Expected {self.n} coefficients, got {len(coefficients)}")
        return Multivector(self, {1 << i: c for i, c in enumerate(coefficients)})

    def pseudoscalar(self) -> Multivector:
        return Multivector(self, {self.basis.full_mask: 1.0})

    def zero(self) -> Multivector:
        return Multivector(self)

    # ------------------------------------------------------------------
    # Dense kernels
    # ------------------------------------------------------------------

    def to_dense(self, v: Multivector) -> torch.Tensor:
        """Coefficient tensor ``[dim]`` indexed by blade mask."""
        out = torch.zeros(self.dim, dtype=torch.float64, device=self.device)
        if v.terms:
            keys = torch.tensor(list(v.terms.keys()), dtype=torch.long, device=self.device)
            out[keys] = torch.tensor(list(v.terms.values()), dtype=torch.float64, device=self.device)
        return out

    def from_dense(self, t: torch.Tensor) -> Multivector:
        """Sparse multivector from a mask-indexed tensor, exact zeros dropped."""
        values = t.tolist()
        return Multivector._wrap(self, {
            mask: values[mask] for mask in self.basis.masks if values[mask] != 0.0
        })

    def bilinear(self, table: CayleyTable, A: torch.Tensor, B: torch.Tensor) -> torch.Tensor:
        """Bilinear extension of a Cayley table over dense operands.

        ``result[..., table.indices[i, j]] += A[..., i] * B[..., j] * table.signs[i, j]``

        Args:
            table (CayleyTable): Product table.
            A (torch.Tensor): Left operand [..., Dim].
            B (torch.Tensor): Right operand [..., Dim].

        Returns:
            torch.Tensor: Product [..., Dim].
        """
        terms = (A.unsqueeze(-1) * B.unsqueeze(-2) * table.signs).flatten(-2)
        out = torch.zeros(*terms.shape[:-1], self.dim, dtype=terms.dtype, device=terms.device)
        return out.index_add_(-1, table.indices.flatten(), terms)

    def sparse_bilinear(self, table: CayleyTable, a: Multivector, b: Multivector) -> torch.Tensor:
        """Bilinear extension over the blade pairs present in ``a`` and ``b``.

        Only the rows of ``a``'s masks and the columns of ``b``'s masks are
        gathered from the table; pairs whose product vanishes contribute
        nothing, even for non-finite coefficients.

        Returns:
            torch.Tensor: Dense product [Dim] indexed by mask.
        """
        keys_a = torch.tensor(list(a.terms.keys()), dtype=torch.long, device=self.device)
        keys_b = torch.tensor(list(b.terms.keys()), dtype=torch.long, device=self.device)
        vals_a = torch.tensor(list(a.terms.values()), dtype=torch.float64, device=self.device)
        vals_b = torch.tensor(list(b.terms.values()), dtype=torch.float64, device=self.device)

        idx = table.indices[keys_a][:, keys_b]
        sgn = table.signs[keys_a][:, keys_b]
        terms = vals_a.unsqueeze(-1) * vals_b.unsqueeze(-2) * sgn
        terms = torch.where(sgn != 0, terms, torch.zeros_like(terms))

        out = torch.zeros(self.dim, dtype=torch.float64, device=self.device)
        return out.index_add_(0, idx.flatten(), terms.flatten())

    def _product(self, table: CayleyTable, a: Multivector, b: Multivector, name: str) -> Multivector:
        check_multivector(a, self, f"{name}(a)")
        check_multivector(b, self, f"{name}(b)")
        if not a.terms or not b.terms:
            return self.zero()
        return self.from_dense(self.sparse_bilinear(table, a, b))

    def _complement(self, table: DualTable, v: Multivector) -> Multivector:
        out = torch.zeros(self.dim, dtype=torch.float64, device=self.device)
        out.index_add_(0, table.indices, self.to_dense(v) * table.signs)
        return self.from_dense(out)

    # ------------------------------------------------------------------
    # Facade operations
    # ------------------------------------------------------------------

    def add(self, a: Multivector, b: Multivector) -> Multivector:
        check_multivector(a, self, "add(a)")
        check_multivector(b, self, "add(b)")
        terms = dict(a.terms)
        for mask, coeff in b.terms.items():
            terms[mask] = terms.get(mask, 0.0) + coeff
        return Multivector(self, terms)

    def sub(self, a: Multivector, b: Multivector) -> Multivector:
        check_multivector(a, self, "sub(a)")
        check_multivector(b, self, "sub(b)")
        terms = dict(a.terms)
        for mask, coeff in b.terms.items():
            terms[mask] = terms.get(mask, 0.0) - coeff
        return Multivector(self, terms)

    def scale(self, s: Number, v: Multivector) -> Multivector:
        check_multivector(v, self, "scale(v)")
        return Multivector(self, {mask: s * coeff for mask, coeff in v.terms.items()})

    def geometric_product(self, a: Multivector, b: Multivector) -> Multivector:
        """Computes the Geometric Product ``ab``."""
        return self._product(self.geometric_table, a, b, "geometric_product")

    def wedge(self, a: Multivector, b: Multivector) -> Multivector:
        """Computes the wedge (outer) product ``a ^ b``.

        Antisymmetric on vectors and grade-raising; zero whenever the
        operands share a basis vector.
        """
        return self._product(self.wedge_table, a, b, "wedge")

    def anti_wedge(self, a: Multivector, b: Multivector) -> Multivector:
        """Computes the regressive (anti-wedge) product, the meet ``a v b``."""
        return self._product(self.anti_wedge_table, a, b, "anti_wedge")

    def left_contraction(self, a: Multivector, b: Multivector) -> Multivector:
        """Computes the left contraction ``a _| b``.

        Each blade pair of grades (r, s) contributes the grade ``s - r`` part
        of its geometric product, or nothing when ``s < r``.
        """
        return self._product(self.left_contraction_table, a, b, "left_contraction")

    def reverse(self, v: Multivector) -> Multivector:
        """Computes the reversion: grade k picks up ``(-1)^(k(k-1)/2)``."""
        check_multivector(v, self, "reverse(v)")
        return self.from_dense(self.to_dense(v) * self.rev_signs)

    def grade_select(self, v: Multivector, grade: int) -> Multivector:
        """Isolates a specific grade.

        Raises:
            AlgebraicError: ``grade`` outside ``[0, n]``.
        """
        check_multivector(v, self, "grade_select(v)")
        if isinstance(grade, bool) or not isinstance(grade, int) or not 0 <= grade <= self.n:
            raise AlgebraicError(f"Grade must be an integer in [0, {self.n}], got {grade!r}")
        dense = self.to_dense(v)
        return self.from_dense(torch.where(self.grade_masks[grade], dense, torch.zeros_like(dense)))

    def dual(self, v: Multivector) -> Multivector:
        """Right complement: ``e_a -> s e_comp`` with ``e_a ^ (s e_comp) = I``."""
        check_multivector(v, self, "dual(v)")
        return self._complement(self.right_dual_table, v)

    def undual(self, v: Multivector) -> Multivector:
        """Left complement, the inverse of :meth:`dual`."""
        check_multivector(v, self, "undual(v)")
        return self._complement(self.left_dual_table, v)

    def norm_squared(self, v: Multivector) -> float:
        """Scalar part of ``v ~v``."""
        return self.geometric_product(v, self.reverse(v)).scalar_part

    def normalize(self, v: Multivector) -> Multivector:
        """``v / sqrt(|v ~v|)``.

        Raises:
            AlgebraicError: ``v ~v`` has a zero scalar part.
        """
        sq = self.norm_squared(v)
        if sq == 0.0:
            raise AlgebraicError(f"Cannot normalize {v}: norm squared is zero")
        return self.scale(1.0 / math.sqrt(abs(sq)), v)

    def inverse(self, v: Multivector) -> Multivector:
        """Versor inverse ``~v / (v ~v)``. Not valid for general multivectors.

        Raises:
            AlgebraicError: ``v ~v`` has a zero scalar part.
        """
        sq = self.norm_squared(v)
        if sq == 0.0:
            raise AlgebraicError(f"Cannot invert {v}: division by zero norm squared")
        return self.scale(1.0 / sq, self.reverse(v))

    def sandwich(self, r: Multivector, x: Multivector) -> Multivector:
        """Versor action ``r x ~r``."""
        return self.geometric_product(self.geometric_product(r, x), self.reverse(r))

    def scalar_product(self, a: Multivector, b: Multivector) -> float:
        """Metric scalar product using the per-grade metric tensors.

        Equals the scalar part of ``ab`` for a root algebra; for a child
        algebra it reflects the parent metric (e.g. ``eo . ei = -1`` in CGA).
        """
        check_multivector(a, self, "scalar_product(a)")
        check_multivector(b, self, "scalar_product(b)")
        return float(metric_scalar_product(self, self.to_dense(a), self.to_dense(b)))

    def grade_of(self, mask: int) -> int:
        return popcount(mask)

    def blades_of_grade(self, grade: int) -> Tuple[BasisBlade, ...]:
        if not 0 <= grade <= self.n:
            raise AlgebraicError(f"Grade must be in [0, {self.n}], got {grade!r}")
        return self.basis.grade_blades(grade)
