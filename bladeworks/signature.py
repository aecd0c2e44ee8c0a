# Bladeworks: Clifford Algebra Table Engine
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Metric signatures: the ordered list of basis vectors of an algebra.

The declared order of the vectors is authoritative for every permutation
sign in the product tables. Labels are only used for display and parsing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Tuple, Union

from .errors import ConstructionError

MAX_DIMENSION = 12
VALID_SQUARES = (1, -1, 0)


@dataclass(frozen=True)
class BasisVector:
    """A single generator ``e_label`` with ``e_label^2 = square``."""

    square: int
    label: str


SpecEntry = Union[BasisVector, Tuple[int, str], Mapping[str, object]]


def _coerce_square(value) -> int:
    try:
        square = int(value)
    except (TypeError, ValueError):
        raise ConstructionError(f"Basis vector square must be one of {VALID_SQUARES}, got {value!r}") from None
    if square != value or square not in VALID_SQUARES:
        raise ConstructionError(f"Basis vector square must be one of {VALID_SQUARES}, got {value!r}")
    return square


def _coerce_entry(entry: SpecEntry) -> BasisVector:
    if isinstance(entry, BasisVector):
        return BasisVector(_coerce_square(entry.square), entry.label)
    if isinstance(entry, Mapping):
        if "square" not in entry:
            raise ConstructionError(f"Basis spec entry {dict(entry)!r} has no 'square'")
        label = entry.get("label", entry.get("subscript"))
        return BasisVector(_coerce_square(entry["square"]), label)
    try:
        square, label = entry
    except (TypeError, ValueError):
        raise ConstructionError(f"Cannot read basis spec entry {entry!r}") from None
    return BasisVector(_coerce_square(square), label)


@dataclass(frozen=True)
class Signature:
    """Ordered basis vectors of an algebra.

    Attributes:
        vectors (tuple[BasisVector, ...]): Generators in declared order.
    """

    vectors: Tuple[BasisVector, ...]

    def __post_init__(self) -> None:
        vectors = tuple(self.vectors)
        object.__setattr__(self, "vectors", vectors)

        if len(vectors) > MAX_DIMENSION:
            raise ConstructionError(
                f"Dimension must be <= {MAX_DIMENSION}, got {len(vectors)}"
            )
        seen = set()
        for vec in vectors:
            if not isinstance(vec, BasisVector):
                raise ConstructionError(f"Expected BasisVector, got {vec!r}")
            if vec.square not in VALID_SQUARES:
                raise ConstructionError(
                    f"Square of e{vec.label} must be one of {VALID_SQUARES}, got {vec.square!r}"
                )
            if not isinstance(vec.label, str) or not vec.label:
                raise ConstructionError(f"Basis vector label must be a non-empty string, got {vec.label!r}")
            if vec.label in seen:
                raise ConstructionError(f"Duplicate basis vector label {vec.label!r}")
            seen.add(vec.label)

    # ------------------------------------------------------------------
    # Named constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_counts(cls, p: int, q: int = 0, r: int = 0) -> "Signature":
        """Canonical signature with ``r`` null, ``p`` positive then ``q`` negative vectors.

        Vectors are labelled ``"1" .. "n"`` by position.
        """
        for name, count in (("p", p), ("q", q), ("r", r)):
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ConstructionError(f"{name} must be a non-negative integer, got {count!r}")
        return cls.from_squares([0] * r + [1] * p + [-1] * q)

    @classmethod
    def from_squares(cls, squares: Iterable[int]) -> "Signature":
        """Signature from per-vector squares, labelled by position."""
        return cls(tuple(
            BasisVector(_coerce_square(s), str(i + 1)) for i, s in enumerate(squares)
        ))

    @classmethod
    def from_spec(cls, spec: Iterable[SpecEntry]) -> "Signature":
        """Signature from explicit ``{square, label}`` entries.

        Entries may be :class:`BasisVector` instances, ``(square, label)``
        pairs, or mappings with ``square`` and ``label`` (or ``subscript``).
        """
        if isinstance(spec, (str, bytes)):
            raise ConstructionError(f"Basis spec must be a sequence of entries, got {spec!r}")
        return cls(tuple(_coerce_entry(entry) for entry in spec))

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def n(self) -> int:
        return len(self.vectors)

    @property
    def squares(self) -> Tuple[int, ...]:
        return tuple(v.square for v in self.vectors)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(v.label for v in self.vectors)

    @property
    def counts(self) -> Tuple[int, int, int]:
        """``(p, q, r)``: positive, negative and null vector counts."""
        squares = self.squares
        return squares.count(1), squares.count(-1), squares.count(0)

    def __str__(self) -> str:
        p, q, r = self.counts
        return f"Cl({p},{q},{r})"
