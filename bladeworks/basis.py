# Bladeworks: Clifford Algebra Table Engine
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Basis blade enumeration and label translation.

Blade ``mask`` bit ``i`` is set when the ``i``-th declared basis vector is a
factor. Everything inside the kernel is keyed by mask; labels such as
``"e12"`` or ``"eoi"`` exist only at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Set, Tuple

import torch

from log import get_logger

from .errors import BladeLookupError, ParseError
from .signature import Signature

logger = get_logger(__name__)

BLADE_PREFIX = "e"


def popcount(mask: int) -> int:
    return bin(mask).count("1")


def mask_positions(mask: int) -> Tuple[int, ...]:
    """Vector positions set in ``mask``, ascending."""
    return tuple(i for i in range(mask.bit_length()) if mask & (1 << i))


def enumerate_masks(n: int) -> List[int]:
    """All ``2^n`` masks in canonical order.

    Grade ascending, then lexicographic on the included positions (the first
    differing position wins). Labels play no part in the ordering.
    """
    return sorted(range(1 << n), key=lambda m: (popcount(m), mask_positions(m)))


def permutation_parity(sequence: Sequence[int]) -> int:
    """Number of inversions of ``sequence`` modulo 2."""
    inversions = 0
    for i, a in enumerate(sequence):
        for b in sequence[i + 1:]:
            if a > b:
                inversions += 1
    return inversions & 1


@dataclass(frozen=True)
class BasisBlade:
    """One basis element, identified by its bitmask."""

    mask: int
    grade: int
    positions: Tuple[int, ...]
    label: str


class Basis:
    """Ordered blade set of an algebra plus the mask/index/label maps.

    Attributes:
        signature (Signature): The generating vectors.
        n (int): Number of basis vectors.
        dim (int): Number of blades (``2^n``).
        blades (tuple[BasisBlade, ...]): Blades in canonical order.
        masks (tuple[int, ...]): ``masks[index]`` is the mask of the index'th blade.
        index_of (tuple[int, ...]): ``index_of[mask]`` is the canonical index.
        full_mask (int): Mask of the pseudoscalar.
        ambiguous_labels (set[str]): Labels rendered by more than one blade;
            they are refused by :meth:`lookup` and :meth:`parse`.
    """

    def __init__(self, signature: Signature):
        self.signature = signature
        self.n = signature.n
        self.dim = 1 << self.n
        self.full_mask = self.dim - 1

        subscripts = signature.labels
        blades = []
        for mask in enumerate_masks(self.n):
            positions = mask_positions(mask)
            label = BLADE_PREFIX + "".join(subscripts[i] for i in positions)
            blades.append(BasisBlade(mask, len(positions), positions, label))
        self.blades = tuple(blades)
        self.masks = tuple(b.mask for b in self.blades)

        index_of = [0] * self.dim
        for index, mask in enumerate(self.masks):
            index_of[mask] = index
        self.index_of = tuple(index_of)

        # Colliding renderings (e.g. "e12" for e1^e2 and for a vector "12")
        # stay constructible; only the label boundary refuses them.
        self._by_label: Dict[str, BasisBlade] = {}
        self.ambiguous_labels: Set[str] = set()
        for blade in self.blades:
            if blade.label in self._by_label:
                self.ambiguous_labels.add(blade.label)
            else:
                self._by_label[blade.label] = blade
        for label in self.ambiguous_labels:
            del self._by_label[label]
        if self.ambiguous_labels:
            logger.debug(
                "%d blade labels of %s render ambiguously and cannot be looked up",
                len(self.ambiguous_labels), signature,
            )

        self._grade_blades = tuple(
            tuple(b for b in self.blades if b.grade == k) for k in range(self.n + 1)
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def blade(self, mask: int) -> BasisBlade:
        return self.blades[self.index_of[mask]]

    def label(self, mask: int) -> str:
        return self.blades[self.index_of[mask]].label

    @property
    def labels(self) -> List[str]:
        return [b.label for b in self.blades]

    def grade_blades(self, grade: int) -> Tuple[BasisBlade, ...]:
        """Blades of one grade in canonical order."""
        return self._grade_blades[grade]

    def grade_masks(self, grade: int, device="cpu") -> torch.Tensor:
        """Long tensor of the masks of one grade, canonical order."""
        return torch.tensor(
            [b.mask for b in self._grade_blades[grade]], dtype=torch.long, device=device
        )

    def lookup(self, label: str) -> BasisBlade:
        """Exact canonical label to blade.

        Raises:
            BladeLookupError: ``label`` is not a canonical blade name, or
                names more than one blade.
        """
        if isinstance(label, str) and label in self.ambiguous_labels:
            raise BladeLookupError(f"Blade label {label!r} names more than one blade")
        try:
            return self._by_label[label]
        except (KeyError, TypeError):
            raise BladeLookupError(f"Unknown blade {label!r}") from None

    def parse(self, label: str) -> Tuple[int, int]:
        """Decompose a blade label into ``(mask, sign)``.

        The subscripts may appear in any order (``"e21"`` is ``-e12``); the
        sign is the parity of the permutation into declared order.

        Raises:
            ParseError: unknown subscript, repeated vector or ambiguous split.
        """
        if not isinstance(label, str) or not label.startswith(BLADE_PREFIX):
            raise ParseError(f"Blade label must start with {BLADE_PREFIX!r}, got {label!r}")

        body = label[len(BLADE_PREFIX):]
        splits = self._decompose(body)
        if not splits:
            raise ParseError(
                f"Cannot decompose {label!r} into subscripts {list(self.signature.labels)}"
            )
        if len(splits) > 1:
            raise ParseError(f"Blade label {label!r} splits ambiguously: {splits}")

        positions = splits[0]
        mask = 0
        for pos in positions:
            mask |= 1 << pos
        sign = -1 if permutation_parity(positions) else 1
        return mask, sign

    def _decompose(self, body: str) -> List[Tuple[int, ...]]:
        """Every split of ``body`` into distinct known subscripts."""
        subscripts = self.signature.labels
        found: List[Tuple[int, ...]] = []

        def walk(offset: int, used: Tuple[int, ...]) -> None:
            if offset == len(body):
                found.append(used)
                return
            for pos, sub in enumerate(subscripts):
                if pos not in used and body.startswith(sub, offset):
                    walk(offset + len(sub), used + (pos,))

        walk(0, ())
        return found

    def __len__(self) -> int:
        return self.dim

    def __iter__(self):
        return iter(self.blades)
