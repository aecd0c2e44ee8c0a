# Bladeworks: Clifford Algebra Table Engine
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Cayley tables for the wedge, geometric and contraction products.

Tables are dense ``[2^n, 2^n]`` tensors indexed by operand bitmask:
``indices[a, b]`` is the result blade mask and ``signs[a, b]`` its sign
(+1 / -1), or 0 when the product of the two blades vanishes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import torch


@dataclass(frozen=True)
class CayleyTable:
    """Immutable blade x blade -> signed blade table.

    Attributes:
        kind (str): Product name (``geometric``, ``wedge``, ...).
        indices (torch.Tensor): Result masks ``[D, D]`` (long).
        signs (torch.Tensor): Signs ``[D, D]`` (float64), 0 for a zero product.
    """

    kind: str
    indices: torch.Tensor
    signs: torch.Tensor

    @property
    def dim(self) -> int:
        return self.indices.shape[0]

    def lookup(self, a: int, b: int) -> Optional[Tuple[int, int]]:
        """``(mask, sign)`` of ``e_a op e_b``, or ``None`` for zero."""
        sign = int(self.signs[a, b].item())
        if sign == 0:
            return None
        return int(self.indices[a, b].item()), sign


def popcount(t: torch.Tensor, n: int) -> torch.Tensor:
    """Element-wise number of set bits among the low ``n`` bits."""
    count = torch.zeros_like(t)
    temp = t
    for _ in range(n):
        count += temp & 1
        temp = temp >> 1
    return count


def _mask_of(squares: Sequence[int], value: int) -> int:
    mask = 0
    for i, s in enumerate(squares):
        if s == value:
            mask |= 1 << i
    return mask


def swap_counts(n: int, device="cpu") -> torch.Tensor:
    """Adjacent swaps needed to sort ``positions(a) ++ positions(b)``.

    Equals the number of pairs ``(i in a, j in b)`` with ``i > j``.

    Returns:
        torch.Tensor: ``[D, D]`` long tensor, rows = left operand.
    """
    dim = 1 << n
    indices = torch.arange(dim, device=device)
    A = indices.unsqueeze(1)  # Row
    B = indices.unsqueeze(0)  # Col

    swaps = torch.zeros((dim, dim), dtype=torch.long, device=device)
    for i in range(n):
        a_i = (A >> i) & 1
        # bits of B strictly below bit i
        b_lower = B & ((1 << i) - 1)
        swaps += a_i * popcount(b_lower, n)
    return swaps


def _parity_sign(counts: torch.Tensor) -> torch.Tensor:
    return 1.0 - 2.0 * (counts & 1).to(torch.float64)


def build_wedge_table(n: int, device="cpu") -> CayleyTable:
    """Outer product table: zero on any shared vector, else ``(-1)^swaps``."""
    dim = 1 << n
    indices = torch.arange(dim, device=device)
    A = indices.unsqueeze(1)
    B = indices.unsqueeze(0)

    signs = _parity_sign(swap_counts(n, device))
    disjoint = ((A & B) == 0).to(torch.float64)
    return CayleyTable("wedge", A ^ B, signs * disjoint)


def build_geometric_table(squares: Sequence[int], device="cpu") -> CayleyTable:
    """Geometric product table for per-vector ``squares``.

    A shared vector with square 0 kills the product, square -1 flips the
    sign once, square +1 cancels silently.
    """
    n = len(squares)
    dim = 1 << n
    indices = torch.arange(dim, device=device)
    A = indices.unsqueeze(1)
    B = indices.unsqueeze(0)
    intersection = A & B

    swaps = swap_counts(n, device)
    neg_mask = _mask_of(squares, -1)
    swaps = swaps + popcount(intersection & neg_mask, n)
    signs = _parity_sign(swaps)

    null_mask = _mask_of(squares, 0)
    if null_mask:
        survives = ((intersection & null_mask) == 0).to(torch.float64)
        signs = signs * survives

    return CayleyTable("geometric", A ^ B, signs)


def build_left_contraction_table(geometric: CayleyTable, n: int) -> CayleyTable:
    """Left contraction: grade-(s-r) part of the geometric product.

    Keeps ``e_a e_b`` only where ``grade(a ^ b) == grade(b) - grade(a)``,
    which holds exactly when ``a`` is a subset of ``b``.
    """
    dim = geometric.dim
    indices = torch.arange(dim, device=geometric.indices.device)
    grades = popcount(indices, n)
    lowered = grades.unsqueeze(0) - grades.unsqueeze(1)
    keep = (popcount(geometric.indices, n) == lowered).to(torch.float64)
    return CayleyTable("left_contraction", geometric.indices, geometric.signs * keep)
