# Bladeworks: Clifford Algebra Table Engine
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Per-grade metric tensors and basis-change propagation.

For each grade ``k`` an algebra carries:

    M[k]  grade-k blades of this algebra written over the parent's
          grade-k blades (columns = our blades, rows = parent blades)
    G[k]  Gram matrix of the grade-k blades, G[k] = M[k]^T G_parent[k] M[k]

A root algebra has M[k] = I and a diagonal G[k] built from the squares.
Rows and columns follow the canonical in-grade blade order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import torch

from log import get_logger

from .basis import Basis
from .errors import ConstructionError

if TYPE_CHECKING:
    from .algebra import Algebra

logger = get_logger(__name__)


def check_orthogonal(g1: torch.Tensor) -> None:
    """Raise unless ``g1`` is diagonal.

    The diagonal grade-k construction of a root algebra is only valid for an
    orthogonal basis.

    Raises:
        ConstructionError: ``g1`` has a non-zero off-diagonal entry.
    """
    off_diagonal = g1 - torch.diag(torch.diagonal(g1))
    if bool((off_diagonal != 0).any()):
        raise ConstructionError(
            "Root algebra metric must be diagonal (orthogonal basis); "
            f"got G[1] =\n{g1}"
        )


def _previous_grade_index(basis: Basis, grade: int) -> dict:
    return {b.mask: i for i, b in enumerate(basis.grade_blades(grade - 1))}


def _split_first(basis: Basis, grade: int):
    """For each grade-k blade: first vector position, in-grade index of the rest."""
    prev = _previous_grade_index(basis, grade)
    firsts, rests = [], []
    for blade in basis.grade_blades(grade):
        first = blade.positions[0]
        firsts.append(first)
        rests.append(prev[blade.mask & ~(1 << first)])
    return firsts, rests


def root_metric_tensors(basis: Basis, device="cpu") -> List[torch.Tensor]:
    """G[0..n] for a parentless algebra.

    G[1] = diag(squares); the G[k] diagonal entry of ``e_first ^ E_rest`` is
    ``G[1][first, first] * G[k-1][rest, rest]``.
    """
    squares = basis.signature.squares
    metrics = [torch.ones(1, 1, dtype=torch.float64, device=device)]
    if basis.n == 0:
        return metrics

    g1 = torch.diag(torch.tensor(squares, dtype=torch.float64, device=device))
    check_orthogonal(g1)
    metrics.append(g1)

    for k in range(2, basis.n + 1):
        firsts, rests = _split_first(basis, k)
        first_sq = torch.diagonal(g1)[firsts]
        rest_sq = torch.diagonal(metrics[k - 1])[rests]
        metrics.append(torch.diag(first_sq * rest_sq))
    return metrics


def identity_transforms(basis: Basis, device="cpu") -> List[torch.Tensor]:
    """M[0..n] = identity, the transform chain of a root algebra."""
    return [
        torch.eye(len(basis.grade_blades(k)), dtype=torch.float64, device=device)
        for k in range(basis.n + 1)
    ]


def propagate_transforms(basis: Basis, parent: "Algebra", m1: torch.Tensor) -> List[torch.Tensor]:
    """Build M[0..n] from M[1] by wedging inside the parent algebra.

    Column ``index`` of M[k] belongs to our index'th grade-k blade
    ``e_first ^ E_rest``. Its factors are expanded over the parent with the
    ``first`` column of M[1] and the ``rest`` column of M[k-1], wedged with
    the parent's table, and read back over the parent's grade-k blades.

    Args:
        basis (Basis): Blades of the child algebra.
        parent (Algebra): Fully built parent algebra of the same dimension.
        m1 (torch.Tensor): ``[n, n]`` grade-1 transform.

    Returns:
        list[torch.Tensor]: M[k] of shape ``[C(n,k), C(n,k)]``.
    """
    device = m1.device
    transforms = [torch.ones(1, 1, dtype=torch.float64, device=device)]
    if basis.n == 0:
        return transforms
    transforms.append(m1)

    wedge = parent.wedge_table
    rows = parent.basis.grade_masks(1, device)
    for k in range(2, basis.n + 1):
        firsts, rests = _split_first(basis, k)
        left = m1[:, firsts].T                 # [C_k, n]
        right = transforms[k - 1][:, rests].T  # [C_k, C_{k-1}]

        cols = parent.basis.grade_masks(k - 1, device)
        sub_idx = wedge.indices[rows][:, cols]   # [n, C_{k-1}]
        sub_sign = wedge.signs[rows][:, cols]

        terms = left.unsqueeze(-1) * right.unsqueeze(-2) * sub_sign
        out = torch.zeros(len(firsts), parent.dim, dtype=torch.float64, device=device)
        out.index_add_(1, sub_idx.flatten(), terms.flatten(1))

        mk = out[:, parent.basis.grade_masks(k, device)].T
        logger.debug("M[%d] (%s over %s):\n%s", k, basis.signature, parent.signature, mk)
        transforms.append(mk)
    return transforms


def child_metric_tensors(parent: "Algebra", transforms: List[torch.Tensor]) -> List[torch.Tensor]:
    """G[k] = M[k]^T . G_parent[k] . M[k] for every grade."""
    return [
        mk.T @ parent.metrics[k] @ mk
        for k, mk in enumerate(transforms)
    ]


def metric_scalar_product(algebra: "Algebra", A: torch.Tensor, B: torch.Tensor) -> torch.Tensor:
    """Metric scalar product of dense multivectors.

    Sum over grades of (-1)^{k(k-1)/2} a_k^T G[k] b_k. On a root algebra this
    is the scalar part of the geometric product; on a child algebra it uses
    the propagated metric.

    Args:
        algebra (Algebra): The algebra instance.
        A (torch.Tensor): First multivector [..., Dim] (indexed by mask).
        B (torch.Tensor): Second multivector [..., Dim].

    Returns:
        torch.Tensor: Scalar product [...].
    """
    total = torch.zeros(A.shape[:-1], dtype=torch.float64, device=A.device)
    for k in range(algebra.n + 1):
        masks = algebra.basis.grade_masks(k, A.device)
        a_k = A[..., masks].to(torch.float64)
        b_k = B[..., masks].to(torch.float64)
        sign = (-1) ** (k * (k - 1) // 2)
        total = total + sign * ((a_k @ algebra.metrics[k]) * b_k).sum(dim=-1)
    return total
