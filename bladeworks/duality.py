# Bladeworks: Clifford Algebra Table Engine
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Hodge-style complements and the regressive (anti-wedge) product.

The complement of blade ``a`` is ``a ^ full_mask``. Its sign makes the
wedge with ``a`` land on the unit pseudoscalar:

    left:   comp(a) ^ a = sign * I
    right:  a ^ comp(a) = sign * I

Left and right complements are mutual inverses, so the anti-wedge

    a v b = right( left(a) ^ left(b) )

is the meet dual to the wedge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import torch

from .tables import CayleyTable

SIDES = ("left", "right")


@dataclass(frozen=True)
class DualTable:
    """Immutable blade -> signed complement blade map.

    Attributes:
        side (str): ``left`` or ``right``.
        indices (torch.Tensor): Complement masks ``[D]`` (long).
        signs (torch.Tensor): Signs ``[D]`` (float64, +1 / -1).
    """

    side: str
    indices: torch.Tensor
    signs: torch.Tensor

    def lookup(self, mask: int) -> Tuple[int, int]:
        return int(self.indices[mask].item()), int(self.signs[mask].item())


def build_dual_table(wedge: CayleyTable, side: str) -> DualTable:
    """Complement table read off the wedge table.

    Args:
        wedge (CayleyTable): Outer product table of the algebra.
        side (str): ``left`` uses ``wedge[comp, a]``, ``right`` uses ``wedge[a, comp]``.
    """
    if side not in SIDES:
        raise ValueError(f"side must be one of {SIDES}, got {side!r}")
    dim = wedge.dim
    masks = torch.arange(dim, device=wedge.indices.device)
    complement = masks ^ (dim - 1)
    if side == "left":
        signs = wedge.signs[complement, masks]
    else:
        signs = wedge.signs[masks, complement]
    return DualTable(side, complement, signs.clone())


def build_anti_wedge_table(wedge: CayleyTable, left: DualTable, right: DualTable) -> CayleyTable:
    """Regressive product table from the complements and the wedge table.

    The sign is the product of the left-dual signs of both operands, the
    wedge sign of the complements and the right-dual sign of that wedge.
    A zero intermediate wedge gives a zero entry.
    """
    la = left.indices.unsqueeze(1)
    lb = left.indices.unsqueeze(0)
    w_idx = wedge.indices[la, lb]
    w_sign = wedge.signs[la, lb]

    r_idx = right.indices[w_idx]
    r_sign = right.signs[w_idx]

    signs = left.signs.unsqueeze(1) * left.signs.unsqueeze(0) * w_sign * r_sign
    return CayleyTable("anti_wedge", r_idx, signs)
