# Bladeworks: Clifford Algebra Table Engine (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Read-only views of an algebra's tables for debugging.

Nothing here participates in construction; every function only reads the
tensors of an already built :class:`~bladeworks.algebra.Algebra`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from log import get_logger

if TYPE_CHECKING:
    from .algebra import Algebra

logger = get_logger(__name__)

TABLE_KINDS = ("geometric", "wedge", "anti_wedge", "left_contraction")


def _signed(label: str, sign: int) -> str:
    if sign == 0:
        return "0"
    return label if sign > 0 else "-" + label


def format_cayley_table(algebra: "Algebra", kind: str = "geometric") -> str:
    """Grid of ``row op column`` products in canonical blade order.

    Args:
        algebra (Algebra): The algebra instance.
        kind (str): geometric, wedge, anti_wedge or left_contraction.

    Returns:
        str: One line per row blade, columns padded to the widest label.
    """
    table = algebra.cayley_table(kind)
    basis = algebra.basis
    indices = table.indices.tolist()
    signs = table.signs.tolist()

    width = max(len(label) for label in basis.labels) + 2

    def pad(s: str) -> str:
        return s.ljust(width)

    lines = [pad("") + "".join(pad(b.label) for b in basis)]
    for a in basis:
        cells = [
            _signed(basis.label(indices[a.mask][b.mask]), int(signs[a.mask][b.mask]))
            for b in basis
        ]
        lines.append(pad(a.label) + "".join(pad(c) for c in cells))
    return "\n".join(line.rstrip() for line in lines)


def format_dual_table(algebra: "Algebra", side: str = "right") -> str:
    """``blade -> signed complement`` lines."""
    table = algebra.dual_table(side)
    basis = algebra.basis
    lines = []
    for blade in basis:
        mask, sign = table.lookup(blade.mask)
        lines.append(f"{blade.label} -> {_signed(basis.label(mask), sign)}")
    return "\n".join(lines)


def format_metric(algebra: "Algebra", grade: int = 1) -> str:
    """Metric tensor G[grade] with blade labels on both axes."""
    blades = algebra.blades_of_grade(grade)
    g = algebra.metrics[grade].tolist()
    labels = [b.label for b in blades]
    width = max([len(s) for s in labels] + [6]) + 2
    lines = ["".ljust(width) + "".join(s.rjust(width) for s in labels)]
    for label, row in zip(labels, g):
        lines.append(label.ljust(width) + "".join(f"{v:g}".rjust(width) for v in row))
    return "\n".join(lines)


def log_tables(algebra: "Algebra", kinds: Optional[List[str]] = None) -> None:
    """Write the requested tables and metrics to the debug log."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    for kind in kinds or TABLE_KINDS:
        logger.debug("%s table of %r:\n%s", kind, algebra, format_cayley_table(algebra, kind))
    for side in ("left", "right"):
        logger.debug("%s dual table:\n%s", side, format_dual_table(algebra, side))
    for k in range(algebra.num_grades):
        logger.debug("G[%d]:\n%s", k, format_metric(algebra, k))
