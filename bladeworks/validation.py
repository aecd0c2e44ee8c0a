# Bladeworks: Clifford Algebra Table Engine (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Lightweight operand validation for the algebra facade.

All checks use ``assert`` so they are free under ``python -O``.
Set ``VALIDATE = False`` to disable even without the -O flag.
Mathematical failures (zero norms, bad grades) are not checked here; they
raise :mod:`bladeworks.errors` exceptions unconditionally.
"""

import torch

VALIDATE = True


def check_multivector(x, algebra, name: str = "x") -> None:
    """Assert *x* is a :class:`Multivector` of *algebra*."""
    if not VALIDATE:
        return
    from .multivector import Multivector
    assert isinstance(x, Multivector), (
        f"{name}: expected Multivector, got {type(x).__name__}"
    )
    assert x.algebra is algebra, (
        f"{name}: multivector belongs to {x.algebra!r}, not {algebra!r}"
    )


def check_tensor(x: torch.Tensor, algebra, name: str = "x") -> None:
    """Assert *x* is a dense coefficient tensor for *algebra*.

    Checks ``x.ndim >= 1`` and ``x.shape[-1] == algebra.dim``.
    """
    if not VALIDATE:
        return
    assert isinstance(x, torch.Tensor), (
        f"{name}: expected torch.Tensor, got {type(x).__name__}"
    )
    assert x.ndim >= 1, (
        f"{name}: expected ndim >= 1, got shape {tuple(x.shape)}"
    )
    assert x.shape[-1] == algebra.dim, (
        f"{name}: last dim should be {algebra.dim} (algebra dim), "
        f"got {x.shape[-1]} (shape {tuple(x.shape)})"
    )
