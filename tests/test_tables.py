# Bladeworks: Clifford Algebra Table Engine
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Cayley tables against a slow adjacent-swap reference."""

import pytest
import torch

from bladeworks.algebra import Algebra
from bladeworks.basis import mask_positions
from bladeworks.tables import (
    build_geometric_table,
    build_left_contraction_table,
    build_wedge_table,
    swap_counts,
)


# ── Reference ─────────────────────────────────────────────────────────

def _reference_product(squares, a, b, wedge=False):
    """Bubble-sort the concatenated factors, contracting equal neighbours."""
    factors = list(mask_positions(a)) + list(mask_positions(b))
    sign = 1
    changed = True
    while changed:
        changed = False
        i = 0
        while i < len(factors) - 1:
            if factors[i] > factors[i + 1]:
                factors[i], factors[i + 1] = factors[i + 1], factors[i]
                sign = -sign
                changed = True
            elif factors[i] == factors[i + 1]:
                if wedge:
                    return 0, 0
                sign *= squares[factors[i]]
                del factors[i:i + 2]
                changed = True
                continue
            i += 1
    mask = 0
    for f in factors:
        mask |= 1 << f
    return mask, sign


SIGNATURES = [
    (1, 1),
    (1, 1, 1),
    (1, 1, -1),
    (0, 1, 1),
    (1, 1, 1, -1),
    (1, 1, 0, 0),
    (0, -1, 1, -1, 1),
]


@pytest.mark.parametrize("squares", SIGNATURES)
def test_geometric_matches_reference(squares):
    table = build_geometric_table(squares)
    dim = 1 << len(squares)
    for a in range(dim):
        for b in range(dim):
            mask, sign = _reference_product(squares, a, b)
            assert int(table.signs[a, b]) == sign, (a, b)
            if sign != 0:
                assert int(table.indices[a, b]) == mask, (a, b)


@pytest.mark.parametrize("n", [1, 2, 3, 4, 5])
def test_wedge_matches_reference(n):
    table = build_wedge_table(n)
    squares = (1,) * n
    for a in range(1 << n):
        for b in range(1 << n):
            mask, sign = _reference_product(squares, a, b, wedge=True)
            assert int(table.signs[a, b]) == sign, (a, b)
            if sign != 0:
                assert int(table.indices[a, b]) == mask


def test_swap_counts_small():
    swaps = swap_counts(3)
    # e2 e1 needs one swap, e3 e12 needs two
    assert swaps[0b010, 0b001] == 1
    assert swaps[0b100, 0b011] == 2
    assert swaps[0b001, 0b110] == 0


def test_table_dtypes():
    table = build_geometric_table((1, -1, 0))
    assert table.indices.dtype == torch.long
    assert table.signs.dtype == torch.float64
    assert table.indices.shape == (8, 8)
    assert table.dim == 8


def test_lookup():
    table = build_geometric_table((1, 1))
    assert table.lookup(0b10, 0b01) == (0b11, -1)
    assert build_wedge_table(2).lookup(0b01, 0b01) is None


class TestWedgeProperties:
    @pytest.mark.parametrize("n", [2, 3, 4])
    def test_vector_antisymmetry(self, n):
        table = build_wedge_table(n)
        for i in range(n):
            for j in range(n):
                a, b = 1 << i, 1 << j
                if i == j:
                    assert table.signs[a, b] == 0
                else:
                    assert table.indices[a, b] == table.indices[b, a]
                    assert table.signs[a, b] == -table.signs[b, a]

    def test_trivector_sign(self):
        # e13 ^ e2 = -e123
        table = build_wedge_table(3)
        assert table.lookup(0b101, 0b010) == (0b111, -1)

    def test_scalar_is_identity(self):
        table = build_wedge_table(3)
        assert torch.equal(table.indices[0], torch.arange(8))
        assert torch.all(table.signs[0] == 1)


class TestGeometricScenarios:
    def test_euclidean_plane(self):
        table = build_geometric_table((1, 1))
        assert table.lookup(0b01, 0b01) == (0, 1)
        assert table.lookup(0b11, 0b11) == (0, -1)

    def test_negative_vector(self):
        table = build_geometric_table((1, 1, -1))
        assert table.lookup(0b100, 0b100) == (0, -1)
        # e13 e13 = -e1 e1 e3 e3 = +1
        assert table.lookup(0b101, 0b101) == (0, 1)

    def test_null_vector_kills(self):
        table = build_geometric_table((0, 1))
        assert table.lookup(0b01, 0b01) is None
        assert table.lookup(0b11, 0b01) is None
        assert table.lookup(0b10, 0b10) == (0, 1)


class TestLeftContraction:
    @pytest.fixture
    def table(self):
        return build_left_contraction_table(build_geometric_table((1, 1, 1)), 3)

    def test_vector_into_bivector(self, table):
        assert table.lookup(0b001, 0b011) == (0b010, 1)
        assert table.lookup(0b010, 0b011) == (0b001, -1)

    def test_higher_into_lower_vanishes(self, table):
        assert table.lookup(0b011, 0b001) is None

    def test_disjoint_vanishes(self, table):
        assert table.lookup(0b001, 0b010) is None

    def test_scalar_passes_through(self, table):
        for b in range(8):
            assert table.lookup(0, b) == (b, 1)


class TestTableCache:
    def test_same_squares_share_tables(self):
        a = Algebra.from_counts(2, 1)
        b = Algebra.from_basis_spec([(1, "x"), (1, "y"), (-1, "t")])
        assert a.geometric_table is b.geometric_table
        assert a.anti_wedge_table is b.anti_wedge_table

    def test_different_squares_do_not(self):
        a = Algebra.from_counts(3)
        b = Algebra.from_counts(2, 1)
        assert a.geometric_table is not b.geometric_table
