# Tests for complements and the anti-wedge in bladeworks/duality.py

import pytest

from bladeworks.algebra import Algebra
from bladeworks.duality import build_dual_table
from bladeworks.tables import build_wedge_table


@pytest.fixture(scope="module")
def r3():
    return Algebra.from_counts(3)


@pytest.fixture(scope="module")
def r4():
    return Algebra.from_counts(4)


def _all_blades(alg):
    return [alg.multivector({b.mask: 1.0}) for b in alg.basis]


class TestDualTables:
    def test_complement_masks(self):
        table = build_dual_table(build_wedge_table(3), "right")
        for mask in range(8):
            assert int(table.indices[mask]) == mask ^ 0b111

    def test_right_complement_wedges_to_pseudoscalar(self, r3):
        I = r3.pseudoscalar()
        for v in _all_blades(r3):
            assert v ^ r3.dual(v) == I

    def test_left_complement_wedges_to_pseudoscalar(self, r3):
        I = r3.pseudoscalar()
        for v in _all_blades(r3):
            assert r3.undual(v) ^ v == I

    def test_bad_side(self):
        with pytest.raises(ValueError):
            build_dual_table(build_wedge_table(2), "up")

    def test_dual_table_lookup(self, r3):
        # e1 ^ e23 = e123
        assert r3.dual_table("right").lookup(0b001) == (0b110, 1)
        # e13 -> -e2 since e13 ^ e2 = -e123
        assert r3.dual_table("right").lookup(0b101) == (0b010, -1)


class TestPoincareDuality:
    @pytest.mark.parametrize("p,q,r", [(2, 0, 0), (3, 0, 0), (4, 0, 0), (2, 1, 0), (2, 0, 1), (3, 1, 0)])
    def test_double_dual_sign(self, p, q, r):
        """dual(dual(v)) = (-1)^(k(n-k)) v for pure grade k."""
        alg = Algebra.from_counts(p, q, r)
        n = alg.n
        for blade in alg.basis:
            v = alg.multivector({blade.mask: 2.5})
            k = blade.grade
            expected = v if (k * (n - k)) % 2 == 0 else -v
            assert alg.dual(alg.dual(v)) == expected

    @pytest.mark.parametrize("p,q,r", [(2, 0, 0), (3, 0, 0), (3, 1, 0), (1, 1, 1)])
    def test_dual_undual_inverse(self, p, q, r):
        alg = Algebra.from_counts(p, q, r)
        v = alg.multivector({m: float(m + 1) for m in range(alg.dim)})
        assert alg.dual(alg.undual(v)) == v
        assert alg.undual(alg.dual(v)) == v

    def test_r3_is_involution(self, r3):
        for v in _all_blades(r3):
            assert v.dual().dual() == v

    def test_r2_vectors_flip(self):
        r2 = Algebra.from_counts(2)
        e1 = r2.blade("e1")
        assert e1.dual().dual() == -e1

    def test_r4_examples(self, r4):
        e1 = r4.blade("e1")
        e12 = r4.blade("e12")
        assert e1.dual().dual() == -e1
        assert e12.dual().dual() == e12


class TestAntiWedge:
    def test_planes_meet_in_line(self, r3):
        assert r3.blade("e12") & r3.blade("e23") == r3.blade("e2")

    def test_pseudoscalar_is_identity(self, r3):
        I = r3.pseudoscalar()
        for v in _all_blades(r3):
            assert I & v == v
            assert v & I == v

    def test_dual_of_wedge(self, r3):
        """a v b = dual(undual(a) ^ undual(b)) for every blade pair."""
        for a in _all_blades(r3):
            for b in _all_blades(r3):
                assert a & b == r3.dual(r3.undual(a) ^ r3.undual(b))

    def test_grade(self, r4):
        # grade 3 v grade 3 = grade 2 in four dimensions
        m = r4.blade("e123") & r4.blade("e234")
        assert m.grades() == {2}

    def test_low_grades_vanish(self, r3):
        assert (r3.blade("e1") & r3.blade("e2")).is_zero()

    def test_meet_alias(self, r3):
        a, b = r3.blade("e12"), r3.blade("e13")
        assert a.meet(b) == r3.anti_wedge(a, b)

    def test_independent_of_squares(self):
        """The anti-wedge only depends on the wedge table."""
        a = Algebra.from_counts(3)
        b = Algebra.from_counts(1, 1, 1)
        assert a.anti_wedge_table.signs.equal(b.anti_wedge_table.signs)
        assert a.anti_wedge_table.indices.equal(b.anti_wedge_table.indices)
