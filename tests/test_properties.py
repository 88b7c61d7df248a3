"""Property-based tests using Hypothesis.

These tests verify algebraic properties that must hold for *all* inputs
in ranges where no intermediate value overflows.  They complement the
white-box tests by exploring the input space broadly rather than
targeting specific branches.
"""
from __future__ import annotations

import math

import pytest
from hypothesis import given, settings, assume
from hypothesis.strategies import integers

from intwidth import INT64
from num import HOST, Num

# ---------------------------------------------------------------------------
# Shared configuration
# ---------------------------------------------------------------------------

NUM = Num(INT64)
# Operands whose squares and pairwise products stay inside int64
small = integers(min_value=-(2**31) + 1, max_value=2**31 - 1)
non_negative = integers(min_value=0, max_value=2**31 - 1)
exponents = integers(min_value=0, max_value=40)
bases = integers(min_value=-20, max_value=20)
moduli = integers(min_value=1, max_value=2**31 - 1)


# ===================================================================
# TRIVIAL HELPERS
# ===================================================================

class TestHelperProperties:

    @given(x=small)
    def test_abs_non_negative_and_symmetric(self, x):
        assert NUM.abs(x) >= 0
        assert NUM.abs(-x) == NUM.abs(x)

    @given(x=small)
    def test_sign_times_abs(self, x):
        assert NUM.sign(x) in (-1, 0, 1)
        assert (NUM.sign(x) == 0) == (x == 0)
        assert NUM.sign(x) * NUM.abs(x) == x

    @given(x=small, y=small)
    def test_cmp_antisymmetric(self, x, y):
        assert NUM.cmp(x, y) == -NUM.cmp(y, x)
        assert NUM.cmp(x, x) == 0

    @given(x=small, y=small)
    def test_cmp_abs_matches_cmp_of_abs(self, x, y):
        assert NUM.cmp_abs(x, y) == NUM.cmp(NUM.abs(x), NUM.abs(y))

    @given(x=small, y=small)
    def test_max_min_select_and_bound(self, x, y):
        hi, lo = NUM.max(x, y), NUM.min(x, y)
        assert hi in (x, y) and lo in (x, y)
        assert hi >= x and hi >= y
        assert lo <= x and lo <= y

    @given(x=integers(min_value=INT64.lo, max_value=INT64.hi))
    def test_bits_reconstruct_u64(self, x):
        assert sum(NUM.bit(x, i) << i for i in range(64)) == x % 2**64


# ===================================================================
# POW / POW_MOD
# ===================================================================

class TestPowProperties:

    @given(x=small)
    def test_zero_exponent(self, x):
        assert NUM.pow(x, 0) == 1

    @given(x=bases, a=exponents, b=exponents)
    def test_exponent_sum_host(self, x, a, b):
        assert HOST.pow(x, a + b) == HOST.pow(x, a) * HOST.pow(x, b)

    @given(
        x=integers(min_value=INT64.lo, max_value=INT64.hi),
        a=integers(min_value=0, max_value=2**40),
        b=integers(min_value=0, max_value=2**40),
    )
    def test_exponent_sum_wraps_consistently(self, x, a, b):
        """Wrapping is a ring homomorphism, so the identity survives overflow."""
        assert NUM.pow(x, a + b) == INT64.wrap(NUM.pow(x, a) * NUM.pow(x, b))

    @given(x=integers(min_value=INT64.lo, max_value=INT64.hi), y=exponents)
    def test_pow_matches_modular_reference(self, x, y):
        assert NUM.pow(x, y) == INT64.wrap(pow(x, y, 2**64))

    @given(x=bases, y=exponents, m=moduli)
    @settings(max_examples=300)
    def test_pow_mod_agrees_with_pow(self, x, y, m):
        assume((x, y) != (0, 0))
        assert (HOST.pow_mod(x, y, m) - HOST.pow(x, y)) % m == 0

    @given(x=non_negative, y=non_negative, m=moduli)
    @settings(max_examples=300)
    def test_pow_mod_matches_builtin(self, x, y, m):
        assume((x, y) != (0, 0))
        assume(y > 0 or m > 1)
        # base 2 is a shift, exact only while 2**y fits
        assume(x != 2 or y < 63)
        assert NUM.pow_mod(x, y, m) == pow(x, y, m)


# ===================================================================
# GCD / XGCD
# ===================================================================

class TestDivisorProperties:

    @given(x=small, y=small)
    def test_gcd_symmetric_and_abs_invariant(self, x, y):
        g = NUM.gcd(x, y)
        assert g == NUM.gcd(y, x) == NUM.gcd(NUM.abs(x), NUM.abs(y))
        assert g == math.gcd(x, y)

    @given(x=small)
    def test_gcd_zero_identity(self, x):
        assert NUM.gcd(x, 0) == NUM.abs(x)

    @given(x=small, y=small)
    def test_gcd_divides_both(self, x, y):
        g = NUM.gcd(x, y)
        assume(g != 0)
        assert x % g == 0 and y % g == 0

    @given(x=small, y=small)
    def test_xgcd_bezout(self, x, y):
        g, s, t = NUM.xgcd(x, y)
        assert abs(g) == NUM.gcd(x, y)
        assert s * x + t * y == g

    @given(x=non_negative, y=non_negative)
    def test_xgcd_non_negative_inputs_give_gcd(self, x, y):
        g, s, t = NUM.xgcd(x, y)
        assert g == NUM.gcd(x, y)
        assert s * x + t * y == g

    @given(
        x=integers(min_value=0, max_value=2**64 - 1),
        y=integers(min_value=0, max_value=2**64 - 1),
    )
    def test_xgcd_host_cofactors_exact(self, x, y):
        g, s, t = HOST.xgcd(x, y)
        assert g == math.gcd(x, y)
        assert s * x + t * y == g


# ===================================================================
# SQRT / IS_PRIME
# ===================================================================

class TestRootAndPrimeProperties:

    @given(x=integers(min_value=0, max_value=INT64.hi))
    def test_sqrt_is_floor_root(self, x):
        r = NUM.sqrt(x)
        assert r * r <= x < (r + 1) * (r + 1)

    @given(x=integers(min_value=0, max_value=2**200))
    def test_sqrt_host_matches_isqrt(self, x):
        assert HOST.sqrt(x) == math.isqrt(x)

    @given(x=integers(min_value=-(2**20), max_value=2**20))
    def test_is_prime_sign_invariant(self, x):
        assert NUM.is_prime(x) == NUM.is_prime(-x)

    @given(p=integers(min_value=2, max_value=2**16), q=integers(min_value=2, max_value=2**16))
    def test_products_are_composite(self, p, q):
        assert not NUM.is_prime(p * q)

    @pytest.mark.parametrize("p", [2, 3, 5, 7, 65_537, 2**31 - 1, 2**61 - 1])
    def test_known_primes(self, p):
        assert NUM.is_prime(p)
        assert NUM.is_prime(-p)
