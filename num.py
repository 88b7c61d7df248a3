"""Integer functions over fixed-width integers.

``Num`` carries the integer width the functions operate in.  With a
width, every step that would overflow a machine integer of that width
wraps around exactly like the hardware would; with no width the
functions run on Python's unbounded ``int``.

Decision branches are annotated with their branch-IDs (see
contracts.py BranchSpec) so white-box tests can trace coverage back to
the contract.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, NamedTuple

from intwidth import IntWidth
from primality import is_prime_u64, to_u64


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class NumError(ArithmeticError):
    """Base class for precondition violations."""


class NegativeExponentError(NumError, ValueError):
    pass


class ModuloByZeroError(NumError, ZeroDivisionError):
    pass


class NegativeSquareRootError(NumError, ValueError):
    pass


class BitIndexError(NumError, IndexError):
    pass


# ---------------------------------------------------------------------------
# Machine division
# ---------------------------------------------------------------------------

def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity.  Machine integers
    in C, Go, Java and Rust truncate toward zero instead.
    """
    q, r = divmod(a, b)
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def truncmod(a: int, b: int) -> int:
    """Remainder of ``truncdiv``; takes the sign of the dividend."""
    return a - b * truncdiv(a, b)


class XGCDResult(NamedTuple):
    g: int
    s: int
    t: int


BIT_WIDTH = 64


@dataclass(frozen=True)
class Num:
    width: IntWidth | None = None

    # -- internal helpers ---------------------------------------------------

    def _validate(self, *values: int) -> None:
        """Reject inputs that are not values of the width.

        Branches: INPUT-VALID, INPUT-INVALID
        """
        if self.width is None:
            return
        for v in values:
            if not self.width.contains(v):                        # INPUT-INVALID
                raise ValueError(
                    f"{v} is outside {self.width} [{self.width.lo}, {self.width.hi}]"
                )
        # (falls through) INPUT-VALID

    def _fit(self, raw: int) -> int:
        if self.width is None:
            return raw
        return self.width.wrap(raw)

    @property
    def _cofactor_fit(self) -> Callable[[int], int]:
        """Wrap rule for XGCD cofactors: signed, same bit count as the width."""
        if self.width is None:
            return lambda raw: raw
        return self.width.as_signed().wrap

    # -- comparisons --------------------------------------------------------

    def abs(self, x: int) -> int:
        """Absolute value.

        Branches: ABS-POSITIVE, ABS-NEGATE
        """
        self._validate(x)
        if x > 0:                                                 # ABS-POSITIVE
            return x
        return self._fit(-x)                                      # ABS-NEGATE

    def sign(self, x: int) -> int:
        self._validate(x)
        if x < 0:
            return -1
        if x > 0:
            return 1
        return 0

    def cmp(self, x: int, y: int) -> int:
        self._validate(x, y)
        if x < y:
            return -1
        if x > y:
            return 1
        return 0

    def cmp_abs(self, x: int, y: int) -> int:
        ax = self.abs(x)
        ay = self.abs(y)
        if ax < ay:
            return -1
        if ax > ay:
            return 1
        return 0

    def max(self, x: int, y: int) -> int:
        self._validate(x, y)
        return x if x > y else y

    def min(self, x: int, y: int) -> int:
        self._validate(x, y)
        return x if x < y else y

    def bit(self, x: int, i: int) -> int:
        """Bit ``i`` of ``x`` read as an unsigned 64-bit value.

        Branches: BIT-IN-RANGE, BIT-INDEX-INVALID
        """
        self._validate(x)
        if not 0 <= i < BIT_WIDTH:                                # BIT-INDEX-INVALID
            raise BitIndexError(
                f"bit index {i} is outside [0, {BIT_WIDTH - 1}]"
            )
        return (to_u64(x) >> i) & 1                               # BIT-IN-RANGE

    # -- exponentiation -----------------------------------------------------

    def pow(self, x: int, y: int) -> int:
        """x**y by right-to-left square-and-multiply.

        Branches: POW-NEG-EXP, POW-ZERO-ZERO, POW-ZERO-BASE, POW-ONE-BASE,
                  POW-TWO-BASE, POW-TWO-WIDE-SHIFT, POW-LOOP
        """
        self._validate(x, y)
        if y < 0:                                                 # POW-NEG-EXP
            raise NegativeExponentError(f"negative exponent {y}")

        if x == 0:
            if y == 0:                                            # POW-ZERO-ZERO
                return 1
            return 0                                              # POW-ZERO-BASE
        if x == 1:                                                # POW-ONE-BASE
            return 1
        if x == 2:
            return self._shift_one(y)                             # POW-TWO-BASE

        r = 1                                                     # POW-LOOP
        while y > 0:
            if y & 1:
                r = self._fit(r * x)
            x = self._fit(x * x)
            y >>= 1
        return r

    def pow_mod(self, x: int, y: int, m: int) -> int:
        """x**y mod m, reducing after every multiplication.

        The remainder truncates, so a negative ``x`` or ``m`` yields a
        residue with the sign of the dividend.

        Branches: POWMOD-NEG-EXP, POWMOD-ZERO-MOD, POWMOD-ZERO-BASE,
                  POWMOD-ONE-BASE-UNIT-MOD, POWMOD-ONE-BASE,
                  POWMOD-TWO-BASE, POWMOD-LOOP
        """
        self._validate(x, y, m)
        if y < 0:                                                 # POWMOD-NEG-EXP
            raise NegativeExponentError(f"negative exponent {y}")
        if m == 0:                                                # POWMOD-ZERO-MOD
            raise ModuloByZeroError("modulo by zero")

        if x == 0:                                                # POWMOD-ZERO-BASE
            return 0
        if x == 1:
            if m == 1:                                            # POWMOD-ONE-BASE-UNIT-MOD
                return 0
            return 1                                              # POWMOD-ONE-BASE
        if x == 2:                                                # POWMOD-TWO-BASE
            if self.width is None:
                # 2**y is positive, so the truncated remainder is 2**y mod |m|
                return pow(2, y, -m if m < 0 else m)
            return truncmod(self._shift_one(y), m)

        r = 1                                                     # POWMOD-LOOP
        while y > 0:
            if y & 1:
                r = truncmod(self._fit(r * x), m)
            x = truncmod(self._fit(x * x), m)
            y >>= 1
        return r

    def _shift_one(self, y: int) -> int:
        """1 << y in the width; shifting past the top bit leaves zero.

        Branches: POW-TWO-WIDE-SHIFT
        """
        if self.width is not None and y >= self.width.bits:       # POW-TWO-WIDE-SHIFT
            return 0
        return self._fit(1 << y)

    # -- divisors -----------------------------------------------------------

    def gcd(self, x: int, y: int) -> int:
        """Greatest common divisor of |x| and |y|.

        Branches: GCD-BOTH-ZERO, GCD-X-ZERO, GCD-Y-ZERO, GCD-LOOP
        """
        x = self.abs(x)
        y = self.abs(y)

        if x == 0 and y == 0:                                     # GCD-BOTH-ZERO
            return 0
        if x == 0:                                                # GCD-X-ZERO
            return y
        if y == 0:                                                # GCD-Y-ZERO
            return x

        while y != 0:                                             # GCD-LOOP
            x, y = y, truncmod(x, y)
        return x

    def xgcd(self, x: int, y: int) -> XGCDResult:
        """Extended Euclid: (g, s, t) with s*x + t*y == g.

        Cofactors are kept in the signed width with the same bit count,
        wide enough for every cofactor the loop returns.  Signs are not
        normalised: ``g`` is non-negative when both inputs are.

        Branches: XGCD-BOTH-ZERO, XGCD-X-ZERO, XGCD-Y-ZERO, XGCD-LOOP
        """
        self._validate(x, y)
        if x == 0 and y == 0:                                     # XGCD-BOTH-ZERO
            return XGCDResult(0, 0, 0)
        if x == 0:                                                # XGCD-X-ZERO
            return XGCDResult(self.abs(y), 0, self.sign(y))
        if y == 0:                                                # XGCD-Y-ZERO
            return XGCDResult(self.abs(x), self.sign(x), 0)

        cofit = self._cofactor_fit                                # XGCD-LOOP
        old_r, r = x, y
        old_s, s = 1, 0
        old_t, t = 0, 1
        while r != 0:
            q = self._fit(truncdiv(old_r, r))
            old_r, r = r, self._fit(old_r - q * r)
            old_s, s = s, cofit(old_s - q * s)
            old_t, t = t, cofit(old_t - q * t)
        return XGCDResult(old_r, old_s, old_t)

    def is_prime(self, x: int) -> bool:
        """Whether |x| is prime; certain for every |x| below 2**64."""
        return is_prime_u64(self.abs(x))

    # -- roots --------------------------------------------------------------

    def sqrt(self, x: int) -> int:
        """Largest r with r*r <= x, by Newton's method on integers.

        Branches: SQRT-NEGATIVE, SQRT-ZERO, SQRT-ONE, SQRT-NEWTON
        """
        self._validate(x)
        if x < 0:                                                 # SQRT-NEGATIVE
            raise NegativeSquareRootError(f"square root of negative number {x}")
        if x == 0:                                                # SQRT-ZERO
            return 0
        if x == 1:                                                # SQRT-ONE
            return 1

        x0 = truncdiv(x, 2)                                       # SQRT-NEWTON
        x1 = truncdiv(self._fit(x0 + truncdiv(x, x0)), 2)
        while x1 < x0:
            x0 = x1
            x1 = truncdiv(self._fit(x0 + truncdiv(x, x0)), 2)
        return x0


# Python's own unbounded int
HOST = Num()
