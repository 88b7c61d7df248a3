"""Formal contract for the integer functions.

Each operation is specified as a collection of:
- preconditions: what inputs must satisfy before the operation
- postconditions: what the output must satisfy given valid inputs
- error conditions: what inputs must cause specific exceptions
- algebraic properties: mathematical relationships that must hold

Postconditions compare against independent references (``math.gcd``,
``math.isqrt``, three-argument ``pow``, trial division) rather than
re-running the algorithm under test.

Properties only assert where no intermediate value overflows the
width; outside that region they hold vacuously.

Layers
------
OperationSpec   per-operation contract (pre/post/error/properties)
BranchSpec      every decision point that white-box tests must cover
NumContract     the full contract for one integer width
build_contract() constructs a NumContract for a given width
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable

from intwidth import IntWidth
from num import (
    BIT_WIDTH,
    BitIndexError,
    ModuloByZeroError,
    NegativeExponentError,
    NegativeSquareRootError,
)


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Precondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    name: str
    arity: int
    preconditions: list[Precondition]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition] = field(default_factory=list)
    properties: list[AlgebraicProperty] = field(default_factory=list)
    index_args: tuple[int, ...] = ()    # positions that take a bit index


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class NumContract:
    """Complete contract for the functions at one integer width."""

    width: IntWidth
    operations: dict[str, OperationSpec]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out

    def expected_error(self, op_name: str, *args: int) -> ErrorCondition | None:
        """The first error condition ``args`` trigger for ``op_name``, if any."""
        for ec in self.operations[op_name].error_conditions:
            if ec.trigger(*args):
                return ec
        return None


# Bit indices tried around the valid range [0, BIT_WIDTH)
BIT_INDEX_DOMAIN = range(-2, BIT_WIDTH + 2)

U64_MODULUS = 1 << BIT_WIDTH


# ---------------------------------------------------------------------------
# Helpers used inside the contract predicates
# ---------------------------------------------------------------------------

def ordering(a: int, b: int) -> int:
    return (a > b) - (a < b)


def pow_fits(width: IntWidth, x: int, y: int) -> bool:
    """Whether x**y is representable, without building huge powers."""
    if y < 0:
        return False
    if y == 0 or -1 <= x <= 1:
        return True
    if (abs(x).bit_length() - 1) * y > width.bits:
        return False
    return width.contains(x ** y)


def pow_mod_fits(width: IntWidth, x: int, y: int, m: int) -> bool:
    """Whether every intermediate pow_mod forms is representable.

    Base 2 goes through 1 << y, so 2**y itself must fit.
    """
    if x == 2:
        return pow_fits(width, 2, y)
    return (
        width.contains(x * x)
        and width.contains(abs(x * m))
        and width.contains(m * m)
    )


def is_prime_small(n: int) -> bool:
    """Trial division; only meant for small n."""
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    d = 3
    while d * d <= n:
        if n % d == 0:
            return False
        d += 2
    return True


SMALL_PRIME_LIMIT = 1 << 16


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(width: IntWidth) -> NumContract:
    """Construct the full contract for the functions at ``width``."""

    def abs_fits(*values: int) -> bool:
        return all(width.contains(abs(v)) for v in values)

    def negatable(*values: int) -> bool:
        return all(width.contains(-v) for v in values)

    def in_width(arity: int) -> Precondition:
        return Precondition(
            "inputs_in_width",
            f"All {arity} inputs are values of {width}",
            lambda *args: all(width.contains(v) for v in args),
        )

    # ------------------------------------------------------------ abs
    abs_spec = OperationSpec(
        name="abs",
        arity=1,
        preconditions=[in_width(1)],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result is |x|, wrapped into the width",
                lambda x, result: result == width.wrap(abs(x)),
            ),
            Postcondition(
                "non_negative",
                "Result >= 0 whenever |x| is representable",
                lambda x, result: result >= 0 if abs_fits(x) else True,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "non_negative", "abs(x) >= 0", 1,
                lambda num, x: num.abs(x) >= 0 if abs_fits(x) else True,
            ),
            AlgebraicProperty(
                "symmetric", "abs(-x) == abs(x)", 1,
                lambda num, x: (
                    num.abs(-x) == num.abs(x) if negatable(x) else True
                ),
            ),
        ],
    )

    # ----------------------------------------------------------- sign
    sign_spec = OperationSpec(
        name="sign",
        arity=1,
        preconditions=[in_width(1)],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result is the sign of x",
                lambda x, result: result == ordering(x, 0),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "range", "sign(x) in {-1, 0, 1}", 1,
                lambda num, x: num.sign(x) in (-1, 0, 1),
            ),
            AlgebraicProperty(
                "zero_iff_zero", "sign(x) == 0 iff x == 0", 1,
                lambda num, x: (num.sign(x) == 0) == (x == 0),
            ),
            AlgebraicProperty(
                "sign_times_abs", "sign(x) * abs(x) == x", 1,
                lambda num, x: (
                    num.sign(x) * num.abs(x) == x if abs_fits(x) else True
                ),
            ),
        ],
    )

    # ------------------------------------------------------------ cmp
    cmp_spec = OperationSpec(
        name="cmp",
        arity=2,
        preconditions=[in_width(2)],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result orders x against y",
                lambda x, y, result: result == ordering(x, y),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "antisymmetric", "cmp(x, y) == -cmp(y, x)", 2,
                lambda num, x, y: num.cmp(x, y) == -num.cmp(y, x),
            ),
            AlgebraicProperty(
                "reflexive", "cmp(x, x) == 0", 1,
                lambda num, x: num.cmp(x, x) == 0,
            ),
        ],
    )

    # -------------------------------------------------------- cmp_abs
    cmp_abs_spec = OperationSpec(
        name="cmp_abs",
        arity=2,
        preconditions=[in_width(2)],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result orders |x| against |y|",
                lambda x, y, result: (
                    result == ordering(abs(x), abs(y)) if abs_fits(x, y) else True
                ),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "agrees_with_cmp_of_abs", "cmp_abs(x, y) == cmp(abs(x), abs(y))", 2,
                lambda num, x, y: (
                    num.cmp_abs(x, y) == num.cmp(num.abs(x), num.abs(y))
                    if abs_fits(x, y) else True
                ),
            ),
        ],
    )

    # ------------------------------------------------------- max/min
    max_spec = OperationSpec(
        name="max",
        arity=2,
        preconditions=[in_width(2)],
        postconditions=[
            Postcondition(
                "result_correct", "Result is the larger input",
                lambda x, y, result: result == max(x, y),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "selects_argument", "max(x, y) is x or y", 2,
                lambda num, x, y: num.max(x, y) in (x, y),
            ),
            AlgebraicProperty(
                "upper_bound", "max(x, y) >= x and max(x, y) >= y", 2,
                lambda num, x, y: num.max(x, y) >= x and num.max(x, y) >= y,
            ),
        ],
    )

    min_spec = OperationSpec(
        name="min",
        arity=2,
        preconditions=[in_width(2)],
        postconditions=[
            Postcondition(
                "result_correct", "Result is the smaller input",
                lambda x, y, result: result == min(x, y),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "selects_argument", "min(x, y) is x or y", 2,
                lambda num, x, y: num.min(x, y) in (x, y),
            ),
            AlgebraicProperty(
                "lower_bound", "min(x, y) <= x and min(x, y) <= y", 2,
                lambda num, x, y: num.min(x, y) <= x and num.min(x, y) <= y,
            ),
        ],
    )

    # ------------------------------------------------------------ bit
    bit_spec = OperationSpec(
        name="bit",
        arity=2,
        preconditions=[
            Precondition(
                "value_in_width", f"x is a value of {width}",
                lambda x, i: width.contains(x),
            ),
        ],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result is bit i of x taken as unsigned 64-bit",
                lambda x, i, result: result == ((x % U64_MODULUS) >> i) & 1,
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "index_out_of_range",
                f"BitIndexError when i is outside [0, {BIT_WIDTH - 1}]",
                lambda x, i: not 0 <= i < BIT_WIDTH,
                BitIndexError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "reconstructs_u64", "sum(bit(x, i) << i) == x mod 2**64", 1,
                lambda num, x: (
                    sum(num.bit(x, i) << i for i in range(BIT_WIDTH))
                    == x % U64_MODULUS
                ),
            ),
        ],
        index_args=(1,),
    )

    # ------------------------------------------------------------ pow
    pow_spec = OperationSpec(
        name="pow",
        arity=2,
        preconditions=[in_width(2)],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result is x**y wrapped into the width",
                lambda x, y, result: result == width.wrap(pow(x, y, width.modulus)),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "negative_exponent",
                "NegativeExponentError when y < 0",
                lambda x, y: y < 0,
                NegativeExponentError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "zero_exponent", "pow(x, 0) == 1", 1,
                lambda num, x: num.pow(x, 0) == 1,
            ),
            AlgebraicProperty(
                "exponent_sum", "pow(x, a + b) == pow(x, a) * pow(x, b)", 3,
                lambda num, x, a, b: (
                    num.pow(x, a + b) == width.wrap(num.pow(x, a) * num.pow(x, b))
                    if a >= 0 and b >= 0 and width.contains(a + b) else True
                ),
            ),
        ],
    )

    # -------------------------------------------------------- pow_mod
    pow_mod_spec = OperationSpec(
        name="pow_mod",
        arity=3,
        preconditions=[in_width(3)],
        postconditions=[
            Postcondition(
                "result_congruent",
                "Result is congruent to x**y modulo m (no intermediate overflow, "
                "0**0 excluded: pow_mod(0, 0, m) is 0)",
                lambda x, y, m, result: (
                    (result - pow(x, y, abs(m))) % m == 0
                    if pow_mod_fits(width, x, y, m) and (x, y) != (0, 0)
                    else True
                ),
            ),
            Postcondition(
                "result_reduced",
                "|result| < |m| unless |m| == 1",
                lambda x, y, m, result: abs(m) == 1 or abs(result) < abs(m),
            ),
            Postcondition(
                "non_negative_for_non_negative_base",
                "x >= 0 gives a non-negative residue (no intermediate overflow)",
                lambda x, y, m, result: (
                    result >= 0 if x >= 0 and pow_mod_fits(width, x, y, m) else True
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "negative_exponent",
                "NegativeExponentError when y < 0",
                lambda x, y, m: y < 0,
                NegativeExponentError,
            ),
            ErrorCondition(
                "modulo_by_zero",
                "ModuloByZeroError when m == 0",
                lambda x, y, m: m == 0,
                ModuloByZeroError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "agrees_with_pow", "pow_mod(x, y, m) == pow(x, y) (mod m)", 3,
                lambda num, x, y, m: (
                    (num.pow_mod(x, y, m) - num.pow(x, y)) % m == 0
                    if m > 0 and (x, y) != (0, 0) and pow_fits(width, x, y)
                    and pow_mod_fits(width, x, y, m) else True
                ),
            ),
        ],
    )

    # ------------------------------------------------------------ gcd
    gcd_spec = OperationSpec(
        name="gcd",
        arity=2,
        preconditions=[in_width(2)],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result is gcd(|x|, |y|)",
                lambda x, y, result: (
                    result == math.gcd(x, y) if abs_fits(x, y) else True
                ),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "commutative", "gcd(x, y) == gcd(y, x)", 2,
                lambda num, x, y: num.gcd(x, y) == num.gcd(y, x),
            ),
            AlgebraicProperty(
                "abs_invariant", "gcd(x, y) == gcd(abs(x), abs(y))", 2,
                lambda num, x, y: (
                    num.gcd(x, y) == num.gcd(num.abs(x), num.abs(y))
                    if abs_fits(x, y) else True
                ),
            ),
            AlgebraicProperty(
                "zero_identity", "gcd(x, 0) == abs(x)", 1,
                lambda num, x: num.gcd(x, 0) == num.abs(x),
            ),
            AlgebraicProperty(
                "divides_both", "gcd(x, y) divides x and y", 2,
                lambda num, x, y: (
                    (lambda g: g == 0 or (x % g == 0 and y % g == 0))(num.gcd(x, y))
                    if abs_fits(x, y) else True
                ),
            ),
        ],
    )

    # ----------------------------------------------------------- xgcd
    xgcd_spec = OperationSpec(
        name="xgcd",
        arity=2,
        preconditions=[in_width(2)],
        postconditions=[
            Postcondition(
                "gcd_magnitude",
                "|g| == gcd(|x|, |y|)",
                lambda x, y, result: (
                    abs(result.g) == math.gcd(x, y) if abs_fits(x, y) else True
                ),
            ),
            Postcondition(
                "bezout",
                "s*x + t*y == g",
                lambda x, y, result: (
                    result.s * x + result.t * y == result.g
                    if abs_fits(x, y) else True
                ),
            ),
            Postcondition(
                "non_negative_for_non_negative_inputs",
                "g >= 0 when x >= 0 and y >= 0",
                lambda x, y, result: result.g >= 0 if x >= 0 and y >= 0 else True,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "agrees_with_gcd", "|xgcd(x, y).g| == gcd(x, y)", 2,
                lambda num, x, y: (
                    abs(num.xgcd(x, y).g) == num.gcd(x, y)
                    if abs_fits(x, y) else True
                ),
            ),
        ],
    )

    # ------------------------------------------------------- is_prime
    is_prime_spec = OperationSpec(
        name="is_prime",
        arity=1,
        preconditions=[in_width(1)],
        postconditions=[
            Postcondition(
                "matches_trial_division",
                f"Agrees with trial division for |x| < {SMALL_PRIME_LIMIT}",
                lambda x, result: (
                    result == is_prime_small(abs(x))
                    if abs(x) < SMALL_PRIME_LIMIT and abs_fits(x) else True
                ),
            ),
        ],
        properties=[
            AlgebraicProperty(
                "sign_invariant", "is_prime(x) == is_prime(-x)", 1,
                lambda num, x: (
                    num.is_prime(x) == num.is_prime(-x) if negatable(x) else True
                ),
            ),
        ],
    )

    # ----------------------------------------------------------- sqrt
    sqrt_spec = OperationSpec(
        name="sqrt",
        arity=1,
        preconditions=[in_width(1)],
        postconditions=[
            Postcondition(
                "result_correct",
                "Result is floor(sqrt(x))",
                lambda x, result: result == math.isqrt(x),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "negative_square_root",
                "NegativeSquareRootError when x < 0",
                lambda x: x < 0,
                NegativeSquareRootError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "floor_root", "sqrt(x)**2 <= x < (sqrt(x) + 1)**2", 1,
                lambda num, x: (
                    (lambda r: r * r <= x < (r + 1) * (r + 1))(num.sqrt(x))
                    if x >= 0 else True
                ),
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        # Input validation (_validate)
        BranchSpec("INPUT-VALID", "Every input within the width",
                   "width.contains(v) for all v", "validation"),
        BranchSpec("INPUT-INVALID", "An input outside the width",
                   "not width.contains(v)", "validation"),
        # abs
        BranchSpec("ABS-POSITIVE", "Positive x returned as is", "x > 0", "abs"),
        BranchSpec("ABS-NEGATE", "Zero or negative x negated", "x <= 0", "abs"),
        # bit
        BranchSpec("BIT-IN-RANGE", "Index selects a bit", "0 <= i < 64", "bit"),
        BranchSpec("BIT-INDEX-INVALID", "BitIndexError raised",
                   "i < 0 or i >= 64", "bit"),
        # pow
        BranchSpec("POW-NEG-EXP", "NegativeExponentError raised", "y < 0", "pow"),
        BranchSpec("POW-ZERO-ZERO", "0**0 == 1", "x == 0 and y == 0", "pow"),
        BranchSpec("POW-ZERO-BASE", "0**y == 0", "x == 0 and y > 0", "pow"),
        BranchSpec("POW-ONE-BASE", "1**y == 1", "x == 1", "pow"),
        BranchSpec("POW-TWO-BASE", "2**y as a shift", "x == 2", "pow"),
        BranchSpec("POW-TWO-WIDE-SHIFT", "Shift past the top bit gives 0",
                   "x == 2 and y >= width.bits", "pow"),
        BranchSpec("POW-LOOP", "Square-and-multiply", "x not in {0, 1, 2}", "pow"),
        # pow_mod
        BranchSpec("POWMOD-NEG-EXP", "NegativeExponentError raised",
                   "y < 0", "pow_mod"),
        BranchSpec("POWMOD-ZERO-MOD", "ModuloByZeroError raised",
                   "y >= 0 and m == 0", "pow_mod"),
        BranchSpec("POWMOD-ZERO-BASE", "0**y mod m == 0", "x == 0", "pow_mod"),
        BranchSpec("POWMOD-ONE-BASE-UNIT-MOD", "1**y mod 1 == 0",
                   "x == 1 and m == 1", "pow_mod"),
        BranchSpec("POWMOD-ONE-BASE", "1**y mod m == 1",
                   "x == 1 and m != 1", "pow_mod"),
        BranchSpec("POWMOD-TWO-BASE", "(1 << y) mod m", "x == 2", "pow_mod"),
        BranchSpec("POWMOD-LOOP", "Square-and-multiply reduced mod m",
                   "x not in {0, 1, 2}", "pow_mod"),
        # gcd
        BranchSpec("GCD-BOTH-ZERO", "gcd(0, 0) == 0", "x == 0 and y == 0", "gcd"),
        BranchSpec("GCD-X-ZERO", "gcd(0, y) == |y|", "x == 0 and y != 0", "gcd"),
        BranchSpec("GCD-Y-ZERO", "gcd(x, 0) == |x|", "x != 0 and y == 0", "gcd"),
        BranchSpec("GCD-LOOP", "Euclidean steps", "x != 0 and y != 0", "gcd"),
        # xgcd
        BranchSpec("XGCD-BOTH-ZERO", "(0, 0, 0)", "x == 0 and y == 0", "xgcd"),
        BranchSpec("XGCD-X-ZERO", "(|y|, 0, sign(y))", "x == 0 and y != 0", "xgcd"),
        BranchSpec("XGCD-Y-ZERO", "(|x|, sign(x), 0)", "x != 0 and y == 0", "xgcd"),
        BranchSpec("XGCD-LOOP", "Extended Euclidean steps",
                   "x != 0 and y != 0", "xgcd"),
        # sqrt
        BranchSpec("SQRT-NEGATIVE", "NegativeSquareRootError raised",
                   "x < 0", "sqrt"),
        BranchSpec("SQRT-ZERO", "sqrt(0) == 0", "x == 0", "sqrt"),
        BranchSpec("SQRT-ONE", "sqrt(1) == 1", "x == 1", "sqrt"),
        BranchSpec("SQRT-NEWTON", "Newton iteration", "x >= 2", "sqrt"),
    ]

    return NumContract(
        width=width,
        operations={
            spec.name: spec
            for spec in (
                abs_spec, sign_spec, cmp_spec, cmp_abs_spec, max_spec, min_spec,
                bit_spec, pow_spec, pow_mod_spec, gcd_spec, xgcd_spec,
                is_prime_spec, sqrt_spec,
            )
        },
        branches=branches,
    )
