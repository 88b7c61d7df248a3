"""
Integer width layer.

An IntWidth is the runtime stand-in for a fixed-width machine integer
type: a bit count and a signedness.  It fixes the *domain* of values
an operation accepts and the wrap-around rule applied when an
intermediate result escapes that domain.

Python's own int never overflows, so wrapping is explicit here:
every arithmetic step that could overflow in a fixed-width host is
passed through ``wrap``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IntWidth:
    """
    A two's-complement integer type of ``bits`` bits.

    Signed widths span [-2**(bits-1), 2**(bits-1) - 1], unsigned
    widths span [0, 2**bits - 1].
    """

    bits: int
    signed: bool = True

    def __post_init__(self):
        if self.bits < 1:
            raise ValueError(f"bits ({self.bits}) must be >= 1")

    @property
    def name(self) -> str:
        return f"{'int' if self.signed else 'uint'}{self.bits}"

    @property
    def modulus(self) -> int:
        return 1 << self.bits

    @property
    def lo(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def hi(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else self.modulus - 1

    @property
    def size(self) -> int:
        """Total number of representable values."""
        return self.modulus

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def wrap(self, raw: int) -> int:
        """Reduce a raw result into range the way fixed-width hardware does."""
        if self.lo <= raw <= self.hi:
            return raw
        return self.lo + (raw - self.lo) % self.modulus

    def as_signed(self) -> IntWidth:
        """The signed width with the same number of bits."""
        return self if self.signed else IntWidth(self.bits, signed=True)

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Common width presets
# ---------------------------------------------------------------------------

INT8 = IntWidth(8)
INT16 = IntWidth(16)
INT32 = IntWidth(32)
INT64 = IntWidth(64)
UINT8 = IntWidth(8, signed=False)
UINT16 = IntWidth(16, signed=False)
UINT32 = IntWidth(32, signed=False)
UINT64 = IntWidth(64, signed=False)

# Host native words
INT = INT64
UINT = UINT64

# Small widths useful for exhaustive verification
INT4 = IntWidth(4)
UINT4 = IntWidth(4, signed=False)
