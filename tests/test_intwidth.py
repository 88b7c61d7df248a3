"""
Tests for the integer width layer.

These verify that the width model itself is correct - ranges,
presets and two's-complement wrap-around.
"""

import pytest
from hypothesis import given
from hypothesis.strategies import integers

from intwidth import (
    IntWidth,
    INT,
    INT4,
    INT8,
    INT16,
    INT32,
    INT64,
    UINT,
    UINT4,
    UINT8,
    UINT64,
)


# ---------------------------------------------------------------------------
# Width construction
# ---------------------------------------------------------------------------

class TestWidthConstruction:
    def test_signed_range(self):
        w = IntWidth(bits=8)
        assert w.lo == -128
        assert w.hi == 127
        assert w.size == 256

    def test_unsigned_range(self):
        w = IntWidth(bits=8, signed=False)
        assert w.lo == 0
        assert w.hi == 255
        assert w.size == 256

    def test_zero_bits_raises(self):
        with pytest.raises(ValueError, match="bits.*must be >= 1"):
            IntWidth(bits=0)

    def test_names(self):
        assert INT8.name == "int8"
        assert UINT64.name == "uint64"
        assert str(INT32) == "int32"

    def test_presets(self):
        assert INT16.lo == -32_768
        assert INT16.hi == 32_767
        assert INT64.hi == 2**63 - 1
        assert UINT64.hi == 2**64 - 1
        assert INT4.all_values() == range(-8, 8)
        assert UINT4.all_values() == range(0, 16)

    def test_host_words_are_64_bit(self):
        assert INT == INT64
        assert UINT == UINT64

    def test_as_signed(self):
        assert UINT8.as_signed() == INT8
        assert INT8.as_signed() is INT8

    def test_widths_are_hashable_values(self):
        assert IntWidth(8) == INT8
        assert len({IntWidth(8), INT8, UINT8}) == 2


# ---------------------------------------------------------------------------
# Wrapping
# ---------------------------------------------------------------------------

class TestWrapUnsigned:
    width = IntWidth(bits=3, signed=False)

    def test_within_range_unchanged(self):
        for v in range(8):
            assert self.width.wrap(v) == v

    def test_wrap_overflow(self):
        assert self.width.wrap(8) == 0
        assert self.width.wrap(9) == 1
        assert self.width.wrap(15) == 7
        assert self.width.wrap(16) == 0

    def test_wrap_underflow(self):
        assert self.width.wrap(-1) == 7
        assert self.width.wrap(-2) == 6
        assert self.width.wrap(-8) == 0

    @given(v=integers(min_value=-100, max_value=100))
    def test_wrap_always_in_range(self, v):
        assert 0 <= self.width.wrap(v) <= 7


class TestWrapSigned:
    def test_positive_overflow_wraps_to_lo_side(self):
        assert INT8.wrap(128) == -128
        assert INT8.wrap(255) == -1
        assert INT8.wrap(256) == 0

    def test_negative_overflow_wraps_to_hi_side(self):
        assert INT8.wrap(-129) == 127
        assert INT4.wrap(-9) == 7

    def test_large_overflow(self):
        assert INT64.wrap(2**64 + 5) == 5
        assert INT64.wrap(2**63) == -(2**63)

    @given(v=integers(min_value=-(2**70), max_value=2**70))
    def test_wrap_is_congruent(self, v):
        w = INT32.wrap(v)
        assert INT32.contains(w)
        assert (w - v) % INT32.modulus == 0


# ---------------------------------------------------------------------------
# Contains
# ---------------------------------------------------------------------------

class TestContains:
    @given(v=integers(min_value=-128, max_value=127))
    def test_int8_contains_all_valid(self, v):
        assert INT8.contains(v)

    def test_int8_excludes_out_of_range(self):
        assert not INT8.contains(128)
        assert not INT8.contains(-129)

    def test_unsigned_excludes_negatives(self):
        assert not UINT4.contains(-1)
        assert UINT4.contains(15)
        assert not UINT4.contains(16)
