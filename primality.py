"""Primality oracle adapter.

``is_prime_u64`` decides primality of a non-negative value taken as an
unsigned 64-bit integer.  SymPy's ``isprime`` is deterministic below
2**64 (trial division, then Miller-Rabin on fixed bases and a strong
Lucas test), which is the certainty this library promises.
"""
from __future__ import annotations

import logging

from sympy import isprime

logger = logging.getLogger(__name__)

U64_MASK = (1 << 64) - 1


def to_u64(n: int) -> int:
    """Reinterpret ``n`` as an unsigned 64-bit value (two's complement)."""
    return n & U64_MASK


def is_prime_u64(n: int) -> bool:
    """Return whether the low 64 bits of ``n`` form a prime number."""
    u = to_u64(n)
    if u != n:
        logger.debug("primality input %d truncated to 64 bits: %d", n, u)
    if u < 2:
        return False
    return bool(isprime(u))
