"""Shared fixtures for integer function tests."""
from __future__ import annotations

import pytest

from intwidth import INT4, INT8, UINT4, UINT8
from num import HOST, Num
from settings import VerificationSettings


@pytest.fixture
def host() -> Num:
    return HOST


@pytest.fixture
def int4() -> Num:
    return Num(INT4)


@pytest.fixture
def uint4() -> Num:
    return Num(UINT4)


@pytest.fixture
def int8() -> Num:
    return Num(INT8)


@pytest.fixture
def uint8() -> Num:
    return Num(UINT8)


@pytest.fixture
def quick_settings() -> VerificationSettings:
    """Small sample budget so sampled widths verify quickly."""
    return VerificationSettings(sample_count=300, seed=7)
