"""Shared fixtures for CBMT tests."""

import pytest

from cbmt.core import CBMT, FunctionMerge, Sha256Merge


def wrapping_sub(left: int, right: int) -> int:
    """right - left with 32-bit two's-complement wraparound."""
    return ((right - left + (1 << 31)) % (1 << 32)) - (1 << 31)


@pytest.fixture
def i32_merge():
    """Order-sensitive arithmetic merge over 32-bit integers."""
    return FunctionMerge(wrapping_sub, default=0, name="i32-sub")


@pytest.fixture
def cbmt_i32(i32_merge):
    """Builder over the arithmetic merge."""
    return CBMT(i32_merge)


@pytest.fixture
def cbmt_sha256():
    """Builder over SHA-256."""
    return CBMT(Sha256Merge())
