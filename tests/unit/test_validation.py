"""
Unit tests for input validators.
"""

import pytest

from cbmt.utils.validation import (
    validate_hex_string,
    validate_integer,
    validate_leaves,
    validate_positions,
)


class TestValidateInteger:
    """Tests for validate_integer."""

    def test_in_range(self):
        assert validate_integer(5, "x", 0, 10) == (True, "")

    def test_bounds(self):
        """Values outside the bounds are rejected with a message."""
        valid, err = validate_integer(-1, "x", 0, 10)
        assert not valid and ">= 0" in err

        valid, err = validate_integer(11, "x", 0, 10)
        assert not valid and "<= 10" in err

    @pytest.mark.parametrize("value", ["1", 1.0, True, None])
    def test_type(self, value):
        """Only real ints are accepted."""
        valid, _ = validate_integer(value, "x")
        assert not valid


class TestValidateHex:
    """Tests for validate_hex_string."""

    @pytest.mark.parametrize("value", ["", "00", "0xabcd", "ABCDEF"])
    def test_valid(self, value):
        assert validate_hex_string(value, "h")[0]

    @pytest.mark.parametrize("value", ["abc", "0xzz", 12, b"00"])
    def test_invalid(self, value):
        assert not validate_hex_string(value, "h")[0]

    def test_expected_length(self):
        """Decoded length is checked when requested."""
        assert validate_hex_string("00" * 32, "h", expected_bytes=32)[0]
        valid, err = validate_hex_string("00" * 31, "h", expected_bytes=32)
        assert not valid and "32 bytes" in err


class TestValidateLeavesPositions:
    """Tests for leaf and position list validation."""

    def test_leaves(self):
        assert validate_leaves([b"a"])[0]
        assert not validate_leaves([])[0]
        assert not validate_leaves("abc")[0]
        assert not validate_leaves([1, 2, 3], max_length=2)[0]

    def test_positions(self):
        """Positions must be ints within the leaf range."""
        assert validate_positions([0, 4], 5)[0]
        assert not validate_positions([], 5)[0]
        assert not validate_positions([5], 5)[0]
        assert not validate_positions([-1], 5)[0]
        assert not validate_positions(["0"], 5)[0]
        assert not validate_positions([0, 1, 2], 5, max_length=2)[0]
