"""
Input Validation - checks for values entering through outer surfaces.

The core returns None for bad positions and malformed proofs. These
validators let the CLI (and embedding applications) reject input early
with a readable message instead.
"""

from typing import Any, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

MAX_LEAVES = 1 << 20
MAX_POSITIONS = 4096


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if min_val is not None and value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if max_val is not None and value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_hex_string(value: Any, name: str, expected_bytes: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate a hex string (with or without 0x prefix).

    Args:
        value: Value to validate
        name: Field name
        expected_bytes: Expected byte length when decoded

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    hex_str = value[2:] if value.startswith(("0x", "0X")) else value

    if len(hex_str) % 2 != 0:
        return False, f"{name} has odd length, invalid hex"

    try:
        bytes.fromhex(hex_str)
    except ValueError:
        return False, f"{name} contains invalid hex characters"

    if expected_bytes is not None:
        actual_bytes = len(hex_str) // 2
        if actual_bytes != expected_bytes:
            return False, f"{name} must be {expected_bytes} bytes, got {actual_bytes}"

    return True, ""


def validate_leaves(leaves: Any, max_length: int = MAX_LEAVES) -> Tuple[bool, str]:
    """Validate a leaf list: a non-empty list/tuple no longer than max_length."""
    if not isinstance(leaves, (list, tuple)):
        return False, f"leaves must be list/tuple, got {type(leaves).__name__}"

    if not leaves:
        return False, "leaves must not be empty"

    if len(leaves) > max_length:
        return False, f"leaves exceeds max length {max_length}, got {len(leaves)}"

    return True, ""


def validate_positions(
    positions: Any,
    leaf_count: int,
    max_length: int = MAX_POSITIONS,
) -> Tuple[bool, str]:
    """
    Validate requested leaf positions against a tree's leaf count.

    Args:
        positions: Positions to validate
        leaf_count: Number of leaves in the tree
        max_length: Maximum number of positions

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(positions, (list, tuple)):
        return False, f"positions must be list/tuple, got {type(positions).__name__}"

    if not positions:
        return False, "positions must not be empty"

    if len(positions) > max_length:
        return False, f"positions exceeds max length {max_length}, got {len(positions)}"

    for position in positions:
        valid, err = validate_integer(position, "position", 0, leaf_count - 1)
        if not valid:
            return False, err

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_integer",
    "validate_hex_string",
    "validate_leaves",
    "validate_positions",
    "MAX_LEAVES",
    "MAX_POSITIONS",
]
