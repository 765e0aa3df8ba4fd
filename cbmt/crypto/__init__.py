"""
Hash primitives for CBMT.

This module provides the digests behind the reference merges in
cbmt.core.merge:
- SHA-256 and double SHA-256 (hashlib)
- Keccak-256 (pycryptodome, Ethereum-style)
- BLAKE2b truncated to 32 bytes

Design Notes:
-------------
The tree and proof code never hash anything themselves. A caller picks a
Merge and the Merge decides how two node values collapse into one; these
functions are only the building blocks the shipped merges use.
"""

import hashlib

from Crypto.Hash import keccak


# =============================================================================
# Constants
# =============================================================================

DIGEST_SIZE = 32


# =============================================================================
# Hashing
# =============================================================================


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash.
    
    Used for: the default merge, leaf hashing in the CLI.
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).
    
    Note: this is the original Keccak padding, not FIPS-202 SHA3-256.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def double_sha256(data: bytes) -> bytes:
    """
    Compute SHA-256(SHA-256(data)).
    
    Used for: Bitcoin-style node hashing.
    """
    return sha256(sha256(data))


def blake2b_256(data: bytes) -> bytes:
    """Compute BLAKE2b with a 32-byte digest."""
    return hashlib.blake2b(data, digest_size=DIGEST_SIZE).digest()


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)
