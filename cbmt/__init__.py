"""
Complete Binary Merkle Tree (CBMT)

A generic Merkle tree library:
- Roots over leaf lists of any length, no power-of-two padding
- Implicit array-backed trees
- Compressed multi-leaf inclusion proofs
- Pluggable merge (hash) policies
"""

from cbmt.core import (
    CBMT,
    MerkleTree,
    MerkleProof,
    Merge,
    FunctionMerge,
    Sha256Merge,
    DoubleSha256Merge,
    Keccak256Merge,
    Blake2bMerge,
    U64HasherMerge,
    get_merge,
)

__version__ = "0.1.0"

__all__ = [
    "CBMT",
    "MerkleTree",
    "MerkleProof",
    "Merge",
    "FunctionMerge",
    "Sha256Merge",
    "DoubleSha256Merge",
    "Keccak256Merge",
    "Blake2bMerge",
    "U64HasherMerge",
    "get_merge",
]
