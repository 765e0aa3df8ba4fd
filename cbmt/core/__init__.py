"""Tree construction, proofs and merge policies"""
from cbmt.core.index import sibling, parent, is_left, leaf_to_flat, flat_to_leaf, leaf_range
from cbmt.core.merge import (
    Merge,
    FunctionMerge,
    Sha256Merge,
    DoubleSha256Merge,
    Keccak256Merge,
    Blake2bMerge,
    U64HasherMerge,
    MERGES,
    DEFAULT_MERGE,
    get_merge,
    available_merges,
)
from cbmt.core.proof import MerkleProof
from cbmt.core.tree import CBMT, MerkleTree

__all__ = [
    "sibling",
    "parent",
    "is_left",
    "leaf_to_flat",
    "flat_to_leaf",
    "leaf_range",
    "Merge",
    "FunctionMerge",
    "Sha256Merge",
    "DoubleSha256Merge",
    "Keccak256Merge",
    "Blake2bMerge",
    "U64HasherMerge",
    "MERGES",
    "DEFAULT_MERGE",
    "get_merge",
    "available_merges",
    "MerkleProof",
    "CBMT",
    "MerkleTree",
]
