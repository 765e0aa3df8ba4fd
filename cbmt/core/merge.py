"""
Merge policies for CBMT.

A Merge is the single extension point of the library: it combines two node
values into their parent and names the neutral value of the node type (the
root of an empty tree, and the placeholder for internal nodes before they
are computed).

Merges are stateless policy objects handed to CBMT explicitly. Order
matters: merge(a, b) and merge(b, a) are generally different, matching
hash-of-concatenation semantics.

Reference merges:
- Sha256Merge        sha256(left || right)                 over 32-byte digests
- DoubleSha256Merge  sha256(sha256(left || right))         over 32-byte digests
- Keccak256Merge     keccak256(left || right)              over 32-byte digests
- Blake2bMerge       blake2b-256(left || right)            over 32-byte digests
- U64HasherMerge     blake2b-64(le64(left) || le64(right)) over u64 integers
"""

import hashlib
from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, List, Type, TypeVar

from cbmt.crypto import DIGEST_SIZE, blake2b_256, double_sha256, keccak256, sha256


T = TypeVar("T")

U64_MASK = (1 << 64) - 1


# =============================================================================
# Merge Interface
# =============================================================================


class Merge(ABC, Generic[T]):
    """
    Binary combine operation over node values of type T.

    Subclasses must be deterministic and total over every value the builder
    can produce, including default().
    """

    name: str = ""

    @abstractmethod
    def merge(self, left: T, right: T) -> T:
        """Combine a left and a right child into their parent."""

    @abstractmethod
    def default(self) -> T:
        """Neutral value of T."""

    def __call__(self, left: T, right: T) -> T:
        return self.merge(left, right)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FunctionMerge(Merge[T]):
    """
    Adapt a plain two-argument function into a Merge.

    Example:
        >>> m = FunctionMerge(lambda l, r: r - l, default=0)
        >>> m.merge(2, 3)
        1
    """

    def __init__(self, func: Callable[[T, T], T], default: T, name: str = "function"):
        self._func = func
        self._default = default
        self.name = name

    def merge(self, left: T, right: T) -> T:
        return self._func(left, right)

    def default(self) -> T:
        return self._default

    def __repr__(self) -> str:
        return f"FunctionMerge(name={self.name!r}, default={self._default!r})"


# =============================================================================
# Hash Merges (bytes)
# =============================================================================


class _DigestMerge(Merge[bytes]):
    """Hash of the concatenation of two 32-byte digests."""

    # Empty node placeholder
    EMPTY_NODE = bytes(DIGEST_SIZE)

    @staticmethod
    @abstractmethod
    def _digest(data: bytes) -> bytes:
        """Digest of one byte string."""

    def merge(self, left: bytes, right: bytes) -> bytes:
        return self._digest(left + right)

    def default(self) -> bytes:
        return self.EMPTY_NODE


class Sha256Merge(_DigestMerge):
    name = "sha256"
    _digest = staticmethod(sha256)


class DoubleSha256Merge(_DigestMerge):
    name = "double-sha256"
    _digest = staticmethod(double_sha256)


class Keccak256Merge(_DigestMerge):
    name = "keccak256"
    _digest = staticmethod(keccak256)


class Blake2bMerge(_DigestMerge):
    name = "blake2b"
    _digest = staticmethod(blake2b_256)


# =============================================================================
# Integer Merges
# =============================================================================


class U64HasherMerge(Merge[int]):
    """
    Hash two unsigned 64-bit integers into a third.

    Both words are written little-endian and hashed with an 8-byte BLAKE2b
    digest, read back as a little-endian u64.
    """

    name = "u64"

    def merge(self, left: int, right: int) -> int:
        h = hashlib.blake2b(digest_size=8)
        h.update((left & U64_MASK).to_bytes(8, byteorder="little"))
        h.update((right & U64_MASK).to_bytes(8, byteorder="little"))
        return int.from_bytes(h.digest(), byteorder="little")

    def default(self) -> int:
        return 0


# =============================================================================
# Registry
# =============================================================================


MERGES: Dict[str, Type[Merge]] = {
    Sha256Merge.name: Sha256Merge,
    DoubleSha256Merge.name: DoubleSha256Merge,
    Keccak256Merge.name: Keccak256Merge,
    Blake2bMerge.name: Blake2bMerge,
    U64HasherMerge.name: U64HasherMerge,
}

DEFAULT_MERGE = Sha256Merge.name


def get_merge(name: str) -> Merge:
    """
    Look up a merge by registry name.

    Raises:
        ValueError: if no merge is registered under name
    """
    try:
        return MERGES[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown merge {name!r}, expected one of: {', '.join(available_merges())}"
        ) from None


def available_merges() -> List[str]:
    """Names accepted by get_merge()."""
    return sorted(MERGES)
