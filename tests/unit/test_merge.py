"""
Unit tests for merge policies and the merge registry.
"""

import hashlib

import pytest

from cbmt.core.merge import (
    Blake2bMerge,
    DoubleSha256Merge,
    FunctionMerge,
    Keccak256Merge,
    Merge,
    _DigestMerge,
    Sha256Merge,
    U64HasherMerge,
    available_merges,
    get_merge,
)
from cbmt.crypto import keccak256


A = bytes(range(32))
B = bytes(range(32, 64))


class TestHashMerges:
    """Tests for the byte-digest merges."""

    def test_sha256(self):
        """SHA-256 of the concatenation."""
        assert Sha256Merge().merge(A, B) == hashlib.sha256(A + B).digest()

    def test_double_sha256(self):
        """SHA-256 applied twice."""
        once = hashlib.sha256(A + B).digest()
        assert DoubleSha256Merge().merge(A, B) == hashlib.sha256(once).digest()

    def test_keccak256(self):
        """Keccak-256 of the concatenation."""
        assert Keccak256Merge().merge(A, B) == keccak256(A + B)

    def test_blake2b(self):
        """32-byte BLAKE2b of the concatenation."""
        assert Blake2bMerge().merge(A, B) == hashlib.blake2b(A + B, digest_size=32).digest()

    @pytest.mark.parametrize("cls", [Sha256Merge, DoubleSha256Merge, Keccak256Merge, Blake2bMerge])
    def test_order_sensitive(self, cls):
        """merge(a, b) differs from merge(b, a)."""
        m = cls()
        assert m.merge(A, B) != m.merge(B, A)
        assert len(m.merge(A, B)) == 32

    @pytest.mark.parametrize("cls", [Sha256Merge, DoubleSha256Merge, Keccak256Merge, Blake2bMerge])
    def test_default_is_zero_digest(self, cls):
        """Neutral value is 32 zero bytes and merges like any other value."""
        m = cls()
        assert m.default() == bytes(32)
        assert len(m.merge(m.default(), m.default())) == 32

    def test_callable(self):
        """Merges can be called directly."""
        m = Sha256Merge()
        assert m(A, B) == m.merge(A, B)


class TestU64Merge:
    """Tests for the u64 hasher merge."""

    def test_range_and_determinism(self):
        """Output is a deterministic u64."""
        m = U64HasherMerge()
        out = m.merge(42, 20191116)

        assert 0 <= out < 1 << 64
        assert out == U64HasherMerge().merge(42, 20191116)

    def test_order_sensitive(self):
        """Operand order matters."""
        m = U64HasherMerge()
        assert m.merge(1, 2) != m.merge(2, 1)

    def test_default(self):
        """Neutral value is 0."""
        assert U64HasherMerge().default() == 0


class TestFunctionMerge:
    """Tests for FunctionMerge."""

    def test_wraps_function(self):
        """Delegates to the given function."""
        m = FunctionMerge(lambda l, r: r - l, default=0)

        assert m.merge(2, 3) == 1
        assert m.default() == 0
        assert isinstance(m, Merge)

    def test_repr(self):
        """repr names the merge and default."""
        m = FunctionMerge(lambda l, r: l + r, default=0, name="add")
        assert repr(m) == "FunctionMerge(name='add', default=0)"

    def test_abstract_merge(self):
        """Merge cannot be instantiated without merge/default."""
        with pytest.raises(TypeError):
            Merge()

    def test_digest_merge_needs_digest(self):
        """The digest base cannot be instantiated without a digest."""
        with pytest.raises(TypeError):
            _DigestMerge()


class TestRegistry:
    """Tests for the merge registry."""

    def test_available(self):
        """All reference merges are registered."""
        assert available_merges() == ["blake2b", "double-sha256", "keccak256", "sha256", "u64"]

    @pytest.mark.parametrize("name,cls", [
        ("sha256", Sha256Merge),
        ("SHA256", Sha256Merge),
        ("keccak256", Keccak256Merge),
        ("u64", U64HasherMerge),
    ])
    def test_get_merge(self, name, cls):
        """Lookup is case-insensitive and returns instances."""
        assert isinstance(get_merge(name), cls)

    def test_unknown(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown merge"):
            get_merge("md5")
