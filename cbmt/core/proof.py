"""
Multi-leaf Merkle proofs.

A MerkleProof is the complete, standalone state needed to check that a set
of leaves belongs to a tree with a known root:

- indices: flat indices of the proven leaves, ordered by leaf value
- lemmas:  sibling values the verifier cannot derive from those leaves,
           in the order the proof walk discovered them

Verification
------------
The verifier sorts the leaves it holds by value and pairs them with the
value-ordered indices. The (index, value) pairs are then walked from the
largest index down. At each step the sibling comes either from the next
pending pair (when it is exactly the sibling position) or from the next
lemma. The pair collapses into its parent, which goes to the back of the
queue. The proof is valid only if the walk lands on index 0 with every
lemma and every pending pair consumed.

Malformed proofs never raise: root() returns None and verify() False.
"""

from collections import deque
from typing import Deque, Generic, Iterable, Optional, Sequence, Tuple, TypeVar

from cbmt.core.index import is_left, parent, sibling
from cbmt.core.merge import Merge
from cbmt.utils.logger import get_logger

logger = get_logger("proof")

T = TypeVar("T")

_EXHAUSTED = object()


class MerkleProof(Generic[T]):
    """
    Compressed proof of inclusion for one or more leaves.

    Attributes:
        indices: Value-ordered flat indices of the proven leaves
        lemmas: Sibling values in discovery order
        merge: Merge used to recompute parents
    """

    __slots__ = ("_indices", "_lemmas", "_merge")

    def __init__(self, indices: Iterable[int], lemmas: Iterable[T], merge: Merge[T]):
        self._indices: Tuple[int, ...] = tuple(indices)
        self._lemmas: Tuple[T, ...] = tuple(lemmas)
        self._merge = merge

    @property
    def indices(self) -> Tuple[int, ...]:
        return self._indices

    @property
    def lemmas(self) -> Tuple[T, ...]:
        return self._lemmas

    @property
    def merge(self) -> Merge[T]:
        return self._merge

    def root(self, leaves: Sequence[T]) -> Optional[T]:
        """
        Recompute the root from a subset of leaves.

        Args:
            leaves: Leaf values, in any order, one per proof index

        Returns:
            The recomputed root, or None if the leaves do not match the
            proof's shape or the proof is malformed
        """
        if not leaves or len(leaves) != len(self._indices):
            logger.debug(
                f"Rejecting proof: {len(leaves)} leaves for {len(self._indices)} indices"
            )
            return None

        if any(index < 0 for index in self._indices):
            logger.debug("Rejecting proof: negative index")
            return None

        pairs = list(zip(self._indices, sorted(leaves)))
        pairs.sort(key=lambda pair: pair[0], reverse=True)

        queue: Deque[Tuple[int, T]] = deque(pairs)
        lemmas = iter(self._lemmas)

        while queue:
            index, node = queue.popleft()

            if index == 0:
                # All lemmas and pending nodes must be consumed
                if next(lemmas, _EXHAUSTED) is _EXHAUSTED and not queue:
                    return node
                logger.debug("Rejecting proof: unconsumed material at root")
                return None

            if queue and queue[0][0] == sibling(index):
                sibling_node = queue.popleft()[1]
            else:
                sibling_node = next(lemmas, _EXHAUSTED)
                if sibling_node is _EXHAUSTED:
                    logger.debug(f"Rejecting proof: lemmas exhausted at index {index}")
                    return None

            if is_left(index):
                parent_node = self._merge.merge(node, sibling_node)
            else:
                parent_node = self._merge.merge(sibling_node, node)

            queue.append((parent(index), parent_node))

        return None

    def verify(self, root: T, leaves: Sequence[T]) -> bool:
        """
        Check the leaves against a claimed root.

        Returns:
            True if root(leaves) succeeds and equals root
        """
        computed = self.root(leaves)
        return computed is not None and computed == root

    def __eq__(self, other) -> bool:
        if not isinstance(other, MerkleProof):
            return NotImplemented
        return self._indices == other._indices and self._lemmas == other._lemmas

    def __hash__(self) -> int:
        return hash((self._indices, self._lemmas))

    def __len__(self) -> int:
        return len(self._indices)

    def __repr__(self) -> str:
        return (
            f"MerkleProof(indices={list(self._indices)}, "
            f"lemmas={len(self._lemmas)}, merge={self._merge!r})"
        )
