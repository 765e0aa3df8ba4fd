"""
Complete Binary Merkle Tree.

Conceptual Background:
---------------------
A CBMT commits to an ordered list of leaves of any length with a single
value (the root) without padding the leaf list to a power of two. The tree
is stored implicitly as a flat list of 2L-1 nodes (see cbmt.core.index):
internal nodes first, root at 0, leaves last in their original order.

Two ways to get a root:
- build_merkle_root: streams over the leaves with a work queue and never
  materializes the node list. Cheapest when only the root is needed.
- build_merkle_tree: materializes every node so proofs can be cut from it.

Both produce the same root for the same leaves and merge.

Properties:
----------
- Build root: O(n) merges, O(n) memory for the queue
- Build tree: O(n) merges, 2n-1 nodes
- Prove k leaves: O(k log n)
- Verify: O(k log n)
"""

from collections import deque
from typing import Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from cbmt.core.index import flat_to_leaf, leaf_range, leaf_to_flat, parent, sibling
from cbmt.core.merge import Merge
from cbmt.core.proof import MerkleProof
from cbmt.utils.logger import get_logger

logger = get_logger("tree")

T = TypeVar("T")


# =============================================================================
# Merkle Tree
# =============================================================================


class MerkleTree(Generic[T]):
    """
    Materialized, immutable CBMT.

    Attributes:
        nodes: All 2L-1 node values, root first, leaves last
        merge: Merge the tree was built with
    """

    __slots__ = ("_nodes", "_merge")

    def __init__(self, nodes: Iterable[T], merge: Merge[T]):
        self._nodes: Tuple[T, ...] = tuple(nodes)
        self._merge = merge

    @property
    def nodes(self) -> Tuple[T, ...]:
        return self._nodes

    @property
    def merge(self) -> Merge[T]:
        return self._merge

    @property
    def leaf_count(self) -> int:
        """Number of leaves (0 for the empty tree)."""
        if not self._nodes:
            return 0
        return (len(self._nodes) >> 1) + 1

    @property
    def leaves(self) -> Tuple[T, ...]:
        """Leaf values in original order."""
        if not self._nodes:
            return ()
        return self._nodes[self.leaf_count - 1:]

    def root(self) -> T:
        """
        Get the Merkle root.

        Returns:
            nodes[0], or the merge's neutral value for the empty tree
        """
        if not self._nodes:
            return self._merge.default()
        return self._nodes[0]

    def build_proof(self, leaf_positions: Iterable[int]) -> Optional[MerkleProof[T]]:
        """
        Build a compressed proof for the leaves at the given positions.

        Args:
            leaf_positions: Original (0-based) leaf positions. Duplicates
                are collapsed.

        Returns:
            MerkleProof, or None if the tree is empty, no positions were
            given, or a position is out of range
        """
        positions = set(leaf_positions)
        if not self._nodes or not positions:
            logger.debug("No proof: empty tree or no positions requested")
            return None

        leaf_count = self.leaf_count
        if min(positions) < 0 or max(positions) >= leaf_count:
            logger.debug(f"No proof: positions {sorted(positions)} outside 0..{leaf_count - 1}")
            return None

        indices = sorted((leaf_to_flat(p, leaf_count) for p in positions), reverse=True)

        lemmas: List[T] = []
        queue = deque(indices)

        while queue:
            index = queue.popleft()
            if index == 0:
                if queue:
                    raise RuntimeError("reached the root with pending nodes")
                break

            sib = sibling(index)
            if queue and queue[0] == sib:
                # Sibling is derivable from a requested leaf
                queue.popleft()
            else:
                lemmas.append(self._nodes[sib])

            par = parent(index)
            if par != 0:
                queue.append(par)

        # The verifier sorts its leaves by value, so indices follow the same
        # order. Ties fall back to index order.
        indices.sort(key=lambda i: (self._nodes[i], i))

        logger.debug(f"Built proof: {len(indices)} leaves, {len(lemmas)} lemmas")
        return MerkleProof(indices, lemmas, self._merge)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"MerkleTree(leaves={self.leaf_count}, merge={self._merge!r})"


# =============================================================================
# Builder
# =============================================================================


class CBMT(Generic[T]):
    """
    Builder for roots, trees and proofs over a fixed merge.

    Example:
        >>> cbmt = CBMT(Sha256Merge())
        >>> tree = cbmt.build_merkle_tree(leaves)
        >>> proof = tree.build_proof([0, 3])
        >>> proof.verify(tree.root(), [leaves[0], leaves[3]])
        True
    """

    def __init__(self, merge: Merge[T]):
        self.merge = merge

    def build_merkle_root(self, leaves: Sequence[T]) -> T:
        """
        Compute the root without materializing the tree.

        Leaves are paired from the right end; an odd leftover (the first
        leaf) goes to the front of the queue unmerged. The queue is then
        folded two at a time, the second item popped being the left operand.
        """
        if not leaves:
            return self.merge.default()

        merge = self.merge.merge
        queue = deque()

        n = len(leaves)
        for i in range(n - 2, -1, -2):
            queue.append(merge(leaves[i], leaves[i + 1]))
        if n & 1:
            queue.appendleft(leaves[0])

        while len(queue) > 1:
            right = queue.popleft()
            left = queue.popleft()
            queue.append(merge(left, right))

        return queue.popleft()

    def build_merkle_tree(self, leaves: Sequence[T]) -> MerkleTree[T]:
        """
        Materialize every node of the tree over leaves.

        Internal nodes are filled from index L-2 down to 0, so both children
        of a node are always computed before it.
        """
        n = len(leaves)
        if n == 0:
            return MerkleTree([], self.merge)

        merge = self.merge.merge
        nodes = [self.merge.default()] * (n - 1)
        nodes.extend(leaves)

        for i in range(n - 2, -1, -1):
            nodes[i] = merge(nodes[(i << 1) + 1], nodes[(i << 1) + 2])

        logger.debug(f"Built tree: {n} leaves, {len(nodes)} nodes")
        return MerkleTree(nodes, self.merge)

    def build_merkle_proof(
        self, leaves: Sequence[T], leaf_positions: Iterable[int]
    ) -> Optional[MerkleProof[T]]:
        """Build the tree over leaves and cut a proof for leaf_positions."""
        return self.build_merkle_tree(leaves).build_proof(leaf_positions)

    def retrieve_leaves(
        self, leaves: Sequence[T], proof: MerkleProof[T]
    ) -> Optional[List[T]]:
        """
        Fetch the leaves a proof points to, in the proof's index order.

        Returns:
            Leaf values, or None if leaves or the proof's indices are empty
            or any index lies outside the leaf range
        """
        if not leaves or not proof.indices:
            return None

        leaf_count = len(leaves)
        valid = leaf_range(leaf_count)
        if not all(index in valid for index in proof.indices):
            logger.debug(f"Cannot retrieve: indices {list(proof.indices)} outside {valid}")
            return None

        return [leaves[flat_to_leaf(index, leaf_count)] for index in proof.indices]

    def proof(self, indices: Iterable[int], lemmas: Iterable[T]) -> MerkleProof[T]:
        """Rebuild a proof from its raw (indices, lemmas) pair."""
        return MerkleProof(indices, lemmas, self.merge)

    def __repr__(self) -> str:
        return f"CBMT({self.merge!r})"
