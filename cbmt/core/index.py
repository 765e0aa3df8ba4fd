"""
Index arithmetic for the implicit tree array.

A tree over L leaves is a flat list of 2L-1 nodes. Position 0 is the root,
internal nodes fill 0..L-2 and the leaves fill L-1..2L-2 in their original
order. Children of node i sit at 2i+1 (left) and 2i+2 (right), so left
children always have odd indices and right children even non-zero ones.

    flat:     0
            /   \\
           1     2          leaves [a, b, c, d, e], L = 5
          / \\   / \\
         3   4 5   6        a=4  b=5  c=6  d=7  e=8
        / \\
       7   8
"""


def sibling(index: int) -> int:
    """Return the other child of index's parent. The root is its own sibling (0)."""
    if index == 0:
        return 0
    return ((index + 1) ^ 1) - 1


def parent(index: int) -> int:
    """Return the parent of index. The root maps to itself."""
    if index == 0:
        return 0
    return (index - 1) >> 1


def is_left(index: int) -> bool:
    """True if index is a left child."""
    return index & 1 == 1


def leaf_to_flat(position: int, leaf_count: int) -> int:
    """Map an original leaf position to its flat index."""
    return leaf_count + position - 1


def flat_to_leaf(index: int, leaf_count: int) -> int:
    """Map a flat index in the leaf range back to the original leaf position."""
    return index - leaf_count + 1


def leaf_range(leaf_count: int) -> range:
    """Flat indices occupied by leaves in a tree of leaf_count leaves."""
    if leaf_count <= 0:
        return range(0)
    return range(leaf_count - 1, (leaf_count << 1) - 1)
