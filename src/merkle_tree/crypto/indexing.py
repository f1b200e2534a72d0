"""
Merkle Tree Proofs - Index Arithmetic

Position arithmetic for a complete binary tree stored as a flat array.
Index 0 is the root and the children of node i live at 2i+1 and 2i+2,
so every left child has an odd index and every right child an even one.
Sibling lookup relies on that parity alone.

None of the child functions check bounds; use is_tree_node() first.
"""

from merkle_tree.crypto.errors import InvalidIndexError


def left_child_index(i: int) -> int:
    return 2 * i + 1


def right_child_index(i: int) -> int:
    return 2 * i + 2


def parent_index(i: int) -> int:
    """
    Get the parent position of a node.

    Raises:
        InvalidIndexError: If i is the root
    """
    if i == 0:
        raise InvalidIndexError("root has no parent")
    return (i - 1) // 2


def sibling_index(i: int) -> int:
    """
    Get the sibling position of a node.

    Odd positions are left children, so their sibling is i + 1.
    Even positions are right children, so their sibling is i - 1.

    Raises:
        InvalidIndexError: If i is the root
    """
    if i == 0:
        raise InvalidIndexError("root has no sibling")
    if i % 2 == 0:
        return i - 1
    return i + 1


def is_tree_node(node_count: int, i: int) -> bool:
    """Check if i is a position inside a node array of node_count entries."""
    return 0 <= i < node_count


def is_internal_node(node_count: int, i: int) -> bool:
    """Check if the node at i has children."""
    return is_tree_node(node_count, left_child_index(i))


def is_leaf_node(node_count: int, i: int) -> bool:
    """Check if i is a valid position without children."""
    return is_tree_node(node_count, i) and not is_internal_node(node_count, i)


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def leaf_range(node_count: int) -> range:
    """
    Get the positions holding leaves.

    For k leaves the array has 2k - 1 nodes and the leaves start at k - 1,
    which is node_count // 2.
    """
    return range(node_count // 2, node_count)


def tree_height(node_count: int) -> int:
    """Number of levels in a complete tree of node_count nodes (0 if empty)."""
    return (node_count + 1).bit_length() - 1 if node_count > 0 else 0
