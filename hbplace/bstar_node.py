"""Nodes of a B*-tree describing a compacted floorplan."""

from __future__ import annotations

from collections import deque
from typing import Iterator, Optional


class BStarTreeNode:
    """A B*-tree node naming one module.

    The left child is placed to the right of this module, the right child
    directly above it.
    """

    __slots__ = ("module_name", "left", "right", "parent")

    def __init__(self, module_name: str) -> None:
        self.module_name = module_name
        self.left: Optional[BStarTreeNode] = None
        self.right: Optional[BStarTreeNode] = None
        self.parent: Optional[BStarTreeNode] = None

    def __repr__(self) -> str:
        return f"BStarTreeNode({self.module_name!r})"

    def children(self) -> Iterator[BStarTreeNode]:
        """Yield the existing children, left first."""
        if self.left is not None:
            yield self.left
        if self.right is not None:
            yield self.right

    def clone(self) -> BStarTreeNode:
        """Return a deep copy of this node and its subtree (without parent)."""
        copy = BStarTreeNode(self.module_name)
        if self.left is not None:
            copy.left = self.left.clone()
            copy.left.parent = copy
        if self.right is not None:
            copy.right = self.right.clone()
            copy.right.parent = copy
        return copy

    def is_leaf(self) -> bool:
        """Return True if the node has no children."""
        return self.left is None and self.right is None

    def is_left_child(self) -> bool:
        """Return True if this node is its parent's left child."""
        return self.parent is not None and self.parent.left is self

    def is_right_child(self) -> bool:
        """Return True if this node is its parent's right child."""
        return self.parent is not None and self.parent.right is self

    def count_subtree_nodes(self) -> int:
        """Count the nodes of the subtree rooted here, this node included."""
        count = 0
        pending = deque([self])
        while pending:
            node = pending.popleft()
            count += 1
            pending.extend(node.children())
        return count