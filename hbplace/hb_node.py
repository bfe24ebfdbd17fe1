"""Nodes of an HB*-tree: modules, symmetry-island hierarchies and contours."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, Optional, Tuple


class HBNodeType(Enum):
    """Kind of an HB*-tree node."""

    MODULE = "module"
    HIERARCHY = "hierarchy"
    CONTOUR = "contour"


class HBStarTreeNode:
    """A node of an HB*-tree.

    MODULE nodes name a single module, HIERARCHY nodes carry the ASF-B*-tree
    of a symmetry island, and CONTOUR nodes hold one horizontal contour
    segment as ``(x1, y1, x2, y2)``.
    """

    __slots__ = ("node_type", "name", "left", "right", "parent", "_asf_tree", "_contour")

    def __init__(self, node_type: HBNodeType, name: str) -> None:
        self.node_type = node_type
        self.name = name
        self.left: Optional[HBStarTreeNode] = None
        self.right: Optional[HBStarTreeNode] = None
        self.parent: Optional[HBStarTreeNode] = None
        self._asf_tree: Any = None
        self._contour: Tuple[int, int, int, int] = (0, 0, 0, 0)

    def __repr__(self) -> str:
        return f"HBStarTreeNode({self.node_type.name}, {self.name!r})"

    @property
    def module_name(self) -> str:
        """The module name for MODULE nodes, otherwise an empty string."""
        return self.name if self.node_type is HBNodeType.MODULE else ""

    @property
    def asf_tree(self) -> Any:
        """The symmetry island's tree for HIERARCHY nodes, otherwise None."""
        if self.node_type is not HBNodeType.HIERARCHY:
            return None
        return self._asf_tree

    @asf_tree.setter
    def asf_tree(self, tree: Any) -> None:
        if self.node_type is HBNodeType.HIERARCHY:
            self._asf_tree = tree

    def set_contour(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Store the contour segment; ignored for non-CONTOUR nodes."""
        if self.node_type is HBNodeType.CONTOUR:
            self._contour = (x1, y1, x2, y2)

    @property
    def contour(self) -> Tuple[int, int, int, int]:
        """The contour segment, or all zeros for non-CONTOUR nodes."""
        if self.node_type is HBNodeType.CONTOUR:
            return self._contour
        return (0, 0, 0, 0)

    def children(self) -> Iterator[HBStarTreeNode]:
        """Yield the existing children, left first."""
        if self.left is not None:
            yield self.left
        if self.right is not None:
            yield self.right

    def is_leaf(self) -> bool:
        """Return True if the node has no children."""
        return self.left is None and self.right is None

    def is_left_child(self) -> bool:
        """Return True if this node is its parent's left child."""
        return self.parent is not None and self.parent.left is self

    def is_right_child(self) -> bool:
        """Return True if this node is its parent's right child."""
        return self.parent is not None and self.parent.right is self

    def clone(self) -> HBStarTreeNode:
        """Return a deep copy of this node and its subtree (without parent)."""
        copy = HBStarTreeNode(self.node_type, self.name)
        if self.node_type is HBNodeType.HIERARCHY and self._asf_tree is not None:
            copy._asf_tree = self._asf_tree.clone()
        elif self.node_type is HBNodeType.CONTOUR:
            copy._contour = self._contour
        if self.left is not None:
            copy.left = self.left.clone()
            copy.left.parent = copy
        if self.right is not None:
            copy.right = self.right.clone()
            copy.right.parent = copy
        return copy