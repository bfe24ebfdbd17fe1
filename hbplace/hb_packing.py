"""Packing of a complete HB*-tree: free modules plus symmetry islands."""

from __future__ import annotations

from collections import deque
from typing import (
    Any,
    Iterable,
    List,
    MutableMapping,
    MutableSet,
    Optional,
    Sequence,
)

from hbplace.asf_packing import INT_MAX, ContourLike, SymmetryGroupLike
from hbplace.hb_node import HBNodeType, HBStarTreeNode
from hbplace.module import Module


def _bounding_area(modules: Iterable[Module]) -> int:
    placed = list(modules)
    if not placed:
        return 0
    min_x = min([INT_MAX, *(m.x for m in placed)])
    min_y = min([INT_MAX, *(m.y for m in placed)])
    max_x = max([0, *(m.right for m in placed)])
    max_y = max([0, *(m.top for m in placed)])
    return (max_x - min_x) * (max_y - min_y)


class HBPackingMixin:
    """Packing behaviour for an HB*-tree.

    A class using this mixin provides ``root``, ``modules``,
    ``symmetry_groups``, ``symmetry_group_nodes``, ``horizontal_contour``,
    ``vertical_contour``, ``total_area``, ``is_packed`` and
    ``modified_subtrees``.
    """

    root: Optional[HBStarTreeNode]
    modules: MutableMapping[str, Module]
    symmetry_groups: Sequence[SymmetryGroupLike]
    symmetry_group_nodes: MutableMapping[str, HBStarTreeNode]
    horizontal_contour: ContourLike
    vertical_contour: ContourLike
    total_area: int
    is_packed: bool
    modified_subtrees: MutableSet[HBStarTreeNode]

    def _reset_contours(self) -> None:
        self.horizontal_contour.clear()
        self.vertical_contour.clear()
        self.horizontal_contour.add_segment(0, INT_MAX, 0)
        self.vertical_contour.add_segment(0, INT_MAX, 0)

    def _add_rectangle(self, x: int, y: int, width: int, height: int) -> None:
        self.horizontal_contour.add_segment(x, x + width, y + height)
        self.vertical_contour.add_segment(y, y + height, x + width)

    def _anchor_x(self, node: HBStarTreeNode) -> int:
        """x-coordinate given to a node by the B*-tree rules."""
        parent = node.parent
        if parent is None:
            return 0
        left = node.is_left_child()
        if parent.node_type is HBNodeType.MODULE:
            parent_module = self.modules.get(parent.module_name)
            if parent_module is None:
                return 0
            return parent_module.right if left else parent_module.x
        if parent.node_type is HBNodeType.HIERARCHY:
            if not left:
                return 0
            tree: Any = parent.asf_tree
            return int(tree.symmetry_axis_position) if tree is not None else 0
        x1, _, x2, _ = parent.contour
        return x2 if left else x1

    def _place(self, node: HBStarTreeNode) -> bool:
        """Place one node; return False if its subtree must be skipped."""
        if node.node_type is HBNodeType.MODULE:
            module = self.modules.get(node.module_name)
            if module is None:
                return False
            x = self._anchor_x(node)
            y = self.horizontal_contour.get_height(x, x + module.width)
            module.set_position(x, y)
            self._add_rectangle(x, y, module.width, module.height)
            return True

        if node.node_type is HBNodeType.HIERARCHY:
            tree: Any = node.asf_tree
            if tree is None:
                return False
            tree.pack()
            island: List[Module] = list(tree.modules.values())
            min_x = min([INT_MAX, *(m.x for m in island)])
            min_y = min([INT_MAX, *(m.y for m in island)])
            max_x = max([0, *(m.right for m in island)])
            max_y = max([0, *(m.top for m in island)])
            width = max_x - min_x
            height = max_y - min_y

            x = self._anchor_x(node)
            y = self.horizontal_contour.get_height(x, x + width)
            dx, dy = x - min_x, y - min_y
            for module in island:
                module.set_position(module.x + dx, module.y + dy)
            self._add_rectangle(x, y, width, height)
            return True

        return True

    def _pack_subtree(self, node: Optional[HBStarTreeNode]) -> None:
        """Pack a subtree in pre-order, left subtree before right subtree."""
        if node is None:
            return
        stack = [node]
        while stack:
            current = stack.pop()
            if not self._place(current):
                continue
            if current.right is not None:
                stack.append(current.right)
            if current.left is not None:
                stack.append(current.left)

    def _nearest_contour_node(self) -> Optional[HBStarTreeNode]:
        if self.root is None:
            return None
        pending = deque([self.root])
        while pending:
            current = pending.popleft()
            if current.node_type is HBNodeType.CONTOUR:
                return current
            pending.extend(current.children())
        return None

    @staticmethod
    def _leftmost_skewed(node: HBStarTreeNode) -> HBStarTreeNode:
        while node.left is not None:
            node = node.left
        return node

    def _update_contour_nodes(self) -> None:
        """Rebuild the contour-node chains hanging off each hierarchy node."""
        for group_name in sorted(self.symmetry_group_nodes):
            hierarchy = self.symmetry_group_nodes[group_name]
            tree: Any = hierarchy.asf_tree
            if tree is None:
                continue
            segments = list(tree.contours[0].segments)

            old_contours: List[HBStarTreeNode] = []
            pending = deque([hierarchy.right] if hierarchy.right is not None else [])
            while pending:
                current = pending.popleft()
                if current.node_type is HBNodeType.CONTOUR:
                    old_contours.append(current)
                    pending.extend(current.children())

            chain: List[HBStarTreeNode] = []
            for index, segment in enumerate(segments):
                contour_node = HBStarTreeNode(
                    HBNodeType.CONTOUR, f"{group_name}_contour_{index}"
                )
                contour_node.set_contour(
                    segment.start, segment.height, segment.end, segment.height
                )
                chain.append(contour_node)

            if chain:
                hierarchy.right = chain[0]
                chain[0].parent = hierarchy
                for upper, lower in zip(chain, chain[1:]):
                    upper.left = lower
                    lower.parent = upper

            dangling = [old.right for old in old_contours if old.right is not None]
            for orphan in dangling:
                nearest = self._nearest_contour_node()
                if nearest is None:
                    continue
                if nearest.right is None:
                    nearest.right = orphan
                    orphan.parent = nearest
                else:
                    anchor = self._leftmost_skewed(nearest.right)
                    anchor.left = orphan
                    orphan.parent = anchor

    def _update_contour_for_subtree(self, node: HBStarTreeNode) -> None:
        """Add every placed rectangle outside ``node``'s subtree to the contours."""
        if self.root is None:
            return
        pending = deque([self.root])
        while pending:
            current = pending.popleft()
            if current is node:
                continue
            if current.node_type is HBNodeType.MODULE:
                module = self.modules.get(current.module_name)
                if module is not None:
                    self._add_rectangle(module.x, module.y, module.width, module.height)
            elif current.node_type is HBNodeType.HIERARCHY:
                tree: Any = current.asf_tree
                if tree is not None:
                    for module in tree.modules.values():
                        self._add_rectangle(
                            module.x, module.y, module.width, module.height
                        )
            pending.extend(child for child in current.children() if child is not node)

    def pack(self) -> bool:
        """Compute all coordinates; return False if the tree is empty."""
        if self.root is None:
            return False
        if self.modified_subtrees:
            self.repack_affected_subtrees()
            return True

        self._reset_contours()
        self._pack_subtree(self.root)
        self.total_area = _bounding_area(self.modules.values())
        self._update_contour_nodes()
        self.is_packed = True
        return True

    def validate_symmetry_island_placement(self) -> bool:
        """Return True if every symmetry island is symmetric-feasible."""
        for group in self.symmetry_groups:
            hierarchy = self.symmetry_group_nodes.get(group.name)
            if hierarchy is None:
                continue
            tree: Any = hierarchy.asf_tree
            if tree is None or not tree.is_symmetric_feasible():
                return False
        return True

    def repack_affected_subtrees(self) -> None:
        """Repack only the subtrees marked as modified, then clear the marks."""
        if not self.modified_subtrees:
            return
        self._reset_contours()

        depths = {}
        roots: List[HBStarTreeNode] = []
        for node in self.modified_subtrees:
            if node in depths:
                continue
            depth = 0
            is_root = True
            ancestor = node.parent
            while ancestor is not None:
                depth += 1
                if ancestor in self.modified_subtrees:
                    is_root = False
                    break
                ancestor = ancestor.parent
            depths[node] = depth
            if is_root:
                roots.append(node)
        roots.sort(key=lambda n: depths[n], reverse=True)

        if self.root is not None and self.root in self.modified_subtrees:
            self._pack_subtree(self.root)
        else:
            for node in roots:
                self._update_contour_for_subtree(node)
                self._pack_subtree(node)

        self.total_area = _bounding_area(self.modules.values())
        self._update_contour_nodes()
        self.modified_subtrees.clear()