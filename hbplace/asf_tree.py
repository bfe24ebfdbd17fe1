"""ASF-B*-tree: the placement of one symmetry island."""

from __future__ import annotations

import copy
from bisect import insort
from collections import deque
from typing import Dict, List, NamedTuple, Optional, Set, Tuple

from hbplace.asf_packing import (
    INT_MAX,
    ASFPackingMixin,
    ContourLike,
    SymmetryGroupLike,
    SymmetryType,
)
from hbplace.bstar_node import BStarTreeNode
from hbplace.module import Module


class _Segment(NamedTuple):
    start: int
    end: int
    height: int


class _Skyline:
    """A piecewise-constant contour over half-open intervals."""

    def __init__(self) -> None:
        self._segments: List[_Segment] = []

    def clear(self) -> None:
        self._segments.clear()

    def add_segment(self, start: int, end: int, height: int) -> None:
        if end <= start:
            return
        kept: List[_Segment] = []
        for seg in self._segments:
            if seg.end <= start or seg.start >= end:
                kept.append(seg)
                continue
            if seg.start < start:
                kept.append(_Segment(seg.start, start, seg.height))
            if seg.end > end:
                kept.append(_Segment(end, seg.end, seg.height))
        self._segments = sorted(kept)
        insort(self._segments, _Segment(start, end, height))

    def get_height(self, start: int, end: int) -> int:
        heights = [
            seg.height
            for seg in self._segments
            if seg.start < end and seg.end > start
        ]
        return max(heights, default=0)

    @property
    def segments(self) -> List[_Segment]:
        return list(self._segments)


class ASFBStarTree(ASFPackingMixin):
    """Placement of a symmetry island as an automatically symmetric-feasible B*-tree.

    Only representatives appear in the tree; their symmetric counterparts are
    placed by reflection about the symmetry axis when the tree is packed.
    """

    def __init__(self, symmetry_group: Optional[SymmetryGroupLike]) -> None:
        self.root: Optional[BStarTreeNode] = None
        self.symmetry_group = symmetry_group  # type: ignore[assignment]
        self.horizontal_contour: ContourLike = _Skyline()
        self.vertical_contour: ContourLike = _Skyline()
        self.symmetry_axis_position = 0.0
        self.modules: Dict[str, Module] = {}
        self.representative_map: Dict[str, str] = {}
        self.symmetric_pair_map: Dict[str, str] = {}
        self.self_symmetric_modules: List[str] = []
        self.node_map: Dict[str, BStarTreeNode] = {}
        self.modified_nodes: Set[BStarTreeNode] = set()

        if symmetry_group is not None:
            for first, second in symmetry_group.symmetry_pairs:
                self.representative_map[first] = second
                self.representative_map[second] = second
                self.symmetric_pair_map[first] = second
                self.symmetric_pair_map[second] = first
            for name in symmetry_group.self_symmetric:
                self.representative_map[name] = name
                self.self_symmetric_modules.append(name)

    def add_module(self, module: Optional[Module]) -> None:
        """Add a module to the island; None is ignored."""
        if module is None:
            return
        self.modules[module.name] = module

    @staticmethod
    def _rightmost(node: BStarTreeNode) -> BStarTreeNode:
        while node.right is not None:
            node = node.right
        return node

    @staticmethod
    def _leftmost(node: BStarTreeNode) -> BStarTreeNode:
        while node.left is not None:
            node = node.left
        return node

    def construct_initial_tree(self) -> None:
        """Build a tree of the representatives, largest area first."""
        self.root = None
        self.node_map.clear()

        representatives = [
            name for name in sorted(self.modules) if self.is_representative(name)
        ]
        if not representatives:
            return
        representatives.sort(key=lambda name: self.modules[name].area, reverse=True)

        self.root = BStarTreeNode(representatives[0])
        self._register(self.root)

        for name in representatives[1:]:
            node = BStarTreeNode(name)
            if name in self.self_symmetric_modules and not self._vertical:
                anchor = self._leftmost(self.root)
                anchor.left = node
            else:
                anchor = self._rightmost(self.root)
                anchor.right = node
            node.parent = anchor
            self._register(node)

    @property
    def area(self) -> int:
        """Area of the bounding rectangle of all modules."""
        if not self.modules:
            return 0
        min_x = min_y = INT_MAX
        max_x = max_y = 0
        for module in self.modules.values():
            min_x = min(min_x, module.x)
            min_y = min(min_y, module.y)
            max_x = max(max_x, module.right)
            max_y = max(max_y, module.top)
        return (max_x - min_x) * (max_y - min_y)

    @property
    def contours(self) -> Tuple[ContourLike, ContourLike]:
        """The horizontal and vertical contours, in that order."""
        return self.horizontal_contour, self.vertical_contour

    def is_on_boundary(self, module_name: str) -> bool:
        """Return True for self-symmetric modules, which must stay on the boundary."""
        return module_name in self.self_symmetric_modules

    def can_move_node(
        self,
        node: Optional[BStarTreeNode],
        new_parent: Optional[BStarTreeNode],
        as_left_child: bool,
    ) -> bool:
        """Check whether moving ``node`` under ``new_parent`` keeps feasibility."""
        if node is None or new_parent is None:
            return False
        if not self.is_on_boundary(node.module_name):
            return True
        if self._vertical:
            if as_left_child:
                return False
        elif not as_left_child:
            return False

        current = new_parent
        while current.parent is not None:
            if self._vertical and current.parent.left is current:
                return False
            if not self._vertical and current.parent.right is current:
                return False
            current = current.parent
        return True

    def find_node(self, node_name: str) -> Optional[BStarTreeNode]:
        """Look up a node by module name, falling back on a tree search."""
        node = self.node_map.get(node_name)
        if node is not None:
            return node
        return self._find_in_tree(node_name)

    def _register(self, node: BStarTreeNode) -> None:
        pending = deque([node])
        while pending:
            current = pending.popleft()
            self.node_map[current.module_name] = current
            pending.extend(current.children())

    def _unregister(self, node: BStarTreeNode) -> None:
        pending = deque([node])
        while pending:
            current = pending.popleft()
            self.node_map.pop(current.module_name, None)
            pending.extend(current.children())

    def mark_node_for_repack(self, node: Optional[BStarTreeNode]) -> None:
        """Schedule a node to be repacked; None is ignored."""
        if node is not None:
            self.modified_nodes.add(node)

    def get_representative(self, module_name: str) -> str:
        """Return the representative of a module, or "" if it has none."""
        return self.representative_map.get(module_name, "")

    def is_representative(self, module_name: str) -> bool:
        """Return True if the module represents itself."""
        return self.representative_map.get(module_name) == module_name

    def clone(self) -> ASFBStarTree:
        """Return a deep copy sharing only the symmetry group."""
        twin = ASFBStarTree(self.symmetry_group)
        twin.modules = {name: module.copy() for name, module in self.modules.items()}
        twin.representative_map = dict(self.representative_map)
        twin.symmetric_pair_map = dict(self.symmetric_pair_map)
        twin.self_symmetric_modules = list(self.self_symmetric_modules)
        twin.symmetry_axis_position = self.symmetry_axis_position
        if self.root is not None:
            twin.root = self.root.clone()
            twin._register(twin.root)
        twin.horizontal_contour = copy.deepcopy(self.horizontal_contour)
        twin.vertical_contour = copy.deepcopy(self.vertical_contour)
        return twin

    def rotate_module(self, module_name: str) -> bool:
        """Rotate a module, together with its symmetric partner if it has one."""
        module = self.modules.get(module_name)
        if module is None:
            return False
        partner_name = self.symmetric_pair_map.get(module_name)
        if partner_name is not None:
            partner = self.modules.get(partner_name)
            if partner is not None:
                partner.rotate()
        module.rotate()
        return True

    def move_node(self, node_name: str, new_parent_name: str, as_left_child: bool) -> bool:
        """Move a node under a new parent and repack; False if not allowed."""
        node = self.find_node(node_name)
        new_parent = self.find_node(new_parent_name)
        if node is None or new_parent is None:
            return False
        if not self.can_move_node(node, new_parent, as_left_child):
            return False

        old_parent = node.parent
        if old_parent is not None:
            if old_parent.left is node:
                old_parent.left = None
            elif old_parent.right is node:
                old_parent.right = None

        node.parent = new_parent
        if as_left_child:
            existing = new_parent.left
            if existing is not None:
                node.left = existing
                existing.parent = node
            new_parent.left = node
        else:
            existing = new_parent.right
            if existing is not None:
                node.right = existing
                existing.parent = node
            new_parent.right = node

        self.mark_node_for_repack(node)
        self.mark_node_for_repack(new_parent)
        self.mark_node_for_repack(node.parent)
        self._repack_modified_nodes()
        return True

    def swap_nodes(self, node_name1: str, node_name2: str) -> bool:
        """Exchange the positions of two nodes and repack.

        A boundary (self-symmetric) node may only be swapped with another one.
        """
        node1 = self.find_node(node_name1)
        node2 = self.find_node(node_name2)
        if node1 is None or node2 is None:
            return False
        if self.is_on_boundary(node1.module_name) != self.is_on_boundary(node2.module_name):
            return False

        parent1, parent2 = node1.parent, node2.parent
        left1 = parent1 is not None and parent1.left is node1
        left2 = parent2 is not None and parent2.left is node2

        for parent, is_left in ((parent1, left1), (parent2, left2)):
            if parent is not None:
                if is_left:
                    parent.left = None
                else:
                    parent.right = None

        for parent, is_left, incoming in ((parent1, left1, node2), (parent2, left2, node1)):
            if parent is not None:
                if is_left:
                    parent.left = incoming
                else:
                    parent.right = incoming
                incoming.parent = parent
            else:
                self.root = incoming
                incoming.parent = None

        l1, r1, l2, r2 = node1.left, node1.right, node2.left, node2.right
        node1.left, node1.right = l2, r2
        for child in (l2, r2):
            if child is not None:
                child.parent = node1
        node2.left, node2.right = l1, r1
        for child in (l1, r1):
            if child is not None:
                child.parent = node2

        self.mark_node_for_repack(node1)
        self.mark_node_for_repack(node2)
        self.mark_node_for_repack(node1.parent)
        self.mark_node_for_repack(node2.parent)
        self._repack_modified_nodes()
        return True

    def change_representative(self, module_name: str) -> bool:
        """Swap which member of a symmetry pair is the representative."""
        partner = self.symmetric_pair_map.get(module_name)
        if partner is None:
            return False
        if self.representative_map.get(module_name) == partner:
            chosen = module_name
        else:
            chosen = partner
        self.representative_map[module_name] = chosen
        self.representative_map[partner] = chosen
        self.construct_initial_tree()
        return True

    def convert_symmetry_type(self) -> bool:
        """Flip the symmetry axis orientation, rotating every module."""
        if self.symmetry_group is None:
            return False
        if self._vertical:
            self.symmetry_group.symmetry_type = SymmetryType.HORIZONTAL
        else:
            self.symmetry_group.symmetry_type = SymmetryType.VERTICAL
        for module in self.modules.values():
            module.rotate()
        self.construct_initial_tree()
        return True