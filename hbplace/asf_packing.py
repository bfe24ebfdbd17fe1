"""Packing of a symmetry island described by an ASF-B*-tree."""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import (
    Any,
    Collection,
    Dict,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from hbplace.bstar_node import BStarTreeNode
from hbplace.module import Module

INT_MAX = 2**31 - 1


class SymmetryType(Enum):
    """Orientation of a symmetry axis."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class ContourLike(Protocol):
    """A skyline of segments used while packing."""

    def clear(self) -> None:
        """Remove every segment."""

    def add_segment(self, start: int, end: int, height: int) -> None:
        """Raise the contour to ``height`` over ``[start, end)``."""

    def get_height(self, start: int, end: int) -> int:
        """Return the highest contour level over ``[start, end)``."""

    @property
    def segments(self) -> Sequence[Any]:
        """Segments with ``start``, ``end`` and ``height`` attributes."""


class SymmetryGroupLike(Protocol):
    """A named group of symmetry pairs and self-symmetric modules."""

    name: str
    symmetry_type: SymmetryType
    symmetry_pairs: Sequence[Tuple[str, str]]
    self_symmetric: Sequence[str]


def _depth(node: BStarTreeNode) -> int:
    depth = 0
    while node.parent is not None:
        depth += 1
        node = node.parent
    return depth


class ASFPackingMixin:
    """Packing behaviour for a symmetry island.

    A class using this mixin provides ``root``, ``modules``,
    ``symmetry_group``, ``horizontal_contour``, ``vertical_contour``,
    ``symmetry_axis_position``, ``self_symmetric_modules``,
    ``representative_map`` and ``modified_nodes``.
    """

    root: Optional[BStarTreeNode]
    modules: Mapping[str, Module]
    symmetry_group: SymmetryGroupLike
    horizontal_contour: ContourLike
    vertical_contour: ContourLike
    symmetry_axis_position: float
    self_symmetric_modules: List[str]
    representative_map: MutableMapping[str, str]
    modified_nodes: Collection[BStarTreeNode]

    @property
    def _vertical(self) -> bool:
        return self.symmetry_group.symmetry_type is SymmetryType.VERTICAL

    def _representative_of(self, module_name: str) -> str:
        return self.representative_map.get(module_name, "")

    def _represents_itself(self, module_name: str) -> bool:
        return self.representative_map.get(module_name) == module_name

    def _initialize_contours(self) -> None:
        self.horizontal_contour.clear()
        self.vertical_contour.clear()
        self.horizontal_contour.add_segment(0, INT_MAX, 0)
        self.vertical_contour.add_segment(0, INT_MAX, 0)

    def _update_contour_with_module(self, module: Module) -> None:
        self.horizontal_contour.add_segment(module.x, module.right, module.top)
        self.vertical_contour.add_segment(module.y, module.top, module.right)

    def _pack_node(self, node: BStarTreeNode) -> None:
        module = self.modules.get(node.module_name)
        if module is None:
            return

        x = 0
        parent_node = node.parent
        if parent_node is not None:
            parent = self.modules.get(parent_node.module_name)
            if parent is not None:
                x = parent.right if parent_node.left is node else parent.x

        y = self.horizontal_contour.get_height(x, x + module.width)

        if node.module_name in self.self_symmetric_modules:
            if self._vertical:
                x = int(self.symmetry_axis_position) - module.width // 2
            else:
                y = int(self.symmetry_axis_position) - module.height // 2

        module.set_position(x, y)
        self._update_contour_with_module(module)

    def _reflect(self, source: Module, target: Module) -> None:
        axis = self.symmetry_axis_position
        if self._vertical:
            center = source.x + source.width / 2.0
            target.set_position(int(2 * axis - center - target.width / 2.0), source.y)
        else:
            center = source.y + source.height / 2.0
            target.set_position(source.x, int(2 * axis - center - target.height / 2.0))

    def _calculate_symmetric_module_positions(self) -> None:
        for first, second in self.symmetry_group.symmetry_pairs:
            mod1 = self.modules.get(first)
            mod2 = self.modules.get(second)
            if mod1 is None or mod2 is None:
                continue
            representative = self._representative_of(first)
            if representative == first:
                self._reflect(mod1, mod2)
            elif representative == second:
                self._reflect(mod2, mod1)

        for name in self.self_symmetric_modules:
            module = self.modules.get(name)
            if module is None:
                continue
            if self._vertical:
                new_x = int(self.symmetry_axis_position - module.width / 2.0)
                module.set_position(new_x, module.y)
            else:
                new_y = int(self.symmetry_axis_position - module.height / 2.0)
                module.set_position(module.x, new_y)

    def _repack_modified_nodes(self) -> None:
        if not self.modified_nodes:
            return
        self._initialize_contours()
        for node in sorted(self.modified_nodes, key=_depth, reverse=True):
            self._pack_node(node)
        self._calculate_symmetric_module_positions()
        self.modified_nodes.clear()  # type: ignore[attr-defined]

    def pack(self) -> bool:
        """Compute module coordinates; return False if the tree is empty."""
        if self.root is None:
            return False

        if self.modified_nodes:
            self._repack_modified_nodes()
            return True

        self._initialize_contours()
        pending = deque([self.root])
        while pending:
            node = pending.popleft()
            self._pack_node(node)
            pending.extend(node.children())

        centers: Dict[str, float] = {}
        for name in sorted(self.modules):
            if self._represents_itself(name):
                module = self.modules[name]
                if self._vertical:
                    centers[name] = module.x + module.width / 2.0
                else:
                    centers[name] = module.y + module.height / 2.0
        self.symmetry_axis_position = (
            sum(centers.values()) / len(centers) if centers else 0.0
        )

        self._calculate_symmetric_module_positions()
        return True

    def _find_in_tree(self, module_name: str) -> Optional[BStarTreeNode]:
        pending = deque([self.root] if self.root is not None else [])
        while pending:
            node = pending.popleft()
            if node.module_name == module_name:
                return node
            pending.extend(node.children())
        return None

    def is_symmetric_feasible(self) -> bool:
        """Check that every self-symmetric module lies on the boundary branch.

        For vertical symmetry that is the rightmost branch, for horizontal
        symmetry the leftmost one.
        """
        for name in self.self_symmetric_modules:
            current = self._find_in_tree(name)
            while current is not None and current.parent is not None:
                if self._vertical and current.parent.left is current:
                    return False
                if not self._vertical and current.parent.right is current:
                    return False
                current = current.parent
        return True