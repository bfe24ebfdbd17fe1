from dataclasses import dataclass, field
from typing import List, Tuple

import pytest

from hbplace.asf_packing import INT_MAX, ASFPackingMixin, SymmetryType
from hbplace.bstar_node import BStarTreeNode
from hbplace.module import Module


@dataclass
class _Segment:
    start: int
    end: int
    height: int


class _Contour:
    def __init__(self):
        self.segments: List[_Segment] = []

    def clear(self):
        self.segments.clear()

    def add_segment(self, start, end, height):
        self.segments.append(_Segment(start, end, height))

    def get_height(self, start, end):
        return max(
            (s.height for s in self.segments if s.start < end and s.end > start),
            default=0,
        )


@dataclass
class _Group:
    name: str
    symmetry_type: SymmetryType
    symmetry_pairs: List[Tuple[str, str]] = field(default_factory=list)
    self_symmetric: List[str] = field(default_factory=list)


class _Island(ASFPackingMixin):
    def __init__(self, group, modules, root=None):
        self.root = root
        self.modules = {m.name: m for m in modules}
        self.symmetry_group = group
        self.horizontal_contour = _Contour()
        self.vertical_contour = _Contour()
        self.symmetry_axis_position = 0.0
        self.self_symmetric_modules = list(group.self_symmetric)
        self.representative_map = {}
        for first, second in group.symmetry_pairs:
            self.representative_map[first] = second
            self.representative_map[second] = second
        for name in group.self_symmetric:
            self.representative_map[name] = name
        self.modified_nodes = set()


def _attach(parent, child, left):
    if left:
        parent.left = child
    else:
        parent.right = child
    child.parent = parent
    return child


def test_pack_without_root_fails():
    island = _Island(_Group("g", SymmetryType.VERTICAL), [Module("a", 2, 2)])
    assert island.pack() is False


def test_vertical_pair_is_mirrored_about_axis():
    a, b = Module("a", 4, 2), Module("b", 4, 2)
    island = _Island(_Group("g", SymmetryType.VERTICAL, [("a", "b")]), [a, b],
                     BStarTreeNode("b"))
    assert island.pack() is True
    assert (b.x, b.y) == (0, 0)
    center_a = a.x + a.width / 2
    center_b = b.x + b.width / 2
    assert center_a + center_b == pytest.approx(2 * island.symmetry_axis_position)
    assert a.y == b.y


def test_horizontal_pair_is_mirrored_about_axis():
    a, b = Module("a", 3, 4), Module("b", 3, 4)
    island = _Island(_Group("g", SymmetryType.HORIZONTAL, [("a", "b")]), [a, b],
                     BStarTreeNode("b"))
    island.pack()
    center_a = a.y + a.height / 2
    center_b = b.y + b.height / 2
    assert center_a + center_b == pytest.approx(2 * island.symmetry_axis_position)
    assert a.x == b.x


def test_left_child_goes_right_of_parent():
    mods = [Module("a", 4, 2), Module("b", 4, 2), Module("c", 2, 2), Module("d", 2, 2)]
    root = BStarTreeNode("b")
    _attach(root, BStarTreeNode("d"), left=True)
    group = _Group("g", SymmetryType.VERTICAL, [("a", "b"), ("c", "d")])
    island = _Island(group, mods, root)
    island.pack()
    b, d = island.modules["b"], island.modules["d"]
    assert d.x == b.right
    assert d.y == 0
    assert island.symmetry_axis_position == pytest.approx(3.5)


def test_right_child_goes_above_parent():
    mods = [Module("a", 4, 2), Module("b", 4, 2), Module("c", 2, 3), Module("d", 2, 3)]
    root = BStarTreeNode("b")
    _attach(root, BStarTreeNode("d"), left=False)
    group = _Group("g", SymmetryType.VERTICAL, [("a", "b"), ("c", "d")])
    island = _Island(group, mods, root)
    island.pack()
    b, d = island.modules["b"], island.modules["d"]
    assert d.x == b.x
    assert d.y == b.top


def test_self_symmetric_module_centered_on_vertical_axis():
    s = Module("s", 4, 2)
    island = _Island(_Group("g", SymmetryType.VERTICAL, self_symmetric=["s"]), [s],
                     BStarTreeNode("s"))
    island.pack()
    assert s.x + s.width / 2 == pytest.approx(island.symmetry_axis_position)


def test_self_symmetric_module_centered_on_horizontal_axis():
    s = Module("s", 2, 6)
    island = _Island(_Group("g", SymmetryType.HORIZONTAL, self_symmetric=["s"]), [s],
                     BStarTreeNode("s"))
    island.pack()
    assert s.y + s.height / 2 == pytest.approx(island.symmetry_axis_position)


def test_pack_records_contours():
    b = Module("b", 4, 2)
    island = _Island(_Group("g", SymmetryType.VERTICAL, [("a", "b")]),
                     [Module("a", 4, 2), b], BStarTreeNode("b"))
    island.pack()
    first = island.horizontal_contour.segments[0]
    assert (first.start, first.end, first.height) == (0, INT_MAX, 0)
    assert any((s.start, s.end, s.height) == (b.x, b.right, b.top)
               for s in island.horizontal_contour.segments)
    assert any((s.start, s.end, s.height) == (b.y, b.top, b.right)
               for s in island.vertical_contour.segments)


def test_pack_repacks_only_modified_nodes_and_clears_them():
    a, b = Module("a", 4, 2), Module("b", 4, 2)
    root = BStarTreeNode("b")
    island = _Island(_Group("g", SymmetryType.VERTICAL, [("a", "b")]), [a, b], root)
    b.set_position(7, 9)
    island.modified_nodes.add(root)
    assert island.pack() is True
    assert island.modified_nodes == set()
    assert (b.x, b.y) == (0, 0)


def test_node_without_module_is_skipped():
    b = Module("b", 4, 2)
    root = BStarTreeNode("b")
    _attach(root, BStarTreeNode("ghost"), left=True)
    island = _Island(_Group("g", SymmetryType.VERTICAL, [("a", "b")]),
                     [Module("a", 4, 2), b], root)
    assert island.pack() is True
    assert len(island.horizontal_contour.segments) == 2


@pytest.mark.parametrize(
    "symmetry_type, left, expected",
    [
        (SymmetryType.VERTICAL, False, True),
        (SymmetryType.VERTICAL, True, False),
        (SymmetryType.HORIZONTAL, True, True),
        (SymmetryType.HORIZONTAL, False, False),
    ],
)
def test_is_symmetric_feasible(symmetry_type, left, expected):
    root = BStarTreeNode("b")
    _attach(root, BStarTreeNode("s"), left=left)
    group = _Group("g", symmetry_type, [("a", "b")], ["s"])
    island = _Island(group, [Module("a", 2, 2), Module("b", 2, 2), Module("s", 2, 2)], root)
    assert island.is_symmetric_feasible() is expected


def test_is_symmetric_feasible_when_module_not_in_tree():
    group = _Group("g", SymmetryType.VERTICAL, [("a", "b")], ["s"])
    island = _Island(group, [Module("a", 2, 2), Module("b", 2, 2)], BStarTreeNode("b"))
    assert island.is_symmetric_feasible() is True