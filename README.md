# hbplace

Data structures for analog placement under symmetry constraints.

The package provides rectangular modules, plain B*-tree nodes, HB*-tree
nodes, a complete symmetry-island placer (the ASF-B*-tree) and the packing
logic for a hierarchical B*-tree (HB*-tree) in which each symmetry island
appears as a single hierarchy node.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

The package has no dependencies outside the standard library.

## Contents

- `hbplace.module.Module` – a rectangular block with a name, original width
  and height, a lower-left position `(x, y)` and a `rotated` flag. `width`
  and `height` give the effective size (swapped when rotated); `area`,
  `right` and `top` are derived from them. `rotate()` toggles rotation,
  `set_position(x, y)` moves the block, `overlaps(other)` tests whether two
  interiors intersect, `copy()` returns an independent copy and `describe()`
  returns a multi-line text summary.
- `hbplace.bstar_node.BStarTreeNode` – a node of a B*-tree naming one
  module. The left child is placed to the right of its parent, the right
  child directly above it. Offers `children()`, `clone()`, `is_leaf()`,
  `is_left_child()`, `is_right_child()` and `count_subtree_nodes()`.
- `hbplace.hb_node.HBNodeType` and `hbplace.hb_node.HBStarTreeNode` – nodes
  of an HB*-tree: `MODULE` nodes name a module, `HIERARCHY` nodes carry a
  symmetry island's tree in `asf_tree`, and `CONTOUR` nodes hold one
  horizontal contour segment, set with `set_contour(x1, y1, x2, y2)` and
  read from `contour`. `clone()` copies the subtree, including a cloned
  `asf_tree` for hierarchy nodes.
- `hbplace.asf_packing` – `SymmetryType` (`VERTICAL`, `HORIZONTAL`), the
  protocols `SymmetryGroupLike` and `ContourLike`, and `ASFPackingMixin`,
  which packs a symmetry island (`pack()`) and checks that self-symmetric
  modules lie on the boundary branch (`is_symmetric_feasible()`).
- `hbplace.asf_tree.ASFBStarTree` – the placement of one symmetry group.
- `hbplace.hb_packing.HBPackingMixin` – packing of a whole HB*-tree built
  from `HBStarTreeNode`s: `pack()`, `repack_affected_subtrees()` and
  `validate_symmetry_island_placement()`.

## Symmetry groups

A symmetry group is any object satisfying `SymmetryGroupLike`: it has a
`name`, a `symmetry_type`, a sequence of `symmetry_pairs` (pairs of module
names) and a sequence of `self_symmetric` module names. A dataclass is
enough:

```python
from dataclasses import dataclass, field

from hbplace.asf_packing import SymmetryType


@dataclass
class Group:
    name: str
    symmetry_type: SymmetryType
    symmetry_pairs: list = field(default_factory=list)
    self_symmetric: list = field(default_factory=list)
```

## Placing a symmetry island

```python
from hbplace.asf_tree import ASFBStarTree
from hbplace.module import Module

group = Group("G1", SymmetryType.VERTICAL, [("A", "B")], ["S"])
island = ASFBStarTree(group)
for module in (Module("A", 4, 2), Module("B", 4, 2), Module("S", 2, 2)):
    island.add_module(module)

island.construct_initial_tree()
island.pack()
for name, module in island.modules.items():
    print(name, module.x, module.y)
print(island.symmetry_axis_position, island.area)
```

For each symmetric pair the second module starts out as the representative;
only representatives and self-symmetric modules appear in the tree.
`construct_initial_tree()` orders them by area, largest first, and chains
them along the rightmost branch, except that with a horizontal axis
self-symmetric modules go on the leftmost branch. `pack()` places the
representatives, sets the axis to the mean centre of the representatives,
mirrors each partner about the axis and centres self-symmetric modules on it.

Perturbations on `ASFBStarTree`:

- `rotate_module(name)` – rotates a module and its symmetric partner.
- `move_node(name, new_parent, as_left_child)` – refused when it would take a
  self-symmetric module off the boundary branch (see `can_move_node`).
- `swap_nodes(name1, name2)` – a self-symmetric node can only be swapped
  with another self-symmetric node.
- `change_representative(name)` – makes the other member of the pair the
  representative and rebuilds the tree.
- `convert_symmetry_type()` – flips the group's axis orientation, rotates
  every module and rebuilds the tree.

Moves and swaps repack the affected nodes straight away. Other helpers:
`find_node`, `get_representative`, `is_representative`, `is_on_boundary`,
`mark_node_for_repack`, `contours` (horizontal and vertical skylines) and
`clone()`.

## Packing an HB*-tree

`HBPackingMixin` contains the packing rules but no storage of its own. A class
using it provides `root`, `modules`, `symmetry_groups`,
`symmetry_group_nodes`, `horizontal_contour`, `vertical_contour`,
`total_area`, `is_packed` and `modified_subtrees`. `pack()` places module
nodes by the B*-tree rules, packs and shifts each symmetry island as one
block, records the bounding-box area in `total_area` and rebuilds the chain
of contour nodes under each hierarchy node. When `modified_subtrees` is not
empty, `pack()` repacks only those subtrees.

## What the package does not do

- It has no ready-made HB*-tree class: there is no object that collects
  modules and symmetry groups, builds an initial HB*-tree, or offers
  perturbations and cloning at that level. `HBPackingMixin` must be combined
  with such a class by the user.
- It does not read or write design files, has no netlist and so no wire
  length, and has no optimiser or command-line tool.