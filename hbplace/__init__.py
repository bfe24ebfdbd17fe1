"""Modules, B*-tree and HB*-tree nodes, symmetry-island placement and HB*-tree packing."""

__version__ = "0.1.0"