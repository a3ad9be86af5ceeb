"""
Dynamic spatial indexing of axis-aligned rectangles.

Classically, R-trees are implemented as a graph of node objects holding
pointers to their children, and sometimes to their parent.

Our implementation differs in that nodes live in a single array, the arena,
and refer to each other by their integer position in it. Nodes are never
removed, so positions are stable handles and a parent-child link is a plain
integer comparison.

The tree grows by insertion. Overflowing nodes are split with a quadratic
seed selection followed by a greedy distribution of the remaining entries,
and splits propagate up to the root. Queries return every stored value whose
rectangle overlaps a query rectangle.
"""
from .core.geometry import Rect  # noqa: F401
from .core.rtree import (  # noqa: F401
    RTree, TreeCorruptionError, MAX_ENTRIES, MIN_ENTRIES)
from .core.iterators import breadth_first, depth_first  # noqa: F401
from .validate import check  # noqa: F401

__version__ = "0.1.0"
