# Copyright (C) 2018 DataStorm
#
# This file is part of RectIndex.
#
# RectIndex is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# RectIndex is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# A copy of the GNU General Public License is available in the LICENSE
# file or at <http://www.gnu.org/licenses/>.
'''
Dynamic R-tree over axis-aligned rectangles.

The data model of the tree is given by the following specifications:
  1. Nodes are stored in a 1d-buffer (the arena) indexed by non-negative
     integers, called handles.
  1. Nodes are never removed from the arena. A split keeps the original
     node in place and appends its new sibling.
  1. The root handle is stored on the tree. It changes only when the root
     itself splits.
  1. A node is a pair (isleaf, entries) with an ordered list of entries.
  1. Leaf nodes hold :class:`LeafEntry` (rect, value) pairs.
  1. Internal nodes hold :class:`ChildEntry` (rect, child) pairs, where rect
     bounds everything reachable under the child handle.
  1. Every node but the root is referenced by exactly one child entry.
'''
import collections
import logging

import toolz

from . import geometry
from . import iterators
from . import split


MAX_ENTRIES = 4
MIN_ENTRIES = 2

log = logging.getLogger(__name__)


class TreeCorruptionError(RuntimeError):
    """The tree's bookkeeping is inconsistent."""


LeafEntry = collections.namedtuple('LeafEntry', 'rect value')
ChildEntry = collections.namedtuple('ChildEntry', 'rect child')
Node = collections.namedtuple('Node', 'isleaf entries')


class RTree():
    """
    In-memory R-tree with quadratic-cost node splitting.

    Args:
        max_entries (int, optional): Maximum number of entries per node.
            Defaults to 4.
        min_entries (int, optional): Minimum number of entries per node after
            a split. Only enforced when `strict` is True. Defaults to 2.
        strict (bool, optional): If True, splits guarantee that both groups
            hold at least `min_entries` entries. Defaults to False.

    Attributes:
        nodes (list of Node): the arena of nodes, indexed by handle.
        root (int): handle of the root node.
        stats (dict): counters updated by insertions.

    Note:
        The tree is not thread-safe. Concurrent inserts must be serialized
        by the caller, and queries must not run concurrently with inserts.
    """
    def __init__(self, max_entries=MAX_ENTRIES, min_entries=MIN_ENTRIES,
                 strict=False):
        if max_entries < 2:
            raise ValueError(
                "max_entries must be at least 2, got {}".format(max_entries))
        if min_entries < 1 or 2 * min_entries > max_entries + 1:
            raise ValueError(
                "min_entries must be between 1 and {}, got {}"
                .format((max_entries + 1) // 2, min_entries)
            )
        self.max_entries = max_entries
        self.min_entries = min_entries
        self.strict = strict
        self._clear()

    def _clear(self):
        self.nodes = []
        self.size = 0
        self.stats = {
            "number_inserts": 0,
            "number_splits": 0,
            "number_root_splits": 0,
            "number_nodes": 0,
            "max_depth": 1,
        }
        self.root = self._create_node(isleaf=True)

    def __repr__(self):
        return "<{} size={} depth={} nodes={}>".format(
            self.__class__.__name__, len(self), self.depth, self.node_count)

    def __len__(self):
        """Returns the number of stored values."""
        return self.size

    @property
    def isempty(self):
        return self.size == 0

    @property
    def node_count(self):
        return len(self.nodes)

    @property
    def depth(self):
        """Number of levels, 1 for a lone leaf root."""
        depth, node = 1, self.node(self.root)
        while not node.isleaf:
            depth += 1
            node = self.node(node.entries[0].child)
        return depth

    @property
    def bounds(self):
        """MBR of every stored rectangle, None if the tree is empty."""
        if not self.node(self.root).entries:
            return None
        return self.mbr(self.root)

    def node(self, handle):
        if not 0 <= handle < len(self.nodes):
            raise IndexError(
                "Node handle {} out of range for an arena of {} nodes"
                .format(handle, len(self.nodes))
            )
        return self.nodes[handle]

    def children(self, handle):
        node = self.node(handle)
        if node.isleaf:
            return
        yield from (entry.child for entry in node.entries)

    def leaves(self):
        """Handles of leaf nodes, in depth-first order."""
        return (handle for handle in iterators.depth_first(self)
                if self.nodes[handle].isleaf)

    def items(self):
        """Iterates over (rect, value) pairs of all stored entries."""
        return toolz.concat(
            ((entry.rect, entry.value) for entry in self.nodes[handle].entries)
            for handle in self.leaves()
        )

    def mbr(self, handle):
        """Freshly computed MBR of the entries of a node."""
        return geometry.merge(entry.rect for entry in self.node(handle).entries)

    def _create_node(self, isleaf, entries=None):
        self.nodes.append(Node(isleaf, [] if entries is None else entries))
        self.stats["number_nodes"] = len(self.nodes)
        return len(self.nodes) - 1

    # ==========================  Insertion  ==================================

    def insert(self, rect, value):
        """
        Stores `value` under the bounding rectangle `rect`.

        `rect` is either a :class:`Rect` or a sequence (minx, miny, maxx,
        maxy). It is copied, so later changes to the caller's object do not
        affect the tree.
        """
        rect = geometry.as_rect(rect).copy()
        leaf = self._choose_leaf(self.root, rect)
        entries = self.nodes[leaf].entries
        entries.append(LeafEntry(rect, value))
        self.size += 1
        self.stats["number_inserts"] += 1
        if len(entries) > self.max_entries:
            self._split(leaf)

    def insert_many(self, items):
        '''Inserts (rect, value) pairs one by one.'''
        for rect, value in items:
            self.insert(rect, value)

    def _choose_leaf(self, handle, rect):
        node = self.node(handle)
        if node.isleaf:
            return handle
        # min keeps the first of equal keys, so ties go to the lowest index.
        best = min(node.entries, key=lambda e: e.rect.enlargement(rect))
        best.rect.expand(rect)
        return self._choose_leaf(best.child, rect)

    # ===========================  Splitting  =================================

    def _split(self, handle):
        node = self.node(handle)
        seed1, seed2 = split.pick_seeds([entry.rect for entry in node.entries])
        first, second = split.distribute(
            node.entries, seed1, seed2,
            min_entries=self.min_entries, strict=self.strict,
        )
        node.entries[:] = first
        sibling = self._create_node(node.isleaf, second)
        self.stats["number_splits"] += 1
        log.debug("Split node %d: kept %d entries, moved %d to node %d",
                  handle, len(first), len(second), sibling)

        if handle == self.root:
            self.root = self._create_node(isleaf=False, entries=[
                ChildEntry(self.mbr(handle), handle),
                ChildEntry(self.mbr(sibling), sibling),
            ])
            self.stats["number_root_splits"] += 1
            self.stats["max_depth"] += 1
            log.debug("Tree grew to depth %d with new root %d",
                      self.stats["max_depth"], self.root)
            return

        parent, position = self.find_parent(handle)
        entries = self.nodes[parent].entries
        entries[position] = entries[position]._replace(rect=self.mbr(handle))
        entries.append(ChildEntry(self.mbr(sibling), sibling))
        if len(entries) > self.max_entries:
            self._split(parent)

    def find_parent(self, handle):
        """
        Locates the child entry referencing node `handle`.

        The whole arena is scanned, so the cost is linear in the number of
        nodes.

        Returns:
            A 2-tuple (parent handle, position of the entry in the parent).

        Raises:
            TreeCorruptionError: if no internal node references `handle`.
        """
        for idx, node in enumerate(self.nodes):
            if node.isleaf:
                continue
            for position, entry in enumerate(node.entries):
                if entry.child == handle:
                    return idx, position
        log.error("No parent entry references node %d (root is %d)",
                  handle, self.root)
        raise TreeCorruptionError(
            "Parent node not found for node {}".format(handle))

    # ============================  Queries  ==================================

    def irange_query(self, rect, handle=None):
        """Lazily yields values whose rectangle overlaps `rect`."""
        rect = geometry.as_rect(rect)
        node = self.node(self.root if handle is None else handle)
        for entry in node.entries:
            if not entry.rect.overlaps(rect):
                continue
            if node.isleaf:
                yield entry.value
            else:
                yield from self.irange_query(rect, entry.child)

    def range_query(self, rect):
        """
        Returns the list of values whose rectangle overlaps `rect`.

        Rectangles sharing only an edge with `rect` are not reported. The
        order of the result follows the depth-first traversal of the tree.
        """
        return list(self.irange_query(rect))
