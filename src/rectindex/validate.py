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
Structural checks of an :class:`~rectindex.core.rtree.RTree`.

The tree maintains its invariants on its own, so a check failing always
points at a bookkeeping bug. :func:`check` is meant for tests and debugging
sessions, it visits every node and is linear in the size of the tree.
'''
import collections

import toolz

from .core import iterators
from .core.rtree import ChildEntry, LeafEntry, TreeCorruptionError


def check(tree):
    """
    Raises TreeCorruptionError if a structural invariant of `tree` is broken.

    Checked invariants:
      1. Every reachable node but the root has exactly one parent entry, and
         the root has none.
      1. Leaves hold only leaf entries, internal nodes only child entries,
         and internal nodes are never empty.
      1. No node holds more than `max_entries` entries. In strict mode,
         non-root nodes hold at least `min_entries` entries.
      1. A child entry's rectangle contains the MBR of its child node.
      1. All leaves lie at the same depth.
      1. The number of leaf entries equals `len(tree)`.
    """
    if not 0 <= tree.root < len(tree.nodes):
        raise TreeCorruptionError(
            "Root handle {} is outside the arena of {} nodes"
            .format(tree.root, len(tree.nodes))
        )
    references = collections.Counter(
        entry.child
        for node in tree.nodes if not node.isleaf
        for entry in node.entries if isinstance(entry, ChildEntry)
    )
    if references[tree.root]:
        raise TreeCorruptionError(
            "Root node {} is referenced by {} entries"
            .format(tree.root, references[tree.root])
        )
    leaf_depths = set()
    # Walk levels explicitly to know the depth of each leaf.
    level, depth = [tree.root], 1
    while level:
        for handle in level:
            _check_node(tree, handle, references)
            if tree.nodes[handle].isleaf:
                leaf_depths.add(depth)
        level = list(toolz.concat(tree.children(h) for h in level))
        depth += 1
    if len(leaf_depths) > 1:
        raise TreeCorruptionError(
            "Leaves found at several depths: {}".format(sorted(leaf_depths)))
    count = toolz.count(toolz.concat(
        tree.nodes[h].entries for h in iterators.depth_first(tree)
        if tree.nodes[h].isleaf
    ))
    if count != len(tree):
        raise TreeCorruptionError(
            "Tree holds {} leaf entries but reports size {}"
            .format(count, len(tree))
        )


def _check_node(tree, handle, references):
    node = tree.node(handle)
    expected = LeafEntry if node.isleaf else ChildEntry
    if not all(isinstance(entry, expected) for entry in node.entries):
        raise TreeCorruptionError(
            "Node {} mixes entry types, expected only {}"
            .format(handle, expected.__name__)
        )
    for entry in node.entries:
        if not node.isleaf and not 0 <= entry.child < len(tree.nodes):
            raise TreeCorruptionError(
                "Entry of node {} references node {} outside the arena"
                .format(handle, entry.child)
            )
    if handle != tree.root and references[handle] != 1:
        raise TreeCorruptionError(
            "Node {} is referenced by {} entries, expected 1"
            .format(handle, references[handle])
        )
    if len(node.entries) > tree.max_entries:
        raise TreeCorruptionError(
            "Node {} holds {} entries, more than {}"
            .format(handle, len(node.entries), tree.max_entries)
        )
    if (tree.strict and handle != tree.root
            and len(node.entries) < tree.min_entries):
        raise TreeCorruptionError(
            "Node {} holds {} entries, fewer than {}"
            .format(handle, len(node.entries), tree.min_entries)
        )
    if node.isleaf:
        return
    if not node.entries:
        raise TreeCorruptionError("Internal node {} is empty".format(handle))
    for entry in node.entries:
        if not entry.rect.contains(tree.mbr(entry.child)):
            raise TreeCorruptionError(
                "Entry {} of node {} does not contain its child {}"
                .format(entry.rect, handle, tree.mbr(entry.child))
            )
