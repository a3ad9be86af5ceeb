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
"""
Traversal of the nodes of an :class:`~rectindex.core.rtree.RTree`.

Iterators yield node handles. They only rely on the tree's `root` attribute
and `children` method.
"""


def breadth_first(tree, root=None):
    '''Breadth-first iterator of node handles, level by level.'''
    fifo = [tree.root if root is None else root]
    while fifo:
        handle = fifo.pop(0)
        yield handle
        fifo.extend(tree.children(handle))


def depth_first(tree, root=None):
    '''Depth-first pre-order iterator of node handles.'''
    filo = [tree.root if root is None else root]
    while filo:
        handle = filo.pop()
        yield handle
        # Reversed so that children are visited in entry order.
        filo.extend(reversed(list(tree.children(handle))))
