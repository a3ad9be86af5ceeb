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
Axis-aligned rectangles.

Rectangles are the only bounding volume used by the index. They are kept
deliberately small: four scalar bounds and a handful of operations. All
operations are pure except :meth:`Rect.expand`, which grows a rectangle in
place. The index relies on this to keep ancestor bounds tight while
descending the tree.

Intersection follows a half-open convention: two rectangles sharing only an
edge or a corner do not overlap.
'''
import toolz


class Rect():
    '''Axis-aligned rectangle given by its minimum and maximum corners.'''
    __slots__ = ('minx', 'miny', 'maxx', 'maxy')

    def __init__(self, *args):
        # Overloading
        # 1st case: a single sequence of 4 bounds.
        # 2nd case: the 4 bounds given separately.
        if len(args) == 1:
            args = tuple(args[0])
        if len(args) != 4:
            raise ValueError(
                "Rect expects bounds (minx, miny, maxx, maxy), got {}"
                .format(args)
            )
        self.minx, self.miny, self.maxx, self.maxy = args

    def __repr__(self):
        return "Rect(minx={}, miny={}, maxx={}, maxy={})".format(*self.bounds)

    def __eq__(self, other):
        if not isinstance(other, Rect):
            return NotImplemented
        return self.bounds == other.bounds

    # Rects are mutable, hence unhashable.
    __hash__ = None

    def __iter__(self):
        return iter(self.bounds)

    @property
    def bounds(self):
        return (self.minx, self.miny, self.maxx, self.maxy)

    def copy(self):
        return Rect(*self.bounds)

    def area(self):
        return (self.maxx - self.minx) * (self.maxy - self.miny)

    def overlaps(self, other):
        return not (self.minx >= other.maxx or self.maxx <= other.minx
                    or self.miny >= other.maxy or self.maxy <= other.miny)

    def contains(self, other):
        return (self.minx <= other.minx and self.miny <= other.miny
                and self.maxx >= other.maxx and self.maxy >= other.maxy)

    def expand(self, other):
        """Grow `self` in place into the MBR of `self` and `other`.

        Returns `self` so that calls can be chained or folded.
        """
        self.minx = min(self.minx, other.minx)
        self.miny = min(self.miny, other.miny)
        self.maxx = max(self.maxx, other.maxx)
        self.maxy = max(self.maxy, other.maxy)
        return self

    def union(self, other):
        return self.copy().expand(other)

    def enlargement(self, other):
        """Area increase needed for `self` to absorb `other`."""
        return self.union(other).area() - self.area()


def as_rect(obj):
    if isinstance(obj, Rect):
        return obj
    return Rect(obj)


def area(rect):
    return rect.area()


def overlaps(a, b):
    return a.overlaps(b)


def expand(a, b):
    return a.expand(b)


def union(a, b):
    return a.union(b)


def enlargement(a, b):
    return a.enlargement(b)


def contains(a, b):
    return a.contains(b)


def merge(collection):
    '''
    Returns the minimum bounding rectangle of a collection of rectangles.

    The first rectangle is copied, so none of the inputs are modified.
    '''
    rects = iter(collection)
    try:
        first = next(rects)
    except StopIteration:
        raise ValueError("Cannot merge an empty collection of rectangles")
    return toolz.reduce(expand, rects, first.copy())
