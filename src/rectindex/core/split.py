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
Node splitting policy.

An overflowing node is split in two steps:

1. Seeds are picked with the quadratic "worst pair" rule: among all pairs of
   entries, take the pair wasting the most area if kept in the same node.
2. The remaining entries are distributed greedily, in storage order, to the
   group whose bounding rectangle grows least.

Seed picking is vectorized: the bounds of the entries are stacked in an
array and the wasted area of every pair is computed at once by
broadcasting.
'''
import numpy

from . import geometry


def wasted_area(bounds):
    """
    Pairwise wasted area of a stack of rectangles.

    Float bounds are computed on a float64 array. Any other scalar type
    (int, Fraction, Decimal...) goes through an object array, so that the
    arithmetic is the caller's own, exact and without overflow.

    Args:
        bounds (array-like): Nx4 array of (minx, miny, maxx, maxy).

    Returns:
        NxN array whose (i, j) element is
        ``area(union(i, j)) - area(i) - area(j)``.
    """
    bounds = [tuple(b) for b in bounds]
    isfloat = all(isinstance(x, (float, numpy.floating))
                  for b in bounds for x in b)
    bounds = numpy.array(bounds, dtype=float if isfloat else object)
    areas = (bounds[:, 2] - bounds[:, 0]) * (bounds[:, 3] - bounds[:, 1])
    mins = numpy.minimum(bounds[:, numpy.newaxis, :2],
                         bounds[numpy.newaxis, :, :2])
    maxs = numpy.maximum(bounds[:, numpy.newaxis, 2:],
                         bounds[numpy.newaxis, :, 2:])
    unions = (maxs - mins).prod(axis=2)
    return unions - areas[:, numpy.newaxis] - areas[numpy.newaxis, :]


def pick_seeds(rects):
    """
    Indices (i, j), i < j, of the pair of rectangles wasting the most area.

    Ties are resolved in favour of the first pair in (i, j) scan order, which
    is row-major order of the upper triangle.
    """
    if len(rects) < 2:
        raise ValueError(
            "At least 2 rectangles are needed to pick seeds, got {}"
            .format(len(rects))
        )
    waste = wasted_area([r.bounds for r in rects])
    # triu_indices enumerates pairs i < j in row-major order.
    rows, cols = numpy.triu_indices(len(rects), k=1)
    best = numpy.argmax(waste[rows, cols])
    return int(rows[best]), int(cols[best])


def distribute(entries, seed1, seed2, min_entries=1, strict=False):
    """
    Greedy distribution of entries into two groups anchored at the seeds.

    Entries other than the seeds are visited in storage order. Each one goes
    to the group whose current MBR needs the smaller enlargement; ties go to
    the first group.

    Args:
        entries (list): Entries with a `rect` attribute.
        seed1 (int): Index of the first group's seed.
        seed2 (int): Index of the second group's seed.
        min_entries (int, optional): Minimum group size, only honoured when
            `strict` is True.
        strict (bool, optional): If True, once a group needs all remaining
            entries to reach `min_entries`, it gets all of them.

    Returns:
        A 2-tuple of lists of entries.
    """
    first, second = [entries[seed1]], [entries[seed2]]
    first_mbr = entries[seed1].rect.copy()
    second_mbr = entries[seed2].rect.copy()
    remaining = [e for k, e in enumerate(entries) if k not in (seed1, seed2)]
    for k, entry in enumerate(remaining):
        if strict:
            left = len(remaining) - k
            if len(first) + left <= min_entries:
                first.extend(remaining[k:])
                break
            if len(second) + left <= min_entries:
                second.extend(remaining[k:])
                break
        if (geometry.enlargement(first_mbr, entry.rect)
                <= geometry.enlargement(second_mbr, entry.rect)):
            first.append(entry)
            first_mbr.expand(entry.rect)
        else:
            second.append(entry)
            second_mbr.expand(entry.rect)
    return first, second
