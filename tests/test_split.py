import collections
from fractions import Fraction

import numpy
import pytest

from rectindex.core import split
from rectindex.core.geometry import Rect

Item = collections.namedtuple("Item", "rect name")


def test_wasted_area():
    waste = split.wasted_area([(0, 0, 1, 1), (2, 2, 3, 3)])
    assert waste.shape == (2, 2)
    assert waste[0, 1] == 7
    assert waste[1, 0] == 7
    assert waste[0, 0] == -1


def test_pick_seeds_worst_pair():
    rects = [Rect(0, 0, 1, 1), Rect(0, 0, 1, 1), Rect(10, 10, 11, 11)]
    assert split.pick_seeds(rects) == (0, 2)


def test_pick_seeds_first_pair_wins_ties():
    rects = [Rect(0, 0, 1, 1)] * 4
    assert split.pick_seeds(rects) == (0, 1)


def test_pick_seeds_matches_brute_force():
    state = numpy.random.RandomState(3)
    for _ in range(20):
        mins = state.uniform(0, 50, size=(5, 2))
        maxs = mins + state.uniform(0, 10, size=(5, 2))
        rects = [Rect(*mins[k], *maxs[k]) for k in range(5)]
        best, pair = None, None
        for i in range(5):
            for j in range(i + 1, 5):
                waste = (rects[i].union(rects[j]).area()
                         - rects[i].area() - rects[j].area())
                if best is None or waste > best:
                    best, pair = waste, (i, j)
        assert split.pick_seeds(rects) == pair


def test_pick_seeds_needs_two_rects():
    with pytest.raises(ValueError):
        split.pick_seeds([Rect(0, 0, 1, 1)])


def test_distribute_ties_go_to_first_group():
    items = [Item(Rect(0, 0, 1, 1), "a"), Item(Rect(4, 0, 5, 1), "b"),
             Item(Rect(2, 0, 3, 1), "c")]
    first, second = split.distribute(items, 0, 1)
    assert [i.name for i in first] == ["a", "c"]
    assert [i.name for i in second] == ["b"]


def test_distribute_uses_grown_group_bounds():
    items = [Item(Rect(0, 0, 1, 1), "a"), Item(Rect(10, 0, 11, 1), "b"),
             Item(Rect(1, 0, 6, 1), "c"), Item(Rect(6, 0, 7, 1), "d")]
    first, second = split.distribute(items, 0, 1)
    assert [i.name for i in first] == ["a", "c", "d"]
    assert [i.name for i in second] == ["b"]


def test_distribute_keeps_storage_order():
    items = [Item(Rect(0, 0, 1, 1), "a"), Item(Rect(9, 9, 10, 10), "b"),
             Item(Rect(1, 1, 2, 2), "c"), Item(Rect(8, 8, 9, 9), "d"),
             Item(Rect(0, 1, 1, 2), "e")]
    first, second = split.distribute(items, 0, 1)
    assert [i.name for i in first] == ["a", "c", "e"]
    assert [i.name for i in second] == ["b", "d"]


@pytest.fixture
def lopsided():
    return [Item(Rect(0, 0, 1, 1), "a"), Item(Rect(100, 100, 101, 101), "e"),
            Item(Rect(0, 0, 1, 1), "b"), Item(Rect(0, 0, 1, 1), "c"),
            Item(Rect(0, 0, 1, 1), "d")]


def test_distribute_permissive_allows_underfull_group(lopsided):
    first, second = split.distribute(lopsided, 0, 1, min_entries=2)
    assert [i.name for i in first] == ["a", "b", "c", "d"]
    assert [i.name for i in second] == ["e"]


def test_distribute_strict_fills_underfull_group(lopsided):
    first, second = split.distribute(lopsided, 0, 1, min_entries=2,
                                     strict=True)
    assert [i.name for i in first] == ["a", "b", "c"]
    assert [i.name for i in second] == ["e", "d"]


def test_distribute_does_not_mutate_entries(lopsided):
    before = [i.rect.bounds for i in lopsided]
    split.distribute(lopsided, 0, 1)
    assert [i.rect.bounds for i in lopsided] == before


def test_wasted_area_keeps_exact_arithmetic():
    big = 10 ** 400
    waste = split.wasted_area([(0, 0, big, big), (big, big, 2 * big, 2 * big)])
    assert waste[0, 1] == 2 * big ** 2
    assert waste.dtype == object


def test_wasted_area_float_bounds():
    waste = split.wasted_area([(0., 0., 1., 1.), (2., 2., 3., 3.)])
    assert waste.dtype == float
    assert waste[0, 1] == 7.


def test_pick_seeds_on_fractions():
    # Rounded to floats, pairs (0, 1) and (0, 2) would waste the same area.
    third = Fraction(1, 3)
    rects = [Rect(0, 0, 1, 1),
             Rect(10 ** 17, 0, 10 ** 17 + 1, 1),
             Rect(10 ** 17 + third, 0, 10 ** 17 + 1 + third, 1)]
    assert split.pick_seeds(rects) == (0, 2)
