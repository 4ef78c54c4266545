import pytest

from bonsaitts.mlpg.mask import Mask, filter_by, repeat_by_duration


def test_fill():
    assert list(Mask([False, False, True, True, False, True]).fill([0, 1, 2], 5)) == [
        5, 5, 0, 1, 5, 2,
    ]
    assert list(Mask([False, False]).fill([0, 1], 5)) == [5, 5]


def test_fill_too_few_values():
    with pytest.raises(ValueError):
        list(Mask([True, True]).fill([1], 0))


def test_boundary_distances_all_true():
    assert Mask([True] * 10).boundary_distances() == [
        (0, 9), (1, 8), (2, 7), (3, 6), (4, 5), (5, 4), (6, 3), (7, 2), (8, 1), (9, 0),
    ]


def test_boundary_distances_gap():
    mask = Mask([True, True, True, False, False, True, True, True, True, True])
    assert mask.boundary_distances() == [
        (0, 2), (1, 1), (2, 0), (0, 0), (0, 0), (0, 4), (1, 3), (2, 2), (3, 1), (4, 0),
    ]


def test_boundary_distances_isolated():
    mask = Mask([True, True, True, False, True, False, False, False, False, False])
    assert mask.boundary_distances() == [
        (0, 2), (1, 1), (2, 0), (0, 0), (0, 0), (0, 0), (0, 0), (0, 0), (0, 0), (0, 0),
    ]


def test_boundary_distances_empty():
    assert Mask([]).boundary_distances() == []


def test_create_repeats_by_duration():
    mask = Mask.create([0.9, 0.1, 0.6], 0.5, [2, 1, 3])
    assert list(mask) == [True, True, False, True, True, True]
    assert len(mask) == 6


def test_create_threshold_is_strict():
    assert list(Mask.create([0.5], 0.5, [2])) == [False, False]


def test_repeat_by_duration():
    assert list(repeat_by_duration("abc", [1, 0, 2])) == ["a", "c", "c"]


def test_filter_by():
    assert list(filter_by([1, 2, 3, 4], [True, False, False, True])) == [1, 4]


def test_fill_then_filter_round_trip():
    mask = Mask([True, False, True, True, False])
    full = list(mask.fill([7, 8, 9], -1))
    assert list(filter_by(full, mask)) == [7, 8, 9]