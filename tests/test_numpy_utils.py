#!/usr/bin/env python3
"""
Created on Mon Sep 21 18:35:00 2026.

@author: yoh

"""
import pytest
from numpy import array
from numpy import array_equal
from numpy import iinfo
from numpy import int64

from orcs.numpy_utils import is_strictly_increasing
from orcs.numpy_utils import isnotin_ordered


INT64_MIN = iinfo(int64).min
INT64_MAX = iinfo(int64).max


def test_isnotin_ordered():
    res = isnotin_ordered(sorted_array=array([1, 2, 3, 4, 5]), query_elements=array([0, 1, 5, 10]))
    assert array_equal(res, array([True, False, False, True]))


@pytest.mark.parametrize(
    "test_id, sorted_array, query_elements, expected",
    [
        ("empty_sorted_array", array([], dtype=int64), array([1, 2]), array([True, True])),
        ("empty_query", array([1, 2]), array([], dtype=int64), array([], dtype=bool)),
        ("all_found", array([1, 11, 16]), array([1, 16]), array([False, False])),
    ],
)
def test_isnotin_ordered_edge_cases(test_id, sorted_array, query_elements, expected):
    assert array_equal(isnotin_ordered(sorted_array, query_elements), expected)


@pytest.mark.parametrize(
    "test_id, values, expected",
    [
        ("empty", array([], dtype=int64), True),
        ("single_value", array([3]), True),
        ("increasing", array([1, 11, 16]), True),
        ("duplicate", array([1, 11, 11]), False),
        ("decreasing", array([1, 16, 11]), False),
        ("int64_extremes", array([INT64_MIN, INT64_MAX], dtype=int64), True),
        ("int64_extremes_decreasing", array([INT64_MAX, INT64_MIN], dtype=int64), False),
    ],
)
def test_is_strictly_increasing(test_id, values, expected):
    assert is_strictly_increasing(values) is expected
