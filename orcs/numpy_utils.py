#!/usr/bin/env python3
"""
Created on Mon Sep 21 18:35:00 2026.

@author: yoh

"""
from numpy import array
from numpy import ones
from numpy import searchsorted


def isnotin_ordered(sorted_array: array, query_elements: array) -> array:
    """
    Check if query elements are not present in a sorted array.

    Parameters
    ----------
    sorted_array : array
        Sorted array in which to search for elements.
        Must be sorted in ascending order.
    query_elements : array
        Array of elements to search for.
        Must be sorted in ascending order if containing elements which are
        are larger than the largest element in 'sorted_array'.

    Returns
    -------
    array
        Array of booleans with same length as 'query_elements', where True
        indicates the element is not found in 'sorted_array'.

    Examples
    --------
    >>> starts = np.array([1, 11, 16, 25])
    >>> isnotin_ordered(starts, np.array([11, 12, 25, 30]))
    array([False, True, False, True])

    """
    insert_idx = searchsorted(sorted_array, query_elements, side="left")
    # Elements exist if insert position is valid and the element at that
    # position matches the query.
    found_max_idx = searchsorted(insert_idx, len(sorted_array))
    is_not_found = ones(len(query_elements), dtype=bool)
    is_not_found[:found_max_idx] = (
        sorted_array[insert_idx[:found_max_idx]] != query_elements[:found_max_idx]
    )
    return is_not_found


def is_strictly_increasing(values: array) -> bool:
    """
    Return True if each value is strictly larger than the previous one.

    Empty and single-value arrays are strictly increasing.

    """
    # Neighbours are compared, not subtracted, which would overflow.
    return bool((values[1:] > values[:-1]).all())
