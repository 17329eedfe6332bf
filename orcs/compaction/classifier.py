#!/usr/bin/env python3
"""
Created on Tue Sep 22 18:00:00 2026.

@author: yoh

Island classifier.

An island is a maximal run of contiguous ranges within a partition, ranges
being ordered by 'start'. The classifier flags the ranges starting an island.

"""
from typing import Sequence

from numpy import bool_
from numpy import r_
from numpy import zeros
from numpy.typing import NDArray

from orcs.defines import DEFAULT_ADJACENCY
from orcs.errors import PreconditionError
from orcs.ranges import Range
from orcs.ranges import check_adjacency
from orcs.ranges import compute_gaps
from orcs.ranges import ranges_to_arrays
from orcs.ranges import validate_ordered_ranges


def compute_island_starts(
    starts: NDArray,
    ends: NDArray,
    adjacency: int = DEFAULT_ADJACENCY,
) -> NDArray:
    """
    Flag ranges starting an island.

    Parameters
    ----------
    starts : NDArray
        Start values of the ranges of a single partition, sorted in ascending
        order.
    ends : NDArray
        End values of ranges, in same order as 'starts'.
    adjacency : int, default 1
        Largest difference between the start of a range and the end of the
        previous one for both ranges to be contiguous. 1 for closed integer
        ranges touching end to end, 0 for half-open ones. Larger values also
        merge closed ranges separated by a small gap.

    Returns
    -------
    NDArray[bool]
        Array of same length as 'starts'. True for the first range, and for any
        range whose start is farther than 'adjacency' from the end of the
        previous range. False otherwise.

    Raises
    ------
    PreconditionError
        If ranges are not sorted, are duplicated, or overlap.

    Notes
    -----
    Result for a range only depends on the previous range. It is computed on
    the whole partition at once from the differences between each start and
    the previous end.

    Examples
    --------
    >>> compute_island_starts(np.array([1, 11, 25]), np.array([10, 20, 30]))
    array([ True, False,  True])

    """
    adjacency = check_adjacency(adjacency)
    validate_ordered_ranges(starts, ends, adjacency)
    if len(starts) == 0:
        return zeros(0, dtype=bool_)
    return r_[True, compute_gaps(starts, ends) > adjacency]


def classify_islands(
    ranges: Sequence[Range],
    adjacency: int = DEFAULT_ADJACENCY,
) -> NDArray:
    """
    Flag ranges starting an island, from a sequence of ``Range``.

    Parameters
    ----------
    ranges : Sequence[Range]
        Ranges of a single partition, sorted by 'start'.
    adjacency : int, default 1
        Contiguity threshold, see ``compute_island_starts()``.

    Returns
    -------
    NDArray[bool]
        Island start flags, one per range.

    Raises
    ------
    PreconditionError
        If ranges belong to different partitions, or if they are not sorted,
        are duplicated, or overlap.

    """
    if len({rng.partition_key for rng in ranges}) > 1:
        raise PreconditionError("ranges must belong to a single partition.")
    starts, ends = ranges_to_arrays(ranges)
    return compute_island_starts(starts, ends, adjacency)
