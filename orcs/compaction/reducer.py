#!/usr/bin/env python3
"""
Created on Tue Sep 22 18:00:00 2026.

@author: yoh

Island reducer.

Each island is reduced to a single range, spanning from the smallest start to
the largest end of the ranges it is made of.

"""
from itertools import groupby
from operator import attrgetter
from typing import Iterable, List

from numpy import cumsum
from numpy import empty
from numpy import flatnonzero
from numpy import int64
from numpy import int_
from numpy import maximum
from numpy import minimum
from numpy.typing import NDArray

from orcs.compaction.classifier import compute_island_starts
from orcs.defines import DEFAULT_ADJACENCY
from orcs.defines import KEY_END
from orcs.defines import KEY_ISLAND_ID
from orcs.defines import KEY_REP_IDX
from orcs.defines import KEY_START
from orcs.ranges import Range
from orcs.ranges import ranges_to_arrays


ISLANDS_DTYPE = [
    (KEY_ISLAND_ID, int_),
    (KEY_REP_IDX, int_),
    (KEY_START, int64),
    (KEY_END, int64),
]


def compute_island_ids(island_starts: NDArray) -> NDArray:
    """
    Number islands with a running count of island starts.

    First range always starts an island, hence first island id is 1.

    """
    return cumsum(island_starts, dtype=int_)


def reduce_islands(starts: NDArray, ends: NDArray, island_starts: NDArray) -> NDArray:
    """
    Reduce each island to a single merged range.

    Parameters
    ----------
    starts : NDArray
        Start values of the ranges of a single partition, sorted in ascending
        order.
    ends : NDArray
        End values of ranges, in same order as 'starts'.
    island_starts : NDArray[bool]
        Flags of ranges starting an island, as returned by
        ``compute_island_starts()``.

    Returns
    -------
    NDArray
        Merged ranges contained in a structured array with one row per island,
        and fields:
        - 'island_id': id of the island, starting at 1.
        - 'rep_idx': index, in input arrays, of the first range of the island,
          its representative.
        - 'start': smallest start of the ranges in the island.
        - 'end': largest end of the ranges in the island.

    Notes
    -----
    Because ranges are sorted and contiguous within an island, merged start is
    that of the representative range, and merged end that of the last range of
    the island. Min and max are nonetheless computed per island with
    ``reduceat()``, which is as fast and does not rely on ordering.

    """
    rep_idx = flatnonzero(island_starts)
    islands = empty(len(rep_idx), dtype=ISLANDS_DTYPE)
    if len(rep_idx) == 0:
        return islands
    islands[KEY_ISLAND_ID] = compute_island_ids(island_starts)[rep_idx]
    islands[KEY_REP_IDX] = rep_idx
    islands[KEY_START] = minimum.reduceat(starts, rep_idx)
    islands[KEY_END] = maximum.reduceat(ends, rep_idx)
    return islands


def merge_ranges(ranges: Iterable[Range], adjacency: int = DEFAULT_ADJACENCY) -> List[Range]:
    """
    Merge contiguous ranges, partition per partition.

    Parameters
    ----------
    ranges : Iterable[Range]
        Ranges, possibly from several partitions, in any order. Partition keys
        have to be comparable.
    adjacency : int, default 1
        Contiguity threshold, see ``compute_island_starts()``.

    Returns
    -------
    List[Range]
        One range per island, sorted by partition key and start.

    Raises
    ------
    PreconditionError
        If two ranges of a same partition overlap.

    """
    merged = []
    for partition_key, partition_ranges in groupby(
        sorted(ranges),
        key=attrgetter("partition_key"),
    ):
        starts, ends = ranges_to_arrays(partition_ranges)
        islands = reduce_islands(starts, ends, compute_island_starts(starts, ends, adjacency))
        merged.extend(
            Range(partition_key, start, end)
            for start, end in zip(islands[KEY_START].tolist(), islands[KEY_END].tolist())
        )
    return merged
