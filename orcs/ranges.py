#!/usr/bin/env python3
"""
Created on Mon Sep 21 18:35:00 2026.

@author: yoh

Range value type and checks on ordered ranges of a partition.

A range is a row ``(partition_key, start, end)``. Within a partition, ranges
are kept ordered by 'start', and never overlap. The 'adjacency' threshold sets
both the boundary convention of ranges and the largest gap between the end of
a range and the start of the next one for both to be contiguous.

  - ``adjacency == 0``, ranges are half-open ``[start, end)``, and overlap if
    ``next.start < prev.end``,
  - ``adjacency >= 1``, ranges are closed ``[start, end]``, and overlap if
    ``next.start <= prev.end``.

Non-overlapping consecutive ranges are contiguous if
``next.start - prev.end <= adjacency``, and separated by a gap otherwise.

"""
from dataclasses import dataclass
from typing import Hashable, Iterable, List

from numpy import array
from numpy import int64
from numpy import integer
from numpy import issubdtype
from numpy import uint64
from numpy.typing import NDArray
from pandas import DataFrame

from orcs.defines import DEFAULT_ADJACENCY
from orcs.defines import KEY_END
from orcs.defines import KEY_PARTITION_KEY
from orcs.defines import KEY_START
from orcs.errors import PreconditionError
from orcs.numpy_utils import is_strictly_increasing


@dataclass(frozen=True, order=True)
class Range:
    """
    Closed or half-open range of integers, belonging to a partition.

    Attributes
    ----------
    partition_key : Hashable
        Key of the partition the range belongs to.
    start : int
        First value of the range. Identifies the range within its partition.
    end : int
        Last value (closed range) or end boundary (half-open range).

    """

    partition_key: Hashable
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise PreconditionError(
                f"range start '{self.start}' is larger than its end '{self.end}'.",
            )


def check_adjacency(adjacency: int) -> int:
    """
    Return 'adjacency' as a Python int, raising ValueError if negative.
    """
    if adjacency is None:
        return DEFAULT_ADJACENCY
    if adjacency < 0:
        raise ValueError(f"'adjacency' has to be positive or null, not '{adjacency}'.")
    return int(adjacency)


def get_min_gap(adjacency: int) -> int:
    """
    Return smallest difference between a start and the previous end for both
    ranges not to overlap.

    0 for half-open ranges ('adjacency' of 0), 1 for closed ranges.

    """
    return min(check_adjacency(adjacency), 1)


def compute_gaps(starts: NDArray, ends: NDArray) -> NDArray:
    """
    Return differences between each start and the end of the previous range.

    Ranges are expected not to overlap, so that differences are positive or
    null. They are returned as uint64, which holds any difference between two
    int64 values.

    """
    # Subtraction wraps modulo 2**64, and result is exact once read unsigned.
    return starts[1:].astype(uint64) - ends[:-1].astype(uint64)


def validate_ordered_ranges(
    starts: NDArray,
    ends: NDArray,
    adjacency: int = DEFAULT_ADJACENCY,
):
    """
    Check ranges of a single partition are ordered and do not overlap.

    Parameters
    ----------
    starts : NDArray
        Start values of ranges.
    ends : NDArray
        End values of ranges, in same order as 'starts'.
    adjacency : int, default 1
        Contiguity threshold. It also sets the boundary convention, ranges
        being half-open if 0, closed otherwise.

    Raises
    ------
    PreconditionError
        If 'starts' and 'ends' have different lengths, are not of an integer
        dtype, if a start is larger than its end, if 'starts' is not strictly
        increasing, or if two consecutive ranges overlap.
    ValueError
        If 'adjacency' is negative.

    """
    adjacency = check_adjacency(adjacency)
    n_ranges = len(starts)
    if n_ranges != len(ends):
        raise PreconditionError("'starts' and 'ends' must have the same length.")
    if n_ranges == 0:
        return
    if not (issubdtype(starts.dtype, integer) and issubdtype(ends.dtype, integer)):
        raise PreconditionError(
            f"range bounds must be integers, not '{starts.dtype}' and '{ends.dtype}'.",
        )
    if (starts > ends).any():
        raise PreconditionError("range starts must not be larger than range ends.")
    if not is_strictly_increasing(starts):
        raise PreconditionError("ranges must be sorted by strictly increasing 'start'.")
    # Starts are strictly increasing, so subtracting min gap does not overflow.
    if n_ranges > 1 and (starts[1:] - get_min_gap(adjacency) < ends[:-1]).any():
        raise PreconditionError("ranges must not overlap.")


def ranges_to_arrays(ranges: Iterable[Range]):
    """
    Return 'start' and 'end' values of ranges as two int64 arrays.
    """
    ranges = list(ranges)
    return (
        array([rng.start for rng in ranges], dtype=int64),
        array([rng.end for rng in ranges], dtype=int64),
    )


def ranges_to_frame(ranges: Iterable[Range]) -> DataFrame:
    """
    Return ranges as a DataFrame with 'partition_key', 'start', 'end' columns.
    """
    ranges = list(ranges)
    starts, ends = ranges_to_arrays(ranges)
    return DataFrame(
        {
            KEY_PARTITION_KEY: [rng.partition_key for rng in ranges],
            KEY_START: starts,
            KEY_END: ends,
        },
    )


def ranges_from_frame(df: DataFrame, partition_key: Hashable = None) -> List[Range]:
    """
    Return rows of a DataFrame as a list of ranges.

    Parameters
    ----------
    df : DataFrame
        DataFrame with 'start' and 'end' columns, and a 'partition_key' column
        if 'partition_key' parameter is not set.
    partition_key : Hashable, optional
        Partition key to use for all ranges. If not set, it is read from
        'partition_key' column.

    Returns
    -------
    List[Range]
        Ranges, in row order.

    """
    keys = (
        df[KEY_PARTITION_KEY].to_list() if partition_key is None else [partition_key] * len(df)
    )
    return [
        Range(key, start, end)
        for key, start, end in zip(keys, df[KEY_START].to_list(), df[KEY_END].to_list())
    ]
