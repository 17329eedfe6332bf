#!/usr/bin/env python3
"""
Created on Thu Sep 24 18:00:00 2026.

@author: yoh

Storage collaborator interface.

A storage keeps ranges per partition, without overlap. Compaction relies on it
to fetch the ranges of a partition sorted by 'start', and to apply deletions
and updates of ranges as a single atomic batch.

"""
from abc import ABC
from abc import abstractmethod
from pathlib import Path
from typing import Collection, Dict, Hashable, Tuple

from numpy import array
from numpy import int64
from numpy import searchsorted
from numpy.typing import NDArray
from pandas import DataFrame
from sortedcontainers import SortedSet

from orcs.defines import KEY_END
from orcs.defines import KEY_START
from orcs.errors import MissingRangeError
from orcs.errors import OverlapError
from orcs.errors import PreconditionError
from orcs.numpy_utils import isnotin_ordered
from orcs.ranges import get_min_gap
from orcs.ranges import validate_ordered_ranges


def ranges_frame(starts: NDArray, ends: NDArray) -> DataFrame:
    """
    Return 'start' and 'end' values as a DataFrame with int64 columns.
    """
    return DataFrame(
        {KEY_START: array(starts, dtype=int64), KEY_END: array(ends, dtype=int64)},
    )


def apply_mutations(
    starts: NDArray,
    ends: NDArray,
    deletions: Collection[int],
    updates: Dict[int, int],
    adjacency: int,
) -> Tuple[NDArray, NDArray]:
    """
    Compute ranges of a partition once deletions and updates are applied.

    Input arrays are not modified.

    Parameters
    ----------
    starts : NDArray
        Start values of the ranges of the partition, sorted in ascending order.
    ends : NDArray
        End values of ranges, in same order as 'starts'.
    deletions : Collection[int]
        Starts of ranges to remove.
    updates : Dict[int, int]
        New end values, keyed by start of ranges to update.
    adjacency : int
        Contiguity threshold, also setting boundary convention.

    Returns
    -------
    Tuple[NDArray, NDArray]
        Starts and ends of ranges after mutation.

    Raises
    ------
    MissingRangeError
        If a range to delete or update is not in the partition, or if a range
        is both deleted and updated.
    OverlapError
        If resulting ranges overlap.

    """
    deletions = array(sorted(deletions), dtype=int64)
    updated_starts = array(sorted(updates), dtype=int64)
    if isnotin_ordered(starts, deletions).any():
        raise MissingRangeError("some ranges to delete are not in partition.")
    if isnotin_ordered(starts, updated_starts).any():
        raise MissingRangeError("some ranges to update are not in partition.")
    if not isnotin_ordered(deletions, updated_starts).all():
        raise MissingRangeError("some ranges to update are also to be deleted.")
    new_ends = array(ends, dtype=int64)
    new_ends[searchsorted(starts, updated_starts)] = [
        updates[start] for start in updated_starts.tolist()
    ]
    to_keep = isnotin_ordered(deletions, starts)
    new_starts, new_ends = starts[to_keep], new_ends[to_keep]
    try:
        validate_ordered_ranges(new_starts, new_ends, adjacency)
    except PreconditionError as e:
        raise OverlapError(str(e)) from e
    return new_starts, new_ends


def insert_range(
    starts: NDArray,
    ends: NDArray,
    start: int,
    end: int,
    adjacency: int,
) -> Tuple[NDArray, NDArray]:
    """
    Insert a range among sorted ranges of a partition.

    Returns
    -------
    Tuple[NDArray, NDArray]
        Starts and ends of ranges after insert.

    Raises
    ------
    OverlapError
        If new range overlaps with an existing range.

    """
    if start > end:
        raise PreconditionError(f"range start '{start}' is larger than its end '{end}'.")
    min_gap = get_min_gap(adjacency)
    idx = int(searchsorted(starts, start))
    # Bounds compared as Python int, which do not overflow.
    if (idx > 0 and int(start) - int(ends[idx - 1]) < min_gap) or (
        idx < len(starts)
        and (int(starts[idx]) == start or int(starts[idx]) - int(end) < min_gap)
    ):
        raise OverlapError(f"range ({start}, {end}) overlaps with existing ranges.")
    return (
        array([*starts[:idx], start, *starts[idx:]], dtype=int64),
        array([*ends[:idx], end, *ends[idx:]], dtype=int64),
    )


class RangeStorage(ABC):
    """
    Abstract base class for range storages.

    A storage keeps ranges grouped by partition, and guarantees ranges within
    a partition never overlap.

    Attributes
    ----------
    adjacency : int
        Contiguity threshold of ranges. Ranges are half-open if 0, closed
        otherwise, which sets when consecutive ranges overlap.
    lock_dirpath : Path
        Directory where partition lock files are kept.

    """

    @property
    @abstractmethod
    def adjacency(self) -> int:
        raise NotImplementedError("Subclasses must implement this property")

    @property
    @abstractmethod
    def lock_dirpath(self) -> Path:
        raise NotImplementedError("Subclasses must implement this property")

    @abstractmethod
    def partitions(self) -> SortedSet:
        """
        Return keys of non-empty partitions.
        """
        raise NotImplementedError("Subclasses must implement this method")

    @abstractmethod
    def fetch_sorted(self, partition_key: Hashable) -> DataFrame:
        """
        Return ranges of a partition.

        Returns
        -------
        DataFrame
            'start' and 'end' int64 columns, sorted by 'start', with default
            index. Empty if partition does not exist.

        """
        raise NotImplementedError("Subclasses must implement this method")

    @abstractmethod
    def apply(self, partition_key: Hashable, deletions: Collection[int], updates: Dict[int, int]):
        """
        Delete and update ranges of a partition as a single atomic batch.

        Either all mutations are visible, or none if an exception is raised.
        Caller is expected to hold the partition lock.

        Parameters
        ----------
        partition_key : Hashable
            Key of the partition.
        deletions : Collection[int]
            Starts of ranges to remove.
        updates : Dict[int, int]
            New end values, keyed by start of ranges to update.

        Raises
        ------
        MissingRangeError
            If a range to delete or update does not exist.
        OverlapError
            If resulting ranges would overlap.

        """
        raise NotImplementedError("Subclasses must implement this method")

    @abstractmethod
    def insert(self, partition_key: Hashable, start: int, end: int):
        """
        Add a range to a partition.

        Raises
        ------
        OverlapError
            If range overlaps with an existing range of the partition.

        """
        raise NotImplementedError("Subclasses must implement this method")
