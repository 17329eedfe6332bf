#!/usr/bin/env python3
"""
Created on Fri Sep 25 18:00:00 2026.

@author: yoh

In-memory range storage.

"""
import logging
from pathlib import Path
from threading import Lock as ThreadLock
from typing import Collection, Dict, Hashable, Union

from numpy import empty
from numpy import int64
from pandas import DataFrame
from sortedcontainers import SortedDict
from sortedcontainers import SortedSet

from orcs.defines import DEFAULT_ADJACENCY
from orcs.ranges import check_adjacency
from orcs.store.base import RangeStorage
from orcs.store.base import apply_mutations
from orcs.store.base import insert_range
from orcs.store.base import ranges_frame
from orcs.store.lock import partition_filename
from orcs.store.lock import partition_sort_key


logger = logging.getLogger(__name__)


class InMemoryRangeStorage(RangeStorage):
    """
    Ranges kept in memory, per partition.

    Ranges of a partition are stored as a pair of immutable arrays, 'starts'
    and 'ends'. Mutations build new arrays and swap them in place of previous
    ones while holding an internal mutex, so that readers never see a partially
    mutated partition.

    Attributes
    ----------
    adjacency : int
        Contiguity threshold, also setting boundary convention.
    lock_dirpath : Path
        Directory where partition lock files are kept, used by compaction.
    _mutex : threading.Lock
        Serializes access to '_partitions'.
    _partitions : SortedDict
        Pair of arrays 'starts' and 'ends' per partition key.

    Notes
    -----
    Inserts are not serialized with compactions. An insert running while a
    partition is being compacted is rejected if it overlaps existing ranges.
    Otherwise it is kept, and does not overlap merged ranges as long as they
    cover same values as the ranges they replace, which is the case with an
    'adjacency' of 0 or 1. With a larger 'adjacency', merged ranges also cover
    the small gaps between merged ranges. An insert into such a gap makes the
    compaction fail with ``OverlapError``, leaving partition unchanged, and
    compaction can be retried.

    Partition keys have to be int or str, as for lock file names.

    """

    def __init__(self, lock_dirpath: Union[str, Path], adjacency: int = DEFAULT_ADJACENCY):
        """
        Initialize an empty storage.

        Parameters
        ----------
        lock_dirpath : Union[str, Path]
            Directory where partition lock files are kept.
        adjacency : int, default 1
            Contiguity threshold, also setting boundary convention.

        """
        self._lock_dirpath = Path(lock_dirpath).resolve()
        self._adjacency = check_adjacency(adjacency)
        self._mutex = ThreadLock()
        self._partitions = SortedDict(partition_sort_key)

    @property
    def adjacency(self) -> int:
        return self._adjacency

    @property
    def lock_dirpath(self) -> Path:
        return self._lock_dirpath

    def partitions(self) -> SortedSet:
        with self._mutex:
            return SortedSet(self._partitions, key=partition_sort_key)

    def _get(self, partition_key: Hashable):
        # To be called while holding mutex.
        return self._partitions.get(
            partition_key,
            (empty(0, dtype=int64), empty(0, dtype=int64)),
        )

    def fetch_sorted(self, partition_key: Hashable) -> DataFrame:
        with self._mutex:
            starts, ends = self._get(partition_key)
        return ranges_frame(starts, ends)

    def apply(self, partition_key: Hashable, deletions: Collection[int], updates: Dict[int, int]):
        with self._mutex:
            starts, ends = apply_mutations(
                *self._get(partition_key),
                deletions,
                updates,
                self._adjacency,
            )
            self._set(partition_key, starts, ends)
        logger.debug(
            "applied %d deletions and %d updates to partition '%s'",
            len(deletions),
            len(updates),
            partition_key,
        )

    def insert(self, partition_key: Hashable, start: int, end: int):
        # Partition keys have to be usable in lock file names.
        partition_filename(partition_key)
        with self._mutex:
            starts, ends = insert_range(
                *self._get(partition_key),
                start,
                end,
                self._adjacency,
            )
            self._set(partition_key, starts, ends)

    def _set(self, partition_key: Hashable, starts, ends):
        # To be called while holding mutex.
        starts.flags.writeable = False
        ends.flags.writeable = False
        if len(starts):
            self._partitions[partition_key] = starts, ends
        else:
            self._partitions.pop(partition_key, None)
