#!/usr/bin/env python3
"""
Created on Sat Sep 26 18:00:00 2026.

@author: yoh

Parquet range storage.

One parquet file per partition, with 'start' and 'end' columns, sorted by
'start'. The partition key is kept in the file metadata.

basepath/
├── 1.parquet                   # Ranges of partition '1'
├── 1.lock                      # Exclusive lock file of partition '1'
└── my_partition.parquet        # Ranges of partition 'my_partition'

Files are replaced atomically on each mutation, so readers not holding the
partition lock always see a consistent partition, either before or after a
mutation.

"""
import logging
from os import scandir
from pathlib import Path
from typing import Collection, Dict, Hashable, Optional, Union

from numpy import empty
from numpy import int64
from pandas import DataFrame
from sortedcontainers import SortedSet

from orcs.defines import DEFAULT_ADJACENCY
from orcs.defines import DEFAULT_LOCK_LIFETIME
from orcs.defines import DEFAULT_LOCK_TIMEOUT
from orcs.defines import KEY_END
from orcs.defines import KEY_PARTITION_KEY
from orcs.defines import KEY_START
from orcs.defines import RANGES_FILE_EXTENSION
from orcs.ranges import check_adjacency
from orcs.store.base import RangeStorage
from orcs.store.base import apply_mutations
from orcs.store.base import insert_range
from orcs.store.base import ranges_frame
from orcs.store.lock import exclusive_partition_lock
from orcs.store.lock import partition_filename
from orcs.store.lock import partition_sort_key
from orcs.store.parquet_adapter import ParquetAdapter


logger = logging.getLogger(__name__)


class ParquetRangeStorage(RangeStorage):
    """
    Ranges kept in parquet files, one file per partition.

    Attributes
    ----------
    adjacency : int
        Contiguity threshold, also setting boundary convention.
    basepath : Path
        Directory containing parquet files and lock files.
    lock_dirpath : Path
        Same as 'basepath'.
    lock_timeout : Optional[int]
        Maximum time to wait for partition lock acquisition in seconds, when
        inserting a range.
    lock_lifetime : Optional[int]
        Maximum partition lock lifetime in seconds, when inserting a range.

    Notes
    -----
    Inserts acquire the partition lock, and are thus serialized with
    compactions of the same partition. As 'apply()' is expected to be called
    while the partition lock is held, it does not acquire it.

    """

    def __init__(
        self,
        basepath: Union[str, Path],
        adjacency: int = DEFAULT_ADJACENCY,
        lock_timeout: Optional[int] = DEFAULT_LOCK_TIMEOUT,
        lock_lifetime: Optional[int] = DEFAULT_LOCK_LIFETIME,
        compression: str = None,
    ):
        """
        Initialize storage, creating 'basepath' directory if not existing.

        Parameters
        ----------
        basepath : Union[str, Path]
            Directory of the parquet files.
        adjacency : int, default 1
            Contiguity threshold, also setting boundary convention.
        lock_timeout : Optional[int], default 20
            Maximum time to wait for partition lock acquisition in seconds,
            when inserting a range. None means wait forever.
        lock_lifetime : Optional[int], default 40
            Maximum partition lock lifetime in seconds, when inserting a range.
        compression : str, optional
            Compression used by fastparquet.

        """
        self._basepath = Path(basepath).resolve()
        self._basepath.mkdir(parents=True, exist_ok=True)
        self._adjacency = check_adjacency(adjacency)
        self.lock_timeout = lock_timeout
        self.lock_lifetime = lock_lifetime
        self._parquet_adapter = ParquetAdapter(compression=compression)

    @property
    def adjacency(self) -> int:
        return self._adjacency

    @property
    def basepath(self) -> Path:
        return self._basepath

    @property
    def lock_dirpath(self) -> Path:
        return self._basepath

    def get_filepath(self, partition_key: Hashable) -> Path:
        """
        Return path of the parquet file of a partition.
        """
        return self._basepath / f"{partition_filename(partition_key)}{RANGES_FILE_EXTENSION}"

    def partitions(self) -> SortedSet:
        """
        Return keys of partitions having a parquet file.

        Keys are read from file metadata, to retrieve their type.

        """
        return SortedSet(
            (
                self._parquet_adapter.read_key_value_metadata(entry.path)[KEY_PARTITION_KEY]
                for entry in scandir(self._basepath)
                if entry.is_file() and entry.name.endswith(RANGES_FILE_EXTENSION)
            ),
            key=partition_sort_key,
        )

    def _read(self, partition_key: Hashable):
        filepath = self.get_filepath(partition_key)
        if not filepath.exists():
            return empty(0, dtype=int64), empty(0, dtype=int64)
        df = self._parquet_adapter.read_parquet(filepath, return_key_value_metadata=False)
        return df[KEY_START].to_numpy(dtype=int64), df[KEY_END].to_numpy(dtype=int64)

    def _write(self, partition_key: Hashable, starts, ends):
        filepath = self.get_filepath(partition_key)
        if len(starts):
            self._parquet_adapter.write_parquet(
                filepath,
                ranges_frame(starts, ends),
                key_value_metadata={KEY_PARTITION_KEY: partition_key},
            )
        else:
            filepath.unlink(missing_ok=True)

    def fetch_sorted(self, partition_key: Hashable) -> DataFrame:
        return ranges_frame(*self._read(partition_key))

    def apply(self, partition_key: Hashable, deletions: Collection[int], updates: Dict[int, int]):
        starts, ends = apply_mutations(
            *self._read(partition_key),
            deletions,
            updates,
            self._adjacency,
        )
        self._write(partition_key, starts, ends)
        logger.debug(
            "applied %d deletions and %d updates to '%s'",
            len(deletions),
            len(updates),
            self.get_filepath(partition_key),
        )

    @exclusive_partition_lock
    def insert(self, partition_key: Hashable, start: int, end: int):
        self._write(
            partition_key,
            *insert_range(*self._read(partition_key), start, end, self._adjacency),
        )
