#!/usr/bin/env python3
"""
Created on Sun Oct 04 20:00:00 2026.

@author: yoh

"""
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from orcs.errors import LockTimeoutError
from orcs.store import ParquetRangeStorage
from orcs.store.lock import partition_lock
from orcs.store.parquet_adapter import ParquetAdapter


def test_init(tmp_path):
    basepath = tmp_path / "ranges"
    storage = ParquetRangeStorage(str(basepath))
    assert basepath.is_dir()
    assert storage.basepath == basepath.resolve()
    assert storage.lock_dirpath == storage.basepath
    assert storage.adjacency == 1
    assert storage.lock_timeout == 20
    assert storage.lock_lifetime == 40


def test_get_filepath(tmp_path):
    storage = ParquetRangeStorage(tmp_path)
    assert storage.get_filepath(1) == tmp_path.resolve() / "1.parquet"
    assert storage.get_filepath("a") == tmp_path.resolve() / "a.parquet"
    with pytest.raises(ValueError, match="cannot be used as a file name"):
        storage.get_filepath("a/b")


def test_files_and_metadata(tmp_path):
    storage = ParquetRangeStorage(tmp_path)
    storage.insert(1, 1, 10)
    storage.insert("1", 20, 30)
    # Int and str keys share same file name.
    assert sorted(path.name for path in tmp_path.iterdir()) == ["1.parquet"]
    assert list(storage.partitions()) == ["1"]
    df, metadata = ParquetAdapter().read_parquet(storage.get_filepath("1"))
    assert metadata == {"partition_key": "1"}
    assert df["start"].to_list() == [1, 20]


def test_partitions_keep_key_type(tmp_path):
    storage = ParquetRangeStorage(tmp_path)
    storage.insert(10, 1, 10)
    storage.insert(2, 1, 10)
    # Sorted as int, not as str.
    assert list(storage.partitions()) == [2, 10]
    # Reopening storage from same directory.
    assert list(ParquetRangeStorage(tmp_path).partitions()) == [2, 10]


def test_no_file_left_behind(tmp_path):
    storage = ParquetRangeStorage(tmp_path)
    storage.insert("a", 1, 10)
    storage.insert("a", 11, 20)
    storage.apply("a", {11}, {1: 20})
    assert sorted(path.name for path in tmp_path.iterdir()) == ["a.parquet"]
    storage.apply("a", {1}, {})
    assert list(tmp_path.iterdir()) == []


def test_insert_waits_for_partition_lock(tmp_path):
    storage = ParquetRangeStorage(tmp_path, lock_timeout=0)
    with partition_lock(tmp_path, "a", timeout=1):
        with pytest.raises(LockTimeoutError) as exc_info:
            storage.insert("a", 1, 10)
        # Other partitions are not locked.
        storage.insert("b", 1, 10)
    assert exc_info.value.partition_key == "a"
    assert storage.fetch_sorted("a").empty
    storage.insert("a", 1, 10)
    assert list(storage.partitions()) == ["a", "b"]


def test_insert_serialized_with_locked_section(tmp_path):
    storage = ParquetRangeStorage(tmp_path, lock_timeout=5)

    def hold_lock():
        with partition_lock(tmp_path, "a", timeout=1):
            time.sleep(0.5)

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(hold_lock)
        # Let the lock be acquired by the other thread.
        time.sleep(0.1)
        start_time = time.time()
        storage.insert("a", 1, 10)
        end_time = time.time()
        future.result()
    assert end_time - start_time >= 0.3
    assert storage.fetch_sorted("a")["end"].to_list() == [10]
