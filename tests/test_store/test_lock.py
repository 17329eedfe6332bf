#!/usr/bin/env python3
"""
Tests for partition locking functionality.
"""
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Union

import pytest

from orcs.errors import LockTimeoutError
from orcs.store.lock import exclusive_partition_lock
from orcs.store.lock import get_lock_filepath
from orcs.store.lock import partition_filename
from orcs.store.lock import partition_lock
from orcs.store.lock import partition_sort_key


class MockStorage:
    """
    Mock storage class for testing the decorator.
    """

    def __init__(self, lock_dirpath: Union[str, Path], lock_timeout=2):
        self.lock_dirpath = Path(lock_dirpath).resolve()
        self.lock_timeout = lock_timeout
        self.lock_lifetime = 10

    @exclusive_partition_lock
    def slow_operation(self, partition_key, sleep_time=1):
        """
        Dummy operation that takes some time.
        """
        time.sleep(sleep_time)
        return partition_key


@pytest.mark.parametrize(
    "partition_key, expected",
    [
        (1, "1"),
        ("my_partition", "my_partition"),
        ("set-1", "set-1"),
    ],
)
def test_partition_filename(partition_key, expected):
    assert partition_filename(partition_key) == expected


@pytest.mark.parametrize(
    "partition_key, error",
    [
        (1.5, TypeError),
        (True, TypeError),
        (("a", 1), TypeError),
        ("", ValueError),
        (".hidden", ValueError),
        ("a/b", ValueError),
        ("a|b", ValueError),
    ],
)
def test_partition_filename_invalid(partition_key, error):
    with pytest.raises(error):
        partition_filename(partition_key)


def test_partition_sort_key():
    assert sorted(["b", 10, "a", 2], key=partition_sort_key) == [2, 10, "a", "b"]


def test_get_lock_filepath(tmp_path):
    assert get_lock_filepath(tmp_path, 1) == tmp_path / "1.lock"


def test_partition_lock_creates_and_removes_lock_file(tmp_path):
    lock_dirpath = tmp_path / "locks"
    with partition_lock(lock_dirpath, "a", timeout=1, lifetime=10) as lock:
        assert lock.is_locked
        assert get_lock_filepath(lock_dirpath, "a").exists()
    assert not lock.is_locked
    assert not get_lock_filepath(lock_dirpath, "a").exists()


def test_partition_lock_released_on_exception(tmp_path):
    with pytest.raises(RuntimeError, match="^failure$"):
        with partition_lock(tmp_path, "a", timeout=1):
            raise RuntimeError("failure")
    with partition_lock(tmp_path, "a", timeout=0):
        pass


def test_partition_lock_timeout(tmp_path):
    with partition_lock(tmp_path, "a", timeout=1):
        start_time = time.time()
        with pytest.raises(LockTimeoutError, match="within 0.5 seconds") as exc_info:
            with partition_lock(tmp_path, "a", timeout=0.5):
                pass
        assert time.time() - start_time >= 0.5
    assert exc_info.value.partition_key == "a"
    assert isinstance(exc_info.value, TimeoutError)


def test_partition_lock_other_partition_not_blocked(tmp_path):
    with partition_lock(tmp_path, "a", timeout=1):
        with partition_lock(tmp_path, "b", timeout=0):
            pass


def test_exclusive_lock_blocks_concurrent_access(tmp_path):
    """
    Test that exclusive lock prevents concurrent access.
    """

    def worker_task(sleep_time):
        """
        Worker that tries to access the same partition.
        """
        mock = MockStorage(tmp_path)
        start_time = time.time()
        result = mock.slow_operation("a", sleep_time=sleep_time)
        end_time = time.time()
        return result, start_time, end_time

    # Run two tasks concurrently
    with ThreadPoolExecutor(max_workers=2) as executor:
        future1 = executor.submit(worker_task, 0.5)  # Task 1: sleeps 0.5s
        future2 = executor.submit(worker_task, 0.1)  # Task 2: sleeps 0.1s

        result1, start1, end1 = future1.result()
        result2, start2, end2 = future2.result()

    # Both should complete successfully
    assert result1 == "a"
    assert result2 == "a"

    # Tasks should run sequentially, not concurrently.
    total_time = max(end1, end2) - min(start1, start2)
    expected_min_time = 0.5 + 0.1
    assert total_time >= expected_min_time


def test_exclusive_lock_timeout(tmp_path):
    mock = MockStorage(tmp_path, lock_timeout=0)
    with partition_lock(tmp_path, "a", timeout=1):
        with pytest.raises(LockTimeoutError):
            mock.slow_operation("a", sleep_time=0)
    assert mock.slow_operation("a", sleep_time=0) == "a"
