#!/usr/bin/env python3
"""
Created on Thu Sep 24 16:00:00 2026.

@author: yoh

File-based partition locks.

This module provides NFS-safe exclusive locks per partition using flufl.lock.
One lock file per partition is kept in a lock directory.

Files Structure:

lock_directory/
├── 1.lock                      # Exclusive lock file of partition '1'
└── my_partition.lock           # Exclusive lock file of partition 'my_partition'

"""
import logging
from contextlib import contextmanager
from datetime import timedelta
from functools import wraps
from os.path import sep
from pathlib import Path
from typing import Hashable, Iterator, Optional, Union

from flufl.lock import Lock
from flufl.lock import TimeOutError

from orcs.defines import DEFAULT_LOCK_LIFETIME
from orcs.defines import DEFAULT_LOCK_TIMEOUT
from orcs.defines import LOCK_EXTENSION
from orcs.errors import LockTimeoutError


logger = logging.getLogger(__name__)

# Partition keys are used in file names.
TYPE_ACCEPTED = (int, str)
FORBIDDEN_CHARS = (sep, "|")


def partition_sort_key(partition_key: Hashable):
    """
    Return key sorting int partition keys first, then str ones.

    Int and str partition keys are not comparable with each other.

    """
    return isinstance(partition_key, str), partition_key


def as_timedelta(seconds: Optional[float]) -> Optional[timedelta]:
    # flufl.lock expects intervals as timedelta or integer seconds.
    return None if seconds is None else timedelta(seconds=seconds)


def partition_filename(partition_key: Hashable) -> str:
    """
    Return the string used for 'partition_key' in file names.

    Raises
    ------
    TypeError
        If 'partition_key' is neither an int nor a string.
    ValueError
        If 'partition_key' is an empty string, starts with a dot or contains a
        path separator or '|', used by flufl.lock in its claim file names.

    """
    if isinstance(partition_key, bool) or not isinstance(partition_key, TYPE_ACCEPTED):
        raise TypeError(
            f"partition key has to be an int or a string, not '{type(partition_key)}'.",
        )
    name = str(partition_key)
    if not name or name.startswith(".") or any(char in name for char in FORBIDDEN_CHARS):
        raise ValueError(f"partition key '{name}' cannot be used as a file name.")
    return name


def get_lock_filepath(lock_dirpath: Union[str, Path], partition_key: Hashable) -> Path:
    """
    Return path of the lock file of a partition.
    """
    return Path(lock_dirpath) / f"{partition_filename(partition_key)}{LOCK_EXTENSION}"


@contextmanager
def partition_lock(
    lock_dirpath: Union[str, Path],
    partition_key: Hashable,
    timeout: Optional[int] = DEFAULT_LOCK_TIMEOUT,
    lifetime: Optional[int] = DEFAULT_LOCK_LIFETIME,
) -> Iterator[Lock]:
    """
    Hold exclusive lock on a partition.

    Parameters
    ----------
    lock_dirpath : Union[str, Path]
        Directory where lock files are kept. It is created if not existing.
    partition_key : Hashable
        Key of the partition to lock.
    timeout : Optional[int], default 20
        Maximum time to wait for lock acquisition in seconds. None means
        wait forever, 0 means a single attempt.
    lifetime : Optional[int], default 40
        Maximum lock lifetime in seconds. Once expired, the lock can be broken
        by another process.

    Yields
    ------
    Lock
        The flufl.lock ``Lock`` held, so that caller can refresh it.

    Raises
    ------
    LockTimeoutError
        If lock is not acquired within 'timeout'.

    Example
    -------
    with partition_lock(tmp_path, "my_partition", timeout=5) as lock:
        # exclusive operations here.
        pass

    """
    lock_file = get_lock_filepath(lock_dirpath, partition_key)
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    lock = Lock(str(lock_file), lifetime=as_timedelta(lifetime))
    try:
        lock.lock(timeout=as_timedelta(timeout))
    except TimeOutError as e:
        raise LockTimeoutError(
            f"failed to acquire lock for partition '{partition_key}' within "
            f"{timeout} seconds. Another process may be using this partition.",
            partition_key=partition_key,
        ) from e
    logger.debug("acquired lock '%s'", lock_file)
    try:
        yield lock
    finally:
        lock.unlock(unconditionally=True)
        logger.debug("released lock '%s'", lock_file)


def exclusive_partition_lock(func):
    """
    Ensure exclusive access to a partition during a storage method.

    Decorated method has to take the partition key as first positional
    parameter, and its instance has to expose 'lock_dirpath', 'lock_timeout'
    and 'lock_lifetime' attributes. Only one method locking a given partition
    can run at a time.

    Example
    -------
    @exclusive_partition_lock
    def insert(self, partition_key, start, end):
        # exclusive operations here.
        pass

    """

    @wraps(func)
    def wrapper(self, partition_key, *args, **kwargs):
        with partition_lock(
            self.lock_dirpath,
            partition_key,
            timeout=self.lock_timeout,
            lifetime=self.lock_lifetime,
        ):
            return func(self, partition_key, *args, **kwargs)

    return wrapper
