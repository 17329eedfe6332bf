#!/usr/bin/env python3
"""
Created on Mon Sep 21 18:00:00 2026.

@author: yoh

Exceptions raised by orcs.

  - ``PreconditionError``, input ranges are not sorted, duplicated or
    overlapping. Nothing has been modified when it is raised.
  - ``LockTimeoutError``, a partition lock could not be acquired in time, or
    has been lost before applying mutations. Retrying is up to the caller.
  - ``StorageError``, and its subclasses, failures of a storage collaborator.
    A storage raising it leaves the partition unchanged.

"""
from typing import Hashable, Optional


class PreconditionError(ValueError):
    """
    Input ranges violate ordering or no-overlap requirements.
    """


class LockTimeoutError(TimeoutError):
    """
    Exclusive lock on a partition not acquired, or lost.
    """

    def __init__(self, message: str = None, partition_key: Optional[Hashable] = None):
        """
        Exception message and partition key.
        """
        super().__init__(message)
        self.partition_key = partition_key


class StorageError(RuntimeError):
    """
    Failure of a storage collaborator.
    """


class OverlapError(StorageError):
    """
    Mutation or insert would result in overlapping ranges in a partition.
    """


class MissingRangeError(StorageError):
    """
    Mutation targets a range not present in a partition.
    """
