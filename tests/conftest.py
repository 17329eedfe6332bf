#!/usr/bin/env python3
"""
Created on Mon Sep 28 18:00:00 2026.

@author: yoh

"""
import pytest

from orcs.store import InMemoryRangeStorage
from orcs.store import ParquetRangeStorage


@pytest.fixture(params=["memory", "parquet"])
def storage(request, tmp_path):
    """
    Empty storage, of each available type.
    """
    if request.param == "memory":
        return InMemoryRangeStorage(lock_dirpath=tmp_path / "locks")
    return ParquetRangeStorage(tmp_path / "ranges", lock_timeout=5, lock_lifetime=10)


@pytest.fixture
def example_ranges():
    """
    Ranges of partition '1', as '(start, end)' tuples, sorted by start.
    """
    return [(1, 10), (11, 15), (16, 20), (25, 30), (31, 40), (45, 50), (55, 60), (61, 80)]
