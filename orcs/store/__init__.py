#!/usr/bin/env python3
"""
Created on Thu Sep 24 16:00:00 2026.

@author: yoh

"""
from .base import RangeStorage
from .lock import partition_lock
from .memory import InMemoryRangeStorage
from .parquet_store import ParquetRangeStorage


__all__ = [
    "InMemoryRangeStorage",
    "ParquetRangeStorage",
    "RangeStorage",
    "partition_lock",
]
