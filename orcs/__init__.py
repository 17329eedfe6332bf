#!/usr/bin/env python3
"""
Created on Mon Sep 21 18:00:00 2026.

@author: yoh

"""
# Import version dynamically from package metadata
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version

from .compaction import CompactionCoordinator
from .compaction import CompactionResult
from .compaction import CompactionState
from .compaction import MutationPlan
from .compaction import merge_ranges
from .compaction import plan_compaction
from .errors import LockTimeoutError
from .errors import MissingRangeError
from .errors import OverlapError
from .errors import PreconditionError
from .errors import StorageError
from .ranges import Range
from .store import InMemoryRangeStorage
from .store import ParquetRangeStorage
from .store import RangeStorage


try:
    __version__ = version("orcs")
except PackageNotFoundError:
    # Package is not installed, likely in development
    __version__ = "development"
