#!/usr/bin/env python3
"""
Created on Mon Sep 21 18:00:00 2026.

@author: yoh

"""
# Column names of ranges, in DataFrames and in structured arrays.
KEY_PARTITION_KEY = "partition_key"
KEY_START = "start"
KEY_END = "end"
# Fields specific to reduced islands.
KEY_ISLAND_ID = "island_id"
# Position, in input ranges, of the first range of an island.
KEY_REP_IDX = "rep_idx"
# Largest gap between the end of a range and the start of the next one for both
# to be considered contiguous. 1 is the smallest step between integers, with
# closed ranges '[start, end]'. 0 is for half-open ranges '[start, end)'.
DEFAULT_ADJACENCY = 1
# Partition lock settings, in seconds.
DEFAULT_LOCK_TIMEOUT = 20
DEFAULT_LOCK_LIFETIME = 40
LOCK_EXTENSION = ".lock"
# In a fastparquet `ParquetFile`, orcs-specific metadata is stored as value for
# key `KEY_ORCS_METADATA`.
KEY_ORCS_METADATA = "orcs"
RANGES_FILE_EXTENSION = ".parquet"
