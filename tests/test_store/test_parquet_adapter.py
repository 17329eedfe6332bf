#!/usr/bin/env python3
"""
Created on Sun Oct 04 16:00:00 2026.

@author: yoh

"""
from unittest.mock import patch

import pytest
from pandas import DataFrame

from orcs.store.parquet_adapter import ParquetAdapter


@pytest.fixture
def df():
    return DataFrame({"start": [1, 25], "end": [20, 40]})


def test_write_read_with_metadata(tmp_path, df):
    path = tmp_path / "ranges.parquet"
    adapter = ParquetAdapter()
    metadata = {"partition_key": "a", "nested": {"k": (1, 2)}}
    adapter.write_parquet(path, df, key_value_metadata=metadata)
    res_df, res_metadata = adapter.read_parquet(path)
    assert res_df.equals(df)
    assert res_metadata == metadata
    assert adapter.read_key_value_metadata(path) == metadata


def test_write_read_without_metadata(tmp_path, df):
    path = tmp_path / "ranges.parquet"
    adapter = ParquetAdapter()
    adapter.write_parquet(path, df)
    assert adapter.read_key_value_metadata(path) == {}
    assert adapter.read_parquet(path, return_key_value_metadata=False).equals(df)


def test_write_replaces_existing_file(tmp_path, df):
    path = tmp_path / "ranges.parquet"
    adapter = ParquetAdapter(compression="SNAPPY")
    adapter.write_parquet(path, df, key_value_metadata={"partition_key": 1})
    adapter.write_parquet(path, df.iloc[:1], key_value_metadata={"partition_key": 2})
    res_df, res_metadata = adapter.read_parquet(path)
    assert res_df["start"].to_list() == [1]
    assert res_metadata == {"partition_key": 2}
    assert [file.name for file in tmp_path.iterdir()] == ["ranges.parquet"]


def test_write_failure_keeps_previous_file(tmp_path, df):
    path = tmp_path / "ranges.parquet"
    adapter = ParquetAdapter()
    adapter.write_parquet(path, df)
    with patch("orcs.store.parquet_adapter.replace", side_effect=OSError("rename failed")):
        with pytest.raises(OSError, match="^rename failed$"):
            adapter.write_parquet(path, df.iloc[:1])
    # Temporary file is removed, previous file is untouched.
    assert [file.name for file in tmp_path.iterdir()] == ["ranges.parquet"]
    assert adapter.read_parquet(path, return_key_value_metadata=False).equals(df)
