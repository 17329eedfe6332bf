#!/usr/bin/env python3
"""
Created on Sat Sep 26 16:00:00 2026.

@author: yoh

"""
from base64 import b64decode
from base64 import b64encode
from os import replace
from pathlib import Path
from typing import Dict, Union

from cloudpickle import dumps
from cloudpickle import loads
from fastparquet import ParquetFile
from fastparquet import write
from pandas import DataFrame

from orcs.defines import KEY_ORCS_METADATA


TMP_FILE_SUFFIX = ".tmp"


class ParquetAdapter:
    """
    Read and write single parquet files with fastparquet.

    orcs-specific metadata is a dict pickled with cloudpickle, base64 encoded,
    and stored as value of 'orcs' key in parquet key-value metadata.

    Attributes
    ----------
    compression : str, optional
        Compression used by fastparquet.

    """

    def __init__(self, compression: str = None):
        """
        Initialize ParquetAdapter.
        """
        self.compression = compression

    def write_parquet(
        self,
        path: Union[str, Path],
        df: DataFrame,
        key_value_metadata: Dict = None,
    ):
        """
        Write DataFrame to a parquet file, replacing it atomically.

        Data is first written to a temporary file in same directory, which is
        then renamed to 'path'. Readers either see previous file, or new file,
        never a partially written one.

        Parameters
        ----------
        path : Union[str, Path]
            Path of the parquet file.
        df : DataFrame
            Data to write. Index is not written.
        key_value_metadata : Dict, optional
            Metadata to store alongside data.

        """
        path = Path(path)
        tmp_path = path.with_name(f"{path.name}{TMP_FILE_SUFFIX}")
        key_value_metadata = (
            {KEY_ORCS_METADATA: b64encode(dumps(key_value_metadata)).decode()}
            if key_value_metadata
            else None
        )
        try:
            write(
                str(tmp_path),
                df,
                custom_metadata=key_value_metadata,
                file_scheme="simple",
                write_index=False,
                compression=self.compression,
            )
            replace(tmp_path, path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def read_parquet(self, path: Union[str, Path], return_key_value_metadata: bool = True):
        """
        Read parquet file, and possibly its orcs metadata.
        """
        pf = ParquetFile(str(path))
        df = pf.to_pandas()
        return (df, self._decode_metadata(pf)) if return_key_value_metadata else df

    def read_key_value_metadata(self, path: Union[str, Path]) -> Dict:
        """
        Read orcs metadata only, from parquet file footer.
        """
        return self._decode_metadata(ParquetFile(str(path)))

    @staticmethod
    def _decode_metadata(pf: ParquetFile) -> Dict:
        encoded = pf.key_value_metadata.get(KEY_ORCS_METADATA)
        return loads(b64decode(encoded)) if encoded else {}
