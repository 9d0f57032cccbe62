"""
Arrow IPC reading and writing for processed tutorial tables.
"""

from pathlib import Path
import logging

import pandas as pd
import polars as pl

from findr_tutorials.errors import InputFormatError

logger = logging.getLogger(__name__)


def write_arrow(df: pl.DataFrame, path: Path | str) -> Path:
    """Write a table as an Arrow IPC file, creating parent directories.

    Args:
        df: Table to write
        path: Destination ``.arrow`` file

    Returns:
        The path written
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.write_ipc(out)
    logger.info(f"Wrote {df.height} x {df.width} table to {out}")
    return out


def read_arrow(path: Path | str) -> pl.DataFrame:
    """Read an Arrow IPC file.

    Raises:
        FileNotFoundError: If the file does not exist
        InputFormatError: If polars cannot read the file as an Arrow table
    """
    src = Path(path)
    if not src.is_file():
        raise FileNotFoundError(f"Arrow file not found: {src}")
    try:
        return pl.read_ipc(src)
    except pl.exceptions.PolarsError as e:
        raise InputFormatError(f"{src.name}: {e}") from e


def read_arrow_pandas(path: Path | str) -> pd.DataFrame:
    """Read an Arrow IPC file into pandas."""
    return read_arrow(path).to_pandas()
