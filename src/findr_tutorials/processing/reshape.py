"""
Shared helpers for turning feature-by-sample text tables into
sample-by-feature Arrow tables.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
import logging

import polars as pl

from findr_tutorials.cli_utils import info, success
from findr_tutorials.errors import InputFormatError, SampleAlignmentError

logger = logging.getLogger(__name__)

SAMPLE_COLUMN = "sample"


@dataclass
class ProcessingReport:
    """Outputs of processing one dataset."""

    dataset: str
    outputs: dict[str, Path] = field(default_factory=dict)
    shapes: dict[str, tuple[int, int]] = field(default_factory=dict)

    def add(self, key: str, path: Path, df: pl.DataFrame) -> None:
        self.outputs[key] = path
        self.shapes[key] = df.shape

    def print_summary(self) -> None:
        """Print written files and table shapes."""
        info("=" * 60)
        info(f"Processed {self.dataset}")
        info("=" * 60)
        for key, path in self.outputs.items():
            rows, cols = self.shapes[key]
            success(f"  {key}: {rows:,} x {cols:,} -> {path}")


def make_unique(names: list[str]) -> list[str]:
    """Suffix repeated names with _1, _2, ... keeping the first occurrence as is.

    >>> make_unique(["rs1", "rs2", "rs1", "rs1"])
    ['rs1', 'rs2', 'rs1_1', 'rs1_2']
    """
    seen: Counter[str] = Counter()
    taken = set(names)
    unique = []
    for name in names:
        if seen[name] == 0:
            unique.append(name)
        else:
            # Skip suffixes that collide with names already in the input
            suffix = seen[name]
            while f"{name}_{suffix}" in taken:
                suffix += 1
            seen[name] = suffix
            candidate = f"{name}_{suffix}"
            taken.add(candidate)
            unique.append(candidate)
        seen[name] += 1
    return unique


def detect_separator(path: Path) -> str:
    """Guess tab or comma from the header line of a text table."""
    with open(path) as f:
        header = f.readline()
    return "\t" if "\t" in header else ","


def read_feature_table(path: Path, separator: str = ",") -> pl.DataFrame:
    """Read a text table with one feature per row and one sample per column.

    Raises:
        FileNotFoundError: If the file does not exist
        InputFormatError: If the table cannot be parsed or has no sample columns
    """
    if not path.is_file():
        raise FileNotFoundError(f"Raw data file not found: {path}")

    try:
        df = pl.read_csv(
            path,
            separator=separator,
            null_values=["NA", "NaN", ""],
            infer_schema_length=10_000,
        )
    except pl.exceptions.PolarsError as e:
        raise InputFormatError(f"{path.name}: {e}") from e
    if df.width < 2:
        raise InputFormatError(f"{path.name}: expected an ID column and at least one sample column")

    logger.debug(f"Read {path.name}: {df.height} features x {df.width - 1} samples")
    return df


def transpose_features(
    df: pl.DataFrame,
    dtype: type[pl.DataType] = pl.Float64,
    unique_names: bool = False,
    source: str = "table",
) -> pl.DataFrame:
    """Transpose a feature-by-sample table to sample-by-feature.

    The first column of ``df`` holds feature IDs. The result has a leading
    ``sample`` column with the original column headers, followed by one
    column per feature cast to ``dtype``.

    Args:
        df: Feature-by-sample table
        dtype: Value type of the feature columns
        unique_names: Suffix duplicated feature IDs instead of failing
        source: Name used in error messages, usually the raw file name

    Raises:
        InputFormatError: If feature IDs repeat and ``unique_names`` is False,
            or a value cannot be cast to ``dtype``
    """
    id_col = df.columns[0]
    names = df.get_column(id_col).cast(pl.String).to_list()

    if unique_names:
        names = make_unique(names)
    elif len(set(names)) != len(names):
        dupes = sorted(name for name, n in Counter(names).items() if n > 1)
        raise InputFormatError(f"{source}: duplicated feature IDs: {', '.join(dupes[:5])}")

    try:
        transposed = df.drop(id_col).transpose(
            include_header=True,
            header_name=SAMPLE_COLUMN,
            column_names=names,
        )
        return transposed.with_columns(pl.exclude(SAMPLE_COLUMN).cast(dtype))
    except pl.exceptions.PolarsError as e:
        raise InputFormatError(f"{source}: values cannot be read as {dtype}: {e}") from e


def check_sample_alignment(reference: pl.DataFrame, tables: dict[str, pl.DataFrame]) -> None:
    """Verify that every table lists the same samples in the same order as ``reference``.

    Raises:
        SampleAlignmentError: With the fraction of matching rows for the first mismatch
    """
    ref_samples = reference.get_column(SAMPLE_COLUMN).to_list()

    for name, df in tables.items():
        samples = df.get_column(SAMPLE_COLUMN).to_list()
        if samples == ref_samples:
            continue
        matching = sum(a == b for a, b in zip(ref_samples, samples))
        raise SampleAlignmentError(
            f"{name}: sample order differs from expression table "
            f"({matching}/{len(ref_samples)} rows match, {len(samples)} rows found)"
        )
