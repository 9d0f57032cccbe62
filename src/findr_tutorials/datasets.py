"""
Loaders for the processed tutorial datasets.

Tables are returned as pandas DataFrames with samples as rows:
- Expression tables: float columns, one per gene/transcript
- Genotype tables: integer columns, one per variant
"""

from dataclasses import dataclass, fields
from pathlib import Path

import pandas as pd

from findr_tutorials.cli_utils import info
from findr_tutorials.config import resolve_data_dir
from findr_tutorials.constants import ECOLI_GRN, GEUVADIS, processed_path
from findr_tutorials.errors import SampleAlignmentError
from findr_tutorials.io import read_arrow_pandas


def _check_same_samples(tables: dict[str, pd.DataFrame]) -> None:
    """All sample-by-feature tables must have the same number of rows."""
    rows = {name: len(df) for name, df in tables.items()}
    if len(set(rows.values())) > 1:
        detail = ", ".join(f"{k}={v}" for k, v in rows.items())
        raise SampleAlignmentError(f"Tables have different numbers of samples: {detail}")


def _check_unique_columns(name: str, df: pd.DataFrame) -> None:
    if not df.columns.is_unique:
        dupes = df.columns[df.columns.duplicated()].unique().tolist()
        raise SampleAlignmentError(f"{name}: duplicated columns {dupes[:5]}")


@dataclass
class GeuvadisData:
    """Geuvadis expression and genotype tables.

    Raises:
        SampleAlignmentError: If the tables disagree on the number of samples,
            an expression table repeats a column, or gene_names does not have
            one row per expression column
    """

    expr: pd.DataFrame
    mirna: pd.DataFrame
    geno: pd.DataFrame
    geno_mirna: pd.DataFrame
    gene_names: pd.DataFrame

    def __post_init__(self) -> None:
        _check_same_samples(
            {
                "expr": self.expr,
                "mirna": self.mirna,
                "geno": self.geno,
                "geno_mirna": self.geno_mirna,
            }
        )
        _check_unique_columns("expr", self.expr)
        _check_unique_columns("mirna", self.mirna)
        if len(self.gene_names) != self.expr.shape[1]:
            raise SampleAlignmentError(
                f"gene_names has {len(self.gene_names)} rows for {self.expr.shape[1]} expression columns"
            )

    @property
    def n_samples(self) -> int:
        return len(self.expr)

    def gene_name(self, column: str) -> str | None:
        """Gene name of an expression column, if known."""
        pos = self.expr.columns.get_loc(column)
        name = self.gene_names["GeneName"].iloc[pos]
        return None if pd.isna(name) else name

    def shape_summary(self) -> pd.DataFrame:
        """Rows and columns of every table."""
        return pd.DataFrame(
            [
                {"table": f.name, "rows": getattr(self, f.name).shape[0], "columns": getattr(self, f.name).shape[1]}
                for f in fields(self)
            ]
        )


@dataclass
class EcoliGRNData:
    """E. coli expression compendium and RegulonDB ground-truth network."""

    expr: pd.DataFrame
    grn: pd.DataFrame

    def __post_init__(self) -> None:
        _check_unique_columns("expr", self.expr)

    @property
    def transcription_factors(self) -> list[str]:
        """TFs of the GRN in expression column order."""
        tfs = set(self.grn["TF"])
        return [c for c in self.expr.columns if c in tfs]

    def shape_summary(self) -> pd.DataFrame:
        """Rows and columns of every table."""
        return pd.DataFrame(
            [
                {"table": "expr", "rows": self.expr.shape[0], "columns": self.expr.shape[1]},
                {"table": "grn", "rows": self.grn.shape[0], "columns": self.grn.shape[1]},
            ]
        )


def load_geuvadis(data_dir: Path | str | None = None, verbose: bool = False) -> GeuvadisData:
    """Load the processed Geuvadis tables.

    Args:
        data_dir: Data root (defaults to config, FINDR_TUTORIALS_DATA or ./data)
        verbose: Print progress messages

    Returns:
        GeuvadisData

    Raises:
        FileNotFoundError: If the data has not been processed yet
        SampleAlignmentError: If tables disagree on the number of samples or
            gene_names does not match the expression columns
    """
    root = resolve_data_dir(data_dir)
    if verbose:
        info(f"Loading {GEUVADIS}...")

    tables = {
        f.name: read_arrow_pandas(processed_path(GEUVADIS, f.name, root=root))
        for f in fields(GeuvadisData)
    }

    data = GeuvadisData(**tables)
    if verbose:
        info(data.shape_summary().to_string(index=False))
    return data


def load_ecoli_grn(data_dir: Path | str | None = None, verbose: bool = False) -> EcoliGRNData:
    """Load the processed E. coli expression and GRN tables.

    Args:
        data_dir: Data root (defaults to config, FINDR_TUTORIALS_DATA or ./data)
        verbose: Print progress messages

    Raises:
        FileNotFoundError: If the data has not been processed yet
    """
    root = resolve_data_dir(data_dir)
    if verbose:
        info(f"Loading {ECOLI_GRN}...")

    expr = read_arrow_pandas(processed_path(ECOLI_GRN, "expr", root=root))
    grn = read_arrow_pandas(processed_path(ECOLI_GRN, "grn", root=root))

    data = EcoliGRNData(expr=expr, grn=grn)
    if verbose:
        info(data.shape_summary().to_string(index=False))
    return data
