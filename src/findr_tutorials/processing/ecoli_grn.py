"""
Convert the E. coli M3D expression compendium and the RegulonDB TF-gene
network into aligned tutorial Arrow tables.
"""

from pathlib import Path
import logging

import polars as pl

from findr_tutorials.constants import ECOLI_GRN, REGULONDB_COLUMNS, processed_path, raw_path
from findr_tutorials.errors import InputFormatError
from findr_tutorials.io import write_arrow

from .reshape import SAMPLE_COLUMN, ProcessingReport, read_feature_table, transpose_features

logger = logging.getLogger(__name__)


def probe_to_gene(probe: str) -> str:
    """Gene name of an M3D probe ID: everything before the first underscore."""
    return probe.split("_")[0]


def read_ecoli_expression(path: Path) -> pl.DataFrame:
    """Read the averaged M3D expression file as experiments x genes.

    Probe IDs are truncated to gene names. When two probes map to the
    same gene, the first one is kept.
    """
    raw = read_feature_table(path, separator="\t")

    genes = pl.Series(
        raw.columns[0],
        [probe_to_gene(str(p)) for p in raw.get_column(raw.columns[0]).to_list()],
        dtype=pl.String,
    )
    n_probes = raw.height
    raw = raw.with_columns(genes).filter(genes.is_first_distinct())

    dropped = n_probes - raw.height
    if dropped:
        logger.warning(f"Dropped {dropped} probes whose gene name was already present")

    # Experiment IDs are not needed by the tutorials
    return transpose_features(raw, dtype=pl.Float64, source=path.name).drop(SAMPLE_COLUMN)


def read_regulondb(path: Path) -> pl.DataFrame:
    """Read RegulonDB TF-gene interactions as columns TF, Target, Confidence.

    Raises:
        FileNotFoundError: If the file does not exist
        InputFormatError: If the file cannot be parsed or the RegulonDB columns are missing
    """
    if not path.is_file():
        raise FileNotFoundError(f"Raw data file not found: {path}")

    try:
        grn = pl.read_csv(
            path,
            separator="\t",
            comment_prefix="#",
            quote_char=None,
            infer_schema_length=0,
            truncate_ragged_lines=True,
        )
    except pl.exceptions.PolarsError as e:
        raise InputFormatError(f"{path.name}: {e}") from e
    missing = set(REGULONDB_COLUMNS) - set(grn.columns)
    if missing:
        raise InputFormatError(f"{path.name}: missing columns {sorted(missing)}")

    return grn.select(list(REGULONDB_COLUMNS)).rename(REGULONDB_COLUMNS)


def align_expression_and_grn(
    expr: pl.DataFrame,
    grn: pl.DataFrame,
) -> tuple[pl.DataFrame, pl.DataFrame]:
    """Restrict the GRN to measured genes and the expression table to GRN genes.

    Returns:
        Tuple of (filtered expression, filtered GRN); expression keeps its column order
    """
    genes = set(expr.columns)
    grn = grn.filter(pl.col("TF").is_in(genes) & pl.col("Target").is_in(genes))

    in_grn = set(grn.get_column("TF").to_list()) | set(grn.get_column("Target").to_list())
    expr = expr.select([c for c in expr.columns if c in in_grn])

    logger.info(f"Aligned GRN: {grn.height} interactions between {expr.width} genes")
    return expr, grn


def process_ecoli_grn(data_dir: Path | str | None = None) -> ProcessingReport:
    """Reshape, align and write the E. coli expression and GRN tables.

    Args:
        data_dir: Data root (defaults to FINDR_TUTORIALS_DATA or ./data)

    Returns:
        ProcessingReport listing the written tables
    """
    expr = read_ecoli_expression(raw_path(ECOLI_GRN, "expr", root=data_dir))
    grn = read_regulondb(raw_path(ECOLI_GRN, "grn", root=data_dir))

    expr, grn = align_expression_and_grn(expr, grn)

    report = ProcessingReport(dataset=ECOLI_GRN)
    for key, df in (("expr", expr), ("grn", grn)):
        out = write_arrow(df, processed_path(ECOLI_GRN, key, root=data_dir))
        report.add(key, out, df)

    return report
