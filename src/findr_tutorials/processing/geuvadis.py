"""
Convert the Geuvadis example data of findr into tutorial Arrow tables.

Raw files (exp_raw/findr-data-geuvadis/):
- dt.csv, dm.csv: mRNA and miRNA expression, features as rows
- dgt.csv, dgm.csv: best-eQTL genotypes for the mRNAs and miRNAs
- conversion.txt: Ensembl gene ID to gene name table

Expression and genotype tables are stored with samples as rows and
genes/variants as columns, because the analyses work on profiles across samples.
"""

from pathlib import Path
import logging

import polars as pl

from findr_tutorials.constants import (
    ENSEMBL_ID_COLUMN,
    GENE_NAME_COLUMN,
    GEUVADIS,
    GEUVADIS_EXPRESSION_TABLES,
    GEUVADIS_GENOTYPE_TABLES,
    processed_path,
    raw_path,
)
from findr_tutorials.errors import InputFormatError
from findr_tutorials.io import write_arrow

from .reshape import (
    SAMPLE_COLUMN,
    ProcessingReport,
    check_sample_alignment,
    detect_separator,
    read_feature_table,
    transpose_features,
)

logger = logging.getLogger(__name__)


def strip_version(ensembl_id: str) -> str:
    """Drop the version suffix of an Ensembl ID (ENSG00000123.4 -> ENSG00000123)."""
    return ensembl_id.split(".")[0]


def read_gene_conversion(path: Path) -> pl.DataFrame:
    """Read the Ensembl conversion table as columns EnsemblID, GeneName.

    Raises:
        FileNotFoundError: If the file does not exist
        InputFormatError: If the file cannot be parsed or the expected columns are missing
    """
    if not path.is_file():
        raise FileNotFoundError(f"Raw data file not found: {path}")

    try:
        gmap = pl.read_csv(path, separator=detect_separator(path), infer_schema_length=0)
    except pl.exceptions.PolarsError as e:
        raise InputFormatError(f"{path.name}: {e}") from e
    missing = {ENSEMBL_ID_COLUMN, GENE_NAME_COLUMN} - set(gmap.columns)
    if missing:
        raise InputFormatError(f"{path.name}: missing columns {sorted(missing)}")

    return (
        gmap.select(
            pl.col(ENSEMBL_ID_COLUMN).alias("EnsemblID"),
            pl.col(GENE_NAME_COLUMN).alias("GeneName"),
        )
        .unique(subset="EnsemblID", keep="first", maintain_order=True)
    )


def gene_name_table(expr_columns: list[str], gmap: pl.DataFrame) -> pl.DataFrame:
    """Map expression columns to gene names, one row per column in column order.

    Columns without a match get a null GeneName.
    """
    enames = pl.DataFrame(
        {"EnsemblID": [strip_version(c) for c in expr_columns]},
        schema={"EnsemblID": pl.String},
    ).with_row_index("_order")

    return (
        enames.join(gmap, on="EnsemblID", how="left")
        .sort("_order")
        .drop("_order")
    )


def process_geuvadis(data_dir: Path | str | None = None) -> ProcessingReport:
    """Reshape the raw Geuvadis tables and write them to exp_pro/.

    Args:
        data_dir: Data root (defaults to FINDR_TUTORIALS_DATA or ./data)

    Returns:
        ProcessingReport listing the written tables

    Raises:
        FileNotFoundError: If a raw file is missing
        InputFormatError: If a raw file cannot be parsed
        SampleAlignmentError: If the tables do not share sample ordering
    """
    tables: dict[str, pl.DataFrame] = {}

    for key in GEUVADIS_EXPRESSION_TABLES:
        path = raw_path(GEUVADIS, key, root=data_dir)
        tables[key] = transpose_features(read_feature_table(path), dtype=pl.Float64, source=path.name)

    # The same variant can be the best eQTL of several genes
    for key in GEUVADIS_GENOTYPE_TABLES:
        path = raw_path(GEUVADIS, key, root=data_dir)
        tables[key] = transpose_features(
            read_feature_table(path), dtype=pl.Int32, unique_names=True, source=path.name
        )

    reference = tables[GEUVADIS_EXPRESSION_TABLES[0]]
    check_sample_alignment(
        reference,
        {k: v for k, v in tables.items() if k != GEUVADIS_EXPRESSION_TABLES[0]},
    )
    logger.info(f"All Geuvadis tables share {reference.height} samples")

    tables = {k: v.drop(SAMPLE_COLUMN) for k, v in tables.items()}

    gmap = read_gene_conversion(raw_path(GEUVADIS, "conversion", root=data_dir))
    tables["gene_names"] = gene_name_table(tables["expr"].columns, gmap)

    unnamed = tables["gene_names"].get_column("GeneName").null_count()
    if unnamed:
        logger.warning(f"{unnamed} expression columns have no gene name")

    report = ProcessingReport(dataset=GEUVADIS)
    for key, df in tables.items():
        out = write_arrow(df, processed_path(GEUVADIS, key, root=data_dir))
        report.add(key, out, df)

    return report
