"""
Helpers for the result tables returned by the analysis library.

A result table has one row per tested (Source, Target) pair with the
posterior probability that the relationship is non-null and, usually,
a derived q-value.
"""

import pandas as pd

from findr_tutorials.errors import MappingError, ResultTableError

SOURCE = "Source"
TARGET = "Target"
PROBABILITY = "Probability"
QVALUE = "qvalue"

RESULT_COLUMNS = [SOURCE, TARGET, PROBABILITY]


def validate_result_table(df: pd.DataFrame) -> pd.DataFrame:
    """Check that a result table has the expected columns and value ranges.

    Returns:
        The same DataFrame, for chaining

    Raises:
        ResultTableError: On missing columns, or probabilities or q-values
            that are missing or outside [0, 1]
    """
    missing = [c for c in RESULT_COLUMNS if c not in df.columns]
    if missing:
        raise ResultTableError(f"Result table missing columns: {missing}")

    probs = df[PROBABILITY]
    if probs.isna().any() or ((probs < 0) | (probs > 1)).any():
        raise ResultTableError("Probability values must lie in [0, 1]")

    if QVALUE in df.columns:
        q = df[QVALUE]
        if q.isna().any() or ((q < 0) | (q > 1)).any():
            raise ResultTableError("qvalue values must lie in [0, 1]")

    return df


def sort_results(df: pd.DataFrame) -> pd.DataFrame:
    """Sort by decreasing probability, keeping input order among ties."""
    return df.sort_values(PROBABILITY, ascending=False, kind="mergesort").reset_index(drop=True)


def top_edges(df: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """The ``n`` most probable pairs."""
    return sort_results(df).head(n)


def filter_by_qvalue(df: pd.DataFrame, fdr: float) -> pd.DataFrame:
    """Keep pairs whose q-value does not exceed ``fdr``.

    Raises:
        ResultTableError: If the table has no qvalue column
    """
    if QVALUE not in df.columns:
        raise ResultTableError("Result table has no qvalue column")
    return df[df[QVALUE] <= fdr].reset_index(drop=True)


def strongest_association_per_target(df: pd.DataFrame) -> pd.DataFrame:
    """Build the variant-to-gene mapping from an association result table.

    For every Target (gene) keep only the Source (variant) with the highest
    probability. Ties go to the row that comes first in the input.

    Returns:
        DataFrame with columns Source, Target, Probability, sorted by
        decreasing probability, with unique Targets
    """
    validate_result_table(df)
    best = (
        sort_results(df[RESULT_COLUMNS])
        .drop_duplicates(subset=TARGET, keep="first")
        .reset_index(drop=True)
    )
    return best


def validate_mapping(
    mapping: pd.DataFrame,
    expr: pd.DataFrame,
    geno: pd.DataFrame,
    col_genotype: str = SOURCE,
    col_gene: str = TARGET,
) -> None:
    """Check a variant-to-gene mapping against its expression and genotype tables.

    Raises:
        MappingError: If columns are missing, genes repeat, or names are
            not columns of the corresponding table
    """
    for col in (col_genotype, col_gene):
        if col not in mapping.columns:
            raise MappingError(f"Mapping table has no column '{col}'")

    genes = mapping[col_gene]
    if not genes.is_unique:
        dupes = genes[genes.duplicated()].unique().tolist()
        raise MappingError(f"Genes mapped more than once: {dupes[:5]}")

    unknown_genes = sorted(set(genes) - set(expr.columns))
    if unknown_genes:
        raise MappingError(f"Genes not in expression table: {unknown_genes[:5]}")

    unknown_variants = sorted(set(mapping[col_genotype]) - set(geno.columns))
    if unknown_variants:
        raise MappingError(f"Variants not in genotype table: {unknown_variants[:5]}")
