"""
The analysis sequences shown in the tutorials.

Every step hands tables to the analysis backend with the tutorial's
arguments, then validates and sorts what comes back. Nothing here loads
data; pass tables from ``findr_tutorials.datasets``.
"""

from dataclasses import dataclass
from typing import Optional
import logging

import pandas as pd

from findr_tutorials.backend import Combination, DagMethod, DagResult, FindrBackend, FindrOptions
from findr_tutorials.config import get_config
from findr_tutorials.datasets import EcoliGRNData, GeuvadisData
from findr_tutorials.errors import BackendNotFoundError
from findr_tutorials.evaluation import average_precision, precision_recall
from findr_tutorials.results import (
    SOURCE,
    TARGET,
    sort_results,
    strongest_association_per_target,
    validate_mapping,
    validate_result_table,
)

logger = logging.getLogger(__name__)


def get_backend(backend: FindrBackend | str | None = None) -> FindrBackend:
    """Return ``backend`` itself, or create the backend registered under a name.

    Without an argument the ``backend`` key of the config file is used.

    Raises:
        BackendNotFoundError: If no backend is given or configured, or the name is unknown
    """
    if isinstance(backend, FindrBackend):
        return backend
    name = backend or get_config().backend
    if not name:
        raise BackendNotFoundError(
            "No analysis backend given. Pass one or run: findr-tutorials config set backend <name>"
        )
    return FindrBackend.create(name)


def _fdr(fdr: Optional[float]) -> float:
    return get_config().fdr if fdr is None else fdr


def _finish(step: str, results: pd.DataFrame) -> pd.DataFrame:
    validate_result_table(results)
    logger.info(f"{step}: {len(results):,} pairs returned")
    return sort_results(results)


def coexpression(
    backend: FindrBackend,
    expr: pd.DataFrame,
    fdr: Optional[float] = None,
    cols: Optional[list[str]] = None,
) -> pd.DataFrame:
    """Posterior probabilities of coexpression between genes.

    Args:
        backend: Analysis backend
        expr: Expression table (samples x genes)
        fdr: FDR threshold applied by the library (default: config fdr)
        cols: Only use these genes as Source
    """
    fdr = _fdr(fdr)
    options = FindrOptions(fdr=fdr, cols=cols)
    logger.info(f"coexpression: {expr.shape[1]} genes, fdr={fdr}")
    return _finish("coexpression", backend.findr(expr, options=options))


def association(
    backend: FindrBackend,
    expr: pd.DataFrame,
    geno: pd.DataFrame,
    fdr: Optional[float] = None,
) -> pd.DataFrame:
    """Posterior probabilities of association between variants (Source) and genes (Target)."""
    fdr = _fdr(fdr)
    if len(expr) != len(geno):
        logger.warning(f"association: {len(expr)} expression rows vs {len(geno)} genotype rows")
    options = FindrOptions(fdr=fdr)
    logger.info(f"association: {geno.shape[1]} variants x {expr.shape[1]} genes, fdr={fdr}")
    return _finish("association", backend.findr(expr, geno, options=options))


def causal_inference(
    backend: FindrBackend,
    expr: pd.DataFrame,
    geno: pd.DataFrame,
    mapping: pd.DataFrame,
    combination: Combination | str = Combination.IV,
    fdr: Optional[float] = None,
    col_genotype: str = SOURCE,
    col_gene: str = TARGET,
    cols: Optional[list[str]] = None,
) -> pd.DataFrame:
    """Posterior probabilities of causal gene-gene relationships.

    Args:
        backend: Analysis backend
        expr: Expression table (samples x genes)
        geno: Genotype table with the same sample order as ``expr``
        mapping: Variant-to-gene table with unique genes
        combination: How the library combines its tests
        fdr: FDR threshold applied by the library (default: config fdr)
        col_genotype: Mapping column with variant names
        col_gene: Mapping column with gene names
        cols: Only use these genes as Source
    """
    validate_mapping(mapping, expr, geno, col_genotype=col_genotype, col_gene=col_gene)
    fdr = _fdr(fdr)
    options = FindrOptions(
        fdr=fdr,
        cols=cols,
        col_genotype=col_genotype,
        col_gene=col_gene,
        combination=combination,
    )
    logger.info(
        f"causal inference: {len(mapping)} mapped genes, "
        f"combination={options.combination.value}, fdr={fdr}"
    )
    return _finish("causal inference", backend.findr(expr, geno, mapping, options=options))


def build_dag(
    backend: FindrBackend,
    results: pd.DataFrame,
    method: DagMethod | str | None = None,
) -> DagResult:
    """Turn a result table into a DAG and check that it is acyclic.

    ``method`` defaults to the dag_method of the config file.
    """
    method = DagMethod(method or get_config().dag_method)
    dag = backend.dagfindr(sort_results(validate_result_table(results)), method=method)
    dag.topological_order()
    logger.info(f"DAG ({method.value}): {dag.n_vertices} vertices, {dag.n_edges} edges")
    return dag


@dataclass
class TutorialResults:
    """Tables produced by one tutorial run."""

    association: Optional[pd.DataFrame] = None
    mapping: Optional[pd.DataFrame] = None
    causal: Optional[pd.DataFrame] = None
    coexpression: Optional[pd.DataFrame] = None
    dag: Optional[DagResult] = None
    precision_recall: Optional[pd.DataFrame] = None
    average_precision: Optional[float] = None


def run_geuvadis_tutorial(
    backend: FindrBackend | str | None,
    data: GeuvadisData,
    fdr: Optional[float] = None,
    combination: Combination | str = Combination.IV,
    dag_method: DagMethod | str | None = None,
    causal_fdr: Optional[float] = None,
) -> TutorialResults:
    """Association, mapping, causal inference and DAG on the Geuvadis data.

    Args:
        backend: Analysis backend, registered backend name, or None for the configured one
        data: Loaded Geuvadis tables
        fdr: FDR threshold for association and causal inference (default: config fdr)
        combination: Test combination for causal inference
        dag_method: DAG construction method (default: config dag_method)
        causal_fdr: FDR threshold for causal inference (defaults to fdr)
    """
    backend = get_backend(backend)
    fdr = _fdr(fdr)
    out = TutorialResults()
    out.association = association(backend, data.expr, data.geno, fdr=fdr)
    out.mapping = strongest_association_per_target(out.association)
    out.causal = causal_inference(
        backend,
        data.expr,
        data.geno,
        out.mapping,
        combination=combination,
        fdr=causal_fdr if causal_fdr is not None else fdr,
    )
    out.dag = build_dag(backend, out.causal, method=dag_method)
    return out


def run_ecoli_tutorial(
    backend: FindrBackend | str | None,
    data: EcoliGRNData,
    fdr: Optional[float] = None,
) -> TutorialResults:
    """Coexpression from the TFs of the E. coli GRN, scored against RegulonDB.

    ``backend`` and ``fdr`` fall back to the config file like in ``run_geuvadis_tutorial``.
    """
    backend = get_backend(backend)
    out = TutorialResults()
    out.coexpression = coexpression(backend, data.expr, fdr=fdr, cols=data.transcription_factors)
    out.precision_recall = precision_recall(out.coexpression, data.grn)
    out.average_precision = average_precision(out.precision_recall)
    return out
