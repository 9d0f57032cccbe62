"""
findr tutorials: data preparation and analysis glue.

This package provides utilities for:
- Reshaping the raw tutorial downloads into Arrow tables
- Loading expression, genotype and ground-truth tables
- Sequencing calls to the external findr analysis library
- Post-processing, scoring and plotting its result tables

Datasets:
- findr-data-geuvadis: mRNA/miRNA expression and best-eQTL genotypes
- ecoli-grn: E. coli expression compendium with the RegulonDB TF-gene network
"""

__version__ = "0.1.0"

from .backend import (
    Combination,
    DagMethod,
    DagResult,
    FindrBackend,
    FindrOptions,
)
from .datasets import (
    EcoliGRNData,
    GeuvadisData,
    load_ecoli_grn,
    load_geuvadis,
)
from .errors import FindrTutorialsError

__all__ = [
    "Combination",
    "DagMethod",
    "DagResult",
    "FindrBackend",
    "FindrOptions",
    "EcoliGRNData",
    "GeuvadisData",
    "load_ecoli_grn",
    "load_geuvadis",
    "FindrTutorialsError",
]
