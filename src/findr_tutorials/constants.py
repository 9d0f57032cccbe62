"""
Data directory layout and dataset definitions.

Raw downloads live under ``<data>/exp_raw/<dataset>/`` and processed Arrow
files under ``<data>/exp_pro/<dataset>/``.
Environment variables can override defaults:
- FINDR_TUTORIALS_DATA: Root of the data directory (default: ./data)
"""

import os
from pathlib import Path
from typing import TypedDict


class DatasetConfig(TypedDict):
    """Configuration for a single tutorial dataset."""

    description: str
    raw_files: dict[str, Path]
    processed_files: dict[str, Path]
    download: list[str]


# Subdirectories of the data root
RAW_DIR = "exp_raw"
PROCESSED_DIR = "exp_pro"


def default_data_root() -> Path:
    """Data root from FINDR_TUTORIALS_DATA, falling back to ./data."""
    return Path(os.environ.get("FINDR_TUTORIALS_DATA", "data"))


def datadir(*parts: str, root: Path | str | None = None) -> Path:
    """Build a path below the data root.

    Args:
        *parts: Path components below the data root
        root: Explicit data root (defaults to ``default_data_root()``)

    Returns:
        Joined path, e.g. ``datadir("exp_raw", "ecoli-grn")``
    """
    base = Path(root) if root is not None else default_data_root()
    return base.joinpath(*parts)


# Dataset names
GEUVADIS = "findr-data-geuvadis"
ECOLI_GRN = "ecoli-grn"

# Geuvadis table keys, in processing order; "expr" defines the sample order
GEUVADIS_EXPRESSION_TABLES = ("expr", "mirna")
GEUVADIS_GENOTYPE_TABLES = ("geno", "geno_mirna")

# Column names of the Ensembl conversion file
ENSEMBL_ID_COLUMN = "Ensembl Gene ID"
GENE_NAME_COLUMN = "Associated Gene Name"

# RegulonDB TF-gene interaction columns and their tutorial names
REGULONDB_COLUMNS = {
    "3)RegulatorGeneName": "TF",
    "5)regulatedName": "Target",
    "7)confidenceLevel": "Confidence",
}

ECOLI_BUILD = "E_coli_v4_Build_6"
ECOLI_EXPRESSION_FILE = "avg_E_coli_v4_Build_6_exps466probes4297.tab"

DATASETS: dict[str, DatasetConfig] = {
    GEUVADIS: {
        "description": "Geuvadis mRNA/miRNA expression with best-eQTL genotypes",
        "raw_files": {
            "expr": Path("dt.csv"),
            "mirna": Path("dm.csv"),
            "geno": Path("dgt.csv"),
            "geno_mirna": Path("dgm.csv"),
            "conversion": Path("conversion.txt"),
        },
        "processed_files": {
            "expr": Path("dt.arrow"),
            "mirna": Path("dm.arrow"),
            "geno": Path("dgt.arrow"),
            "geno_mirna": Path("dgm.arrow"),
            "gene_names": Path("gene_names.arrow"),
        },
        "download": [
            "Download the example data of the findr package:",
            "  https://github.com/lingfeiwang/findr-data-geuvadis",
            "Copy dt.csv, dm.csv, dgt.csv, dgm.csv and conversion.txt into the raw directory.",
        ],
    },
    ECOLI_GRN: {
        "description": "E. coli M3D expression compendium and RegulonDB TF-gene network",
        "raw_files": {
            "expr": Path(ECOLI_BUILD) / ECOLI_EXPRESSION_FILE,
            "grn": Path("NetWorkTFGene.txt"),
        },
        "processed_files": {
            "expr": Path("avg_E_coli_v4_Build_6_exps466probes4297_filtered.arrow"),
            "grn": Path("RegulonDB_v11.1_NetworkTFGene.arrow"),
        },
        "download": [
            "Expression data: http://m3d.mssm.edu/norm/",
            f"  download {ECOLI_BUILD}.tar.gz and extract it (tar -xvf) in the raw directory",
            "Ground-truth GRN: https://regulondb.ccg.unam.mx/menu/download/datasets/index.jsp",
            "  Regulatory Network Interactions -> TF-gene interactions (NetWorkTFGene.txt)",
        ],
    },
}


def raw_path(dataset: str, key: str, root: Path | str | None = None) -> Path:
    """Path of a raw input file of a dataset."""
    return datadir(RAW_DIR, dataset, root=root) / DATASETS[dataset]["raw_files"][key]


def processed_path(dataset: str, key: str, root: Path | str | None = None) -> Path:
    """Path of a processed Arrow file of a dataset."""
    return datadir(PROCESSED_DIR, dataset, root=root) / DATASETS[dataset]["processed_files"][key]


# `findr-tutorials process <command>` for each dataset
PROCESS_COMMANDS = {
    GEUVADIS: "geuvadis",
    ECOLI_GRN: "ecoli-grn",
}
