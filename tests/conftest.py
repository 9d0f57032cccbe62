"""
Pytest configuration and shared fixtures for findr-tutorials tests.

This module provides:
- Raw tutorial files written to a temporary data root
- An isolated configuration file
- A deterministic stand-in for the external analysis library
"""

from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import pytest

from findr_tutorials import config as config_module
from findr_tutorials.backend import DagMethod, DagResult, FindrBackend, FindrOptions
from findr_tutorials.constants import ECOLI_BUILD, ECOLI_EXPRESSION_FILE, ECOLI_GRN, GEUVADIS, RAW_DIR


# ============================================================================
# Raw file contents
# ============================================================================

GEUVADIS_RAW = {
    "dt.csv": """\
,s1,s2,s3,s4,s5
ENSG01.1,1.0,2.0,3.0,4.0,5.5
ENSG02.3,2.0,1.0,0.5,3.0,2.5
ENSG03.1,0.1,0.4,0.3,0.5,0.2
""",
    "dm.csv": """\
,s1,s2,s3,s4,s5
hsa-mir-1,5.0,4.0,3.5,2.0,1.0
hsa-mir-2,0.3,0.9,0.1,0.7,0.4
""",
    "dgt.csv": """\
,s1,s2,s3,s4,s5
rs1,0,1,1,2,2
rs2,2,0,1,0,1
rs1,0,1,1,2,2
""",
    "dgm.csv": """\
,s1,s2,s3,s4,s5
rs9,1,1,0,2,0
""",
    "conversion.txt": """\
Ensembl Gene ID\tAssociated Gene Name
ENSG01\tGENEA
ENSG02\tGENEB
ENSG99\tGENEZ
""",
}

ECOLI_EXPRESSION = """\
probe\texp1\texp2\texp3\texp4
thrL_b0001_at\t1.0\t2.0\t3.0\t2.5
thrA_b0002_at\t0.5\t0.1\t0.9\t0.3
thrA_b0002_x_at\t9.0\t9.0\t9.0\t9.1
araC_b0064_at\t4.0\t3.0\t1.0\t2.0
lacZ_b0344_at\t2.0\t4.5\t6.0\t5.0
xyzQ_b9999_at\t1.0\t1.5\t1.2\t0.7
"""

REGULONDB = """\
# RegulonDB TF-gene interactions
# Columns:
1)riId\t2)regulatorId\t3)RegulatorGeneName\t4)regulatedId\t5)regulatedName\t6)function\t7)confidenceLevel
ri1\tR1\taraC\tG1\tthrL\t+\tC
ri2\tR1\taraC\tG2\tlacZ\t-\tS
ri3\tR2\tthrA\tG3\taraC\t+\tW
ri4\tR1\taraC\tG4\tmissingGene\t+\tS
"""


def write_geuvadis_raw(root: Path, overrides: Optional[dict[str, str]] = None) -> Path:
    """Write the raw Geuvadis files below ``root`` and return their directory."""
    raw_dir = root / RAW_DIR / GEUVADIS
    raw_dir.mkdir(parents=True, exist_ok=True)
    for name, content in {**GEUVADIS_RAW, **(overrides or {})}.items():
        (raw_dir / name).write_text(content)
    return raw_dir


def write_ecoli_raw(root: Path) -> Path:
    """Write the raw E. coli files below ``root`` and return their directory."""
    raw_dir = root / RAW_DIR / ECOLI_GRN
    (raw_dir / ECOLI_BUILD).mkdir(parents=True, exist_ok=True)
    (raw_dir / ECOLI_BUILD / ECOLI_EXPRESSION_FILE).write_text(ECOLI_EXPRESSION)
    (raw_dir / "NetWorkTFGene.txt").write_text(REGULONDB)
    return raw_dir


# ============================================================================
# Stand-in analysis backend
# ============================================================================

def _abs_corr(x, y) -> float:
    r = np.corrcoef(np.asarray(x, dtype=float), np.asarray(y, dtype=float))[0, 1]
    return float(np.clip(np.nan_to_num(abs(r)), 0.0, 1.0))


@FindrBackend.register("fake")
class FakeBackend(FindrBackend):
    """Scores pairs by absolute correlation; records every call."""

    def __init__(self) -> None:
        self.calls: list[dict] = []

    def findr(self, expr, geno=None, mapping=None, options=None):
        options = options or FindrOptions()
        self.calls.append({"geno": geno is not None, "mapping": mapping is not None, "options": options})

        if geno is None:
            sources = options.cols or list(expr.columns)
            rows = [(s, t, _abs_corr(expr[s], expr[t])) for s in sources for t in expr.columns if s != t]
        elif mapping is None:
            rows = [(v, g, _abs_corr(geno[v], expr[g])) for v in geno.columns for g in expr.columns]
        else:
            sources = list(mapping[options.col_gene])
            if options.cols:
                sources = [s for s in sources if s in options.cols]
            rows = [(s, t, _abs_corr(expr[s], expr[t])) for s in sources for t in expr.columns if s != t]

        df = pd.DataFrame(rows, columns=["Source", "Target", "Probability"])
        df["qvalue"] = 1.0 - df["Probability"]
        return df[df["qvalue"] <= options.fdr].reset_index(drop=True)

    def dagfindr(self, results, method=DagMethod.GREEDY_EDGES):
        self.calls.append({"dag": DagMethod(method)})
        kept = []
        children: dict[str, set[str]] = {}

        def reaches(a: str, b: str) -> bool:
            stack, seen = [a], set()
            while stack:
                v = stack.pop()
                if v == b:
                    return True
                if v not in seen:
                    seen.add(v)
                    stack.extend(children.get(v, ()))
            return False

        for i, (s, t) in enumerate(zip(results["Source"], results["Target"])):
            if not reaches(t, s):
                children.setdefault(s, set()).add(t)
                kept.append(i)

        return DagResult.from_edges(results.iloc[kept])


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> Path:
    """Point the configuration file at a temporary directory."""
    config_file = tmp_path / "config" / "config.yaml"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_file.parent)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    monkeypatch.delenv("FINDR_TUTORIALS_DATA", raising=False)
    config_module.reset_config()
    yield config_file
    config_module.reset_config()


@pytest.fixture
def data_root(tmp_path) -> Path:
    """Empty data root."""
    root = tmp_path / "data"
    root.mkdir()
    return root


@pytest.fixture
def geuvadis_root(data_root) -> Path:
    """Data root with the raw Geuvadis files."""
    write_geuvadis_raw(data_root)
    return data_root


@pytest.fixture
def ecoli_root(data_root) -> Path:
    """Data root with the raw E. coli files."""
    write_ecoli_raw(data_root)
    return data_root


@pytest.fixture
def backend() -> FakeBackend:
    return FindrBackend.create("fake")


@pytest.fixture
def result_table() -> pd.DataFrame:
    """Small unsorted result table."""
    return pd.DataFrame(
        {
            "Source": ["rs1", "rs2", "rs3", "rs2", "rs4"],
            "Target": ["GENEA", "GENEA", "GENEB", "GENEB", "GENEC"],
            "Probability": [0.7, 0.9, 0.4, 0.8, 0.1],
            "qvalue": [0.2, 0.05, 0.5, 0.1, 0.9],
        }
    )


@pytest.fixture
def write_geuvadis():
    """Writer for raw Geuvadis files with per-file content overrides."""
    return write_geuvadis_raw
