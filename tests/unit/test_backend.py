"""
Unit tests for the analysis-library boundary.

Run with: pytest tests/unit/test_backend.py -v
"""

import pandas as pd
import pytest

from findr_tutorials.backend import Combination, DagMethod, DagResult, FindrBackend, FindrOptions
from findr_tutorials.errors import BackendNotFoundError, ResultTableError


class TestFindrOptions:
    """Tests for option validation."""

    def test_defaults(self):
        opts = FindrOptions()
        assert opts.fdr == 1.0
        assert opts.cols is None
        assert opts.col_genotype == "Source"
        assert opts.col_gene == "Target"
        assert opts.combination is Combination.NONE

    def test_combination_from_string(self):
        assert FindrOptions(combination="IV").combination is Combination.IV
        assert FindrOptions(combination="mediation").combination is Combination.MEDIATION

    @pytest.mark.parametrize("fdr", [0.0, -0.1, 1.5])
    def test_invalid_fdr(self, fdr):
        with pytest.raises(ValueError, match="fdr"):
            FindrOptions(fdr=fdr)

    def test_unknown_combination(self):
        with pytest.raises(ValueError):
            FindrOptions(combination="bayes")

    def test_empty_cols(self):
        with pytest.raises(ValueError, match="cols"):
            FindrOptions(cols=[])

    def test_cols_copied_to_list(self):
        assert FindrOptions(cols=("a", "b")).cols == ["a", "b"]


class TestDagMethod:
    def test_values(self):
        assert DagMethod("greedy edges") is DagMethod.GREEDY_EDGES
        assert DagMethod("heuristic sort") is DagMethod.HEURISTIC_SORT
        assert DagMethod("greedy insertion") is DagMethod.GREEDY_INSERTION


class TestRegistry:
    """Tests for backend registration and lookup."""

    def test_create_registered(self):
        backend = FindrBackend.create("FAKE")
        assert isinstance(backend, FindrBackend)
        assert "fake" in FindrBackend.available()

    def test_unknown_backend(self):
        with pytest.raises(BackendNotFoundError, match="nope"):
            FindrBackend.create("nope")

    def test_abstract_methods_required(self):
        class Incomplete(FindrBackend):
            pass

        with pytest.raises(TypeError):
            Incomplete()


class TestDagResult:
    """Tests for the DAG container."""

    @pytest.fixture
    def edges(self):
        return pd.DataFrame(
            {
                "Source": ["A", "A", "B"],
                "Target": ["B", "C", "C"],
                "Probability": [0.9, 0.8, 0.7],
            }
        )

    def test_from_edges_numbers_vertices(self, edges):
        dag = DagResult.from_edges(edges)
        assert dag.name_to_index == {"A": 0, "B": 1, "C": 2}
        assert dag.n_vertices == 3
        assert dag.n_edges == 3

    def test_adjacency(self, edges):
        dag = DagResult.from_edges(edges)
        assert dag.adjacency() == {0: [1, 2], 1: [2], 2: []}

    def test_topological_order(self, edges):
        assert DagResult.from_edges(edges).topological_order() == ["A", "B", "C"]

    def test_cycle_detected(self, edges):
        cyclic = pd.concat(
            [edges, pd.DataFrame({"Source": ["C"], "Target": ["A"], "Probability": [0.5]})],
            ignore_index=True,
        )
        with pytest.raises(ResultTableError, match="acyclic"):
            DagResult.from_edges(cyclic).topological_order()

    def test_unknown_vertex(self, edges):
        dag = DagResult(edges=edges, name_to_index={"A": 0, "B": 1})
        with pytest.raises(ResultTableError, match="unknown vertex"):
            dag.adjacency()
