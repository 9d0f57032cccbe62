"""
Unit tests for scoring result tables against a ground-truth network.

Run with: pytest tests/unit/test_evaluation.py -v
"""

import numpy as np
import pandas as pd
import pytest

from findr_tutorials.evaluation import average_precision, precision_recall, truth_edges


@pytest.fixture
def predictions():
    return pd.DataFrame(
        {
            "Source": ["A", "B", "A", "A", "C"],
            "Target": ["C", "C", "B", "A", "A"],
            "Probability": [0.8, 0.7, 0.9, 0.95, 0.6],
        }
    )


@pytest.fixture
def truth():
    return pd.DataFrame(
        {
            "TF": ["A", "B", "D", "A", "B"],
            "Target": ["B", "C", "C", "B", "B"],
            "Confidence": ["S", "C", "W", "S", "W"],
        }
    )


def test_truth_edges_dedupes_and_drops_self_edges(truth):
    assert truth_edges(truth) == {("A", "B"), ("B", "C"), ("D", "C")}


def test_curve_ranks_and_self_edges(predictions, truth):
    curve = precision_recall(predictions, truth)

    # The A->A self-edge is removed before ranking
    assert list(zip(curve["Source"], curve["Target"])) == [("A", "B"), ("A", "C"), ("B", "C"), ("C", "A")]
    assert list(curve["rank"]) == [1, 2, 3, 4]
    assert list(curve["true_positive"]) == [True, False, True, False]


def test_precision_and_recall(predictions, truth):
    curve = precision_recall(predictions, truth)

    np.testing.assert_allclose(curve["precision"], [1.0, 0.5, 2 / 3, 0.5])
    # D is never tested, so only A->B and B->C count
    np.testing.assert_allclose(curve["recall"], [0.5, 0.5, 1.0, 1.0])


def test_unrestricted_truth(predictions, truth):
    curve = precision_recall(predictions, truth, restrict_to_sources=False)
    np.testing.assert_allclose(curve["recall"], [1 / 3, 1 / 3, 2 / 3, 2 / 3])
    assert average_precision(curve) == pytest.approx(1 / 3 + (2 / 3) * (1 / 3))


def test_average_precision(predictions, truth):
    curve = precision_recall(predictions, truth)
    assert average_precision(curve) == pytest.approx(0.5 + (2 / 3) * 0.5)


def test_no_true_edges(predictions):
    truth = pd.DataFrame({"TF": ["X"], "Target": ["Y"]})
    curve = precision_recall(predictions, truth)
    assert (curve["recall"] == 0).all()
    assert average_precision(curve) == 0.0


def test_empty_results(truth):
    empty = pd.DataFrame({"Source": [], "Target": [], "Probability": []})
    curve = precision_recall(empty, truth)
    assert curve.empty
    assert average_precision(curve) == 0.0
