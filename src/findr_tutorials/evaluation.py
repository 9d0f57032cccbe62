"""
Score a ranked result table against a ground-truth network.
"""

import numpy as np
import pandas as pd

from findr_tutorials.results import PROBABILITY, SOURCE, TARGET, sort_results, validate_result_table


def truth_edges(
    truth: pd.DataFrame,
    source_col: str = "TF",
    target_col: str = "Target",
) -> set[tuple[str, str]]:
    """Distinct (source, target) pairs of a ground-truth table, without self-edges."""
    return {
        (s, t)
        for s, t in zip(truth[source_col], truth[target_col])
        if s != t
    }


def precision_recall(
    results: pd.DataFrame,
    truth: pd.DataFrame,
    source_col: str = "TF",
    target_col: str = "Target",
    restrict_to_sources: bool = True,
) -> pd.DataFrame:
    """Precision and recall of the top-k predicted edges for every k.

    Args:
        results: Result table (Source, Target, Probability)
        truth: Ground-truth edge table
        source_col: Regulator column of ``truth``
        target_col: Target column of ``truth``
        restrict_to_sources: Only count truth edges whose source was tested

    Returns:
        DataFrame with columns rank, Source, Target, Probability,
        true_positive, precision, recall (one row per predicted edge,
        self-edges removed)
    """
    ranked = sort_results(validate_result_table(results))
    ranked = ranked[ranked[SOURCE] != ranked[TARGET]].reset_index(drop=True)

    edges = truth_edges(truth, source_col, target_col)
    if restrict_to_sources:
        tested = set(ranked[SOURCE])
        edges = {e for e in edges if e[0] in tested}

    hits = np.array(
        [(s, t) in edges for s, t in zip(ranked[SOURCE], ranked[TARGET])],
        dtype=bool,
    )
    cum_hits = np.cumsum(hits)
    ranks = np.arange(1, len(ranked) + 1)

    return pd.DataFrame(
        {
            "rank": ranks,
            SOURCE: ranked[SOURCE],
            TARGET: ranked[TARGET],
            PROBABILITY: ranked[PROBABILITY],
            "true_positive": hits,
            "precision": cum_hits / ranks,
            "recall": cum_hits / len(edges) if edges else np.zeros(len(ranks)),
        }
    )


def average_precision(curve: pd.DataFrame) -> float:
    """Area under the precision-recall step curve from ``precision_recall``."""
    if curve.empty:
        return 0.0
    recall_steps = np.diff(np.concatenate([[0.0], curve["recall"].to_numpy()]))
    return float(np.sum(curve["precision"].to_numpy() * recall_steps))
