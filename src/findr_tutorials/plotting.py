"""
Figures for result tables and ground-truth comparisons.
"""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
import pandas as pd

from findr_tutorials.results import PROBABILITY, SOURCE, TARGET, top_edges

PLOT_SETTINGS = {
    "figsize": (6, 4),
    "dpi": 150,
    "color": "#4C72B0",
}


def _axes(ax: Axes | None) -> Axes:
    if ax is None:
        _, ax = plt.subplots(figsize=PLOT_SETTINGS["figsize"])
    return ax


def plot_probability_histogram(results: pd.DataFrame, bins: int = 50, ax: Axes | None = None) -> Axes:
    """Histogram of posterior probabilities."""
    ax = _axes(ax)
    ax.hist(results[PROBABILITY], bins=bins, range=(0, 1), color=PLOT_SETTINGS["color"])
    ax.set_xlabel("Posterior probability")
    ax.set_ylabel("Number of pairs")
    return ax


def plot_precision_recall(curve: pd.DataFrame, ax: Axes | None = None, label: str | None = None) -> Axes:
    """Precision against recall from ``evaluation.precision_recall``."""
    ax = _axes(ax)
    ax.plot(curve["recall"], curve["precision"], label=label, color=PLOT_SETTINGS["color"])
    ax.set_xlabel("Recall")
    ax.set_ylabel("Precision")
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1.05)
    if label:
        ax.legend()
    return ax


def plot_top_edges(results: pd.DataFrame, n: int = 20, ax: Axes | None = None) -> Axes:
    """Horizontal bars for the ``n`` most probable pairs, best at the top."""
    ax = _axes(ax)
    top = top_edges(results, n)
    labels = [f"{s} → {t}" for s, t in zip(top[SOURCE], top[TARGET])]
    ax.barh(labels[::-1], top[PROBABILITY].to_numpy()[::-1], color=PLOT_SETTINGS["color"])
    ax.set_xlabel("Posterior probability")
    ax.set_xlim(0, 1)
    return ax


def save_figure(fig: Figure, path: Path | str) -> Path:
    """Save a figure (format from the file suffix) and close it."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out, dpi=PLOT_SETTINGS["dpi"])
    plt.close(fig)
    return out
