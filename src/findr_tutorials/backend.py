"""
Boundary to the external statistical-genomics library.

The tutorials never compute likelihood ratios, posterior probabilities or
DAGs themselves. They call a ``FindrBackend``: an adapter around the
library's two exported entry points, ``findr`` (tests and posterior
probabilities) and ``dagfindr`` (DAG construction from a result table).

Adapters register themselves by name:

    @FindrBackend.register("mylib")
    class MyLibBackend(FindrBackend):
        def findr(self, expr, geno=None, mapping=None, options=None): ...
        def dagfindr(self, results, method=DagMethod.GREEDY_EDGES): ...

    backend = FindrBackend.create("mylib")
"""

from abc import ABC, abstractmethod
from collections import defaultdict, deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import pandas as pd

from findr_tutorials.errors import BackendNotFoundError, ResultTableError
from findr_tutorials.results import PROBABILITY, SOURCE, TARGET


class Combination(str, Enum):
    """How the library combines its causal tests into one probability."""

    NONE = "none"
    IV = "IV"
    MEDIATION = "mediation"
    ORIG = "orig"


class DagMethod(str, Enum):
    """Edge-selection strategy for turning a result table into a DAG."""

    GREEDY_EDGES = "greedy edges"
    HEURISTIC_SORT = "heuristic sort"
    GREEDY_INSERTION = "greedy insertion"


@dataclass
class FindrOptions:
    """Named options passed to the library's analysis entry point.

    Attributes:
        fdr: Keep only pairs with q-value <= fdr (1.0 keeps everything)
        cols: Restrict the analysis to these Source columns
        col_genotype: Mapping column holding variant names
        col_gene: Mapping column holding gene names
        combination: Test-combination strategy for causal inference
    """

    fdr: float = 1.0
    cols: Optional[list[str]] = None
    col_genotype: str = SOURCE
    col_gene: str = TARGET
    combination: Combination = Combination.NONE

    def __post_init__(self) -> None:
        if not 0 < self.fdr <= 1:
            raise ValueError(f"fdr must be in (0, 1], got {self.fdr}")
        if self.cols is not None:
            self.cols = list(self.cols)
            if not self.cols:
                raise ValueError("cols must name at least one column")
        self.combination = Combination(self.combination)


@dataclass
class DagResult:
    """A DAG returned by the library.

    Attributes:
        edges: Edge table (Source, Target, Probability) of the retained edges
        name_to_index: Vertex name to integer index
    """

    edges: pd.DataFrame
    name_to_index: dict[str, int] = field(default_factory=dict)

    @property
    def n_vertices(self) -> int:
        return len(self.name_to_index)

    @property
    def n_edges(self) -> int:
        return len(self.edges)

    def adjacency(self) -> dict[int, list[int]]:
        """Vertex index to sorted child indices."""
        adj: dict[int, list[int]] = {i: [] for i in self.name_to_index.values()}
        for src, tgt in zip(self.edges[SOURCE], self.edges[TARGET]):
            try:
                adj[self.name_to_index[src]].append(self.name_to_index[tgt])
            except KeyError as e:
                raise ResultTableError(f"DAG edge refers to unknown vertex {e}") from e
        return {k: sorted(v) for k, v in adj.items()}

    def topological_order(self) -> list[str]:
        """Vertex names with every parent before its children.

        Raises:
            ResultTableError: If the graph contains a cycle
        """
        adj = self.adjacency()
        indegree: dict[int, int] = defaultdict(int)
        for children in adj.values():
            for child in children:
                indegree[child] += 1

        queue = deque(sorted(v for v in adj if indegree[v] == 0))
        order = []
        while queue:
            v = queue.popleft()
            order.append(v)
            for child in adj[v]:
                indegree[child] -= 1
                if indegree[child] == 0:
                    queue.append(child)

        if len(order) != len(adj):
            raise ResultTableError("Graph returned by the library is not acyclic")

        index_to_name = {i: name for name, i in self.name_to_index.items()}
        return [index_to_name[i] for i in order]

    @classmethod
    def from_edges(cls, edges: pd.DataFrame) -> "DagResult":
        """Build a DagResult, numbering vertices in order of first appearance."""
        names: dict[str, int] = {}
        for name in pd.concat([edges[SOURCE], edges[TARGET]]).tolist():
            names.setdefault(name, len(names))
        return cls(edges=edges[[SOURCE, TARGET, PROBABILITY]].reset_index(drop=True), name_to_index=names)


class FindrBackend(ABC):
    """Adapter for the external analysis library."""

    _registry: dict[str, type] = {}

    @classmethod
    def register(cls, name: str):
        """Decorator registering a backend class under ``name``."""

        def decorator(subclass):
            cls._registry[name.lower()] = subclass
            return subclass

        return decorator

    @classmethod
    def available(cls) -> list[str]:
        return sorted(cls._registry)

    @classmethod
    def create(cls, name: str, **kwargs) -> "FindrBackend":
        """Instantiate the backend registered under ``name``.

        Raises:
            BackendNotFoundError: If no backend has that name
        """
        key = name.lower()
        if key not in cls._registry:
            supported = ", ".join(cls.available()) or "none registered"
            raise BackendNotFoundError(f"Unknown analysis backend '{name}'. Available: {supported}")
        return cls._registry[key](**kwargs)

    @abstractmethod
    def findr(
        self,
        expr: pd.DataFrame,
        geno: Optional[pd.DataFrame] = None,
        mapping: Optional[pd.DataFrame] = None,
        options: Optional[FindrOptions] = None,
    ) -> pd.DataFrame:
        """Run the library's analysis entry point.

        - ``expr`` alone: coexpression between all pairs of genes
        - ``expr`` and ``geno``: variant-gene association
        - ``expr``, ``geno`` and ``mapping``: causal inference between genes,
          using each gene's mapped variant as instrument

        Returns:
            Result table with Source, Target, Probability and qvalue columns
        """

    @abstractmethod
    def dagfindr(
        self,
        results: pd.DataFrame,
        method: DagMethod = DagMethod.GREEDY_EDGES,
    ) -> DagResult:
        """Convert a result table into a DAG with the given edge-selection method."""
