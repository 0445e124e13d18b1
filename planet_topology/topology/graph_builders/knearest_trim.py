# ==============================================================================
# Файл: planet_topology/topology/graph_builders/knearest_trim.py
# Назначение: Приближённый бэкенд графа: объединение K ближайших соседей
#             и итеративная обрезка валентности до MAX_DEGREE.
# ==============================================================================
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set, Tuple

import numpy as np
from scipy.spatial import cKDTree

from ...core.constants import (
    BACKEND_KNEAREST_TRIM, MAX_DEGREE, MAX_TRIM_PASSES, MIN_SANE_DEGREE,
    SEARCH_K, TARGET_DEGREE,
)
from ...core.diagnostics import DIAG_INVALID_PARAMETER, DIAG_NON_CONVERGENCE, Diagnostic, report
from ...core.errors import InvalidParameterError
from ...core.types import NeighborGraph, PointSet
from .base import check_degree_range, edges_from_neighbors, neighbors_from_edges, normalize_edges, symmetrize

logger = logging.getLogger(__name__)

STAGE = "graph.knearest_trim"


@dataclass
class TrimResult:
    neighbors: List[List[int]]
    passes: int
    removed: int
    converged: bool
    residual: Dict[int, int] = field(default_factory=dict)


def nearest_candidates(positions: np.ndarray, search_k: int) -> List[List[int]]:
    """
    Для каждой точки до `search_k` ближайших других точек (по евклидовой дистанции).
    Если точек меньше, кандидатами становятся все остальные.
    """
    n = int(positions.shape[0])
    k = min(int(search_k), n - 1)
    if k <= 0:
        return [[] for _ in range(n)]
    tree = cKDTree(positions)
    # +1: первая находка обычно сама точка
    _, idx = tree.query(positions, k=k + 1)
    idx = np.asarray(idx).reshape(n, k + 1)
    out: List[List[int]] = []
    for i in range(n):
        row = [int(j) for j in idx[i] if int(j) != i and int(j) < n]
        out.append(row[:k])
    return out


def union_edges(candidates: Sequence[Sequence[int]]) -> np.ndarray:
    """Ребро (a,b) входит в граф, если b среди кандидатов a ИЛИ a среди кандидатов b."""
    pairs = [(a, b) for a, cands in enumerate(candidates) for b in cands]
    return normalize_edges(pairs)


def trim_neighbors(
    positions: np.ndarray,
    neighbors: Sequence[Sequence[int]],
    max_degree: int = MAX_DEGREE,
    max_passes: int = MAX_TRIM_PASSES,
) -> TrimResult:
    """
    Полные проходы по вершинам: у каждой вершины с валентностью > max_degree
    снимается одно самое длинное инцидентное ребро (с обеих сторон).
    Повтор до сходимости или до max_passes. Повторный вызов на результате ничего не меняет.
    """
    pos = np.asarray(positions, dtype=np.float64)
    adj: List[Set[int]] = [set(int(v) for v in nbs) for nbs in neighbors]
    n = len(adj)

    def _d2(a: int, b: int) -> float:
        d = pos[a] - pos[b]
        return float(d @ d)

    passes = 0
    removed = 0
    while passes < max_passes:
        over = [v for v in range(n) if len(adj[v]) > max_degree]
        if not over:
            break
        passes += 1
        for v in over:
            if len(adj[v]) <= max_degree:
                continue
            far = max(adj[v], key=lambda u: (_d2(v, u), u))
            adj[v].discard(far)
            adj[far].discard(v)
            removed += 1
        logger.debug("Обрезка: проход %d, снято рёбер всего %d", passes, removed)

    residual = {v: len(adj[v]) for v in range(n) if len(adj[v]) > max_degree}
    return TrimResult(
        neighbors=[sorted(s) for s in adj],
        passes=passes,
        removed=removed,
        converged=not residual,
        residual=residual,
    )


class KNearestTrimBuilder:
    """
    Объединение K ближайших + обрезка. Быстрый и приближённый: не гарантирует
    планарность и ровно 12 пятиугольников, это известное ограничение.
    """

    name = BACKEND_KNEAREST_TRIM

    def __init__(
        self,
        search_k: int = SEARCH_K,
        max_degree: int = MAX_DEGREE,
        target_degree: int = TARGET_DEGREE,
        max_passes: int = MAX_TRIM_PASSES,
        min_degree: int = MIN_SANE_DEGREE,
    ):
        if int(search_k) < 1:
            raise InvalidParameterError("search_k must be >= 1")
        if int(max_degree) < 1:
            raise InvalidParameterError("max_degree must be >= 1")
        if int(max_passes) < 1:
            raise InvalidParameterError("max_passes must be >= 1")
        self.search_k = int(search_k)
        self.max_degree = int(max_degree)
        self.target_degree = int(target_degree)
        self.max_passes = int(max_passes)
        self.min_degree = int(min_degree)

    def build(self, points: PointSet) -> NeighborGraph:
        diagnostics: List[Diagnostic] = []
        positions = points.positions
        n = len(points)

        if not self.min_degree <= self.target_degree <= self.max_degree:
            # цель влияет только на статистику; построение продолжается
            report(
                diagnostics, STAGE, DIAG_INVALID_PARAMETER,
                f"target_degree={self.target_degree} недостижима при min_degree={self.min_degree}, "
                f"max_degree={self.max_degree}",
                target_degree=self.target_degree, min_degree=self.min_degree, max_degree=self.max_degree,
            )

        candidates = nearest_candidates(positions, self.search_k)
        initial_edges = union_edges(candidates)
        neighbors = neighbors_from_edges(initial_edges, n)
        logger.debug("K-nearest: %d рёбер до обрезки (k=%d)", len(initial_edges), self.search_k)

        trim = trim_neighbors(positions, neighbors, self.max_degree, self.max_passes)
        if not trim.converged:
            report(
                diagnostics, STAGE, DIAG_NON_CONVERGENCE,
                f"обрезка не сошлась за {self.max_passes} проходов: "
                f"{len(trim.residual)} вершин выше {self.max_degree}",
                vertices=sorted(trim.residual),
                residual_degrees=[trim.residual[v] for v in sorted(trim.residual)],
            )

        final_neighbors, dropped = symmetrize(trim.neighbors)
        if dropped:
            logger.debug("Симметризация: выброшено %d односторонних записей", dropped)
        edges = edges_from_neighbors(final_neighbors)

        check_degree_range(final_neighbors, diagnostics, STAGE, self.min_degree, self.max_degree)

        degrees = np.array([len(nb) for nb in final_neighbors], dtype=np.int64)
        off_target = int(np.count_nonzero(degrees != self.target_degree)) if n else 0
        stats = {
            "initial_edges": int(len(initial_edges)),
            "trim_passes": trim.passes,
            "trimmed_edges": trim.removed,
            "converged": trim.converged,
            "off_target_vertices": off_target,
            "target_degree": self.target_degree,
        }
        logger.info(
            "K-nearest+trim: %d вершин, %d рёбер (снято %d за %d проходов), %d вершин не на целевой валентности %d",
            n, len(edges), trim.removed, trim.passes, off_target, self.target_degree,
        )
        return NeighborGraph(
            edges=edges,
            neighbors=final_neighbors,
            backend=self.name,
            diagnostics=diagnostics,
            stats=stats,
        )
