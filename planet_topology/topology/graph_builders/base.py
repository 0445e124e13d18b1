# planet_topology/topology/graph_builders/base.py
from __future__ import annotations
import logging
from typing import Iterable, List, Protocol, Sequence, Set, Tuple

import numpy as np

from ...core.constants import INDEX_DTYPE
from ...core.diagnostics import DIAG_DEGREE_OUT_OF_RANGE, Diagnostic, report
from ...core.types import NeighborGraph, PointSet

logger = logging.getLogger(__name__)


class GraphBuilder(Protocol):
    """Интерфейс, который должен реализовывать любой построитель графа соседей."""

    name: str

    def build(self, points: PointSet) -> NeighborGraph: ...


def normalize_edges(pairs: Iterable[Tuple[int, int]] | np.ndarray) -> np.ndarray:
    """
    Приводит пары к виду (min, max), выбрасывает петли и дубликаты.
    Возвращает (E,2) int64, строки отсортированы лексикографически.
    """
    arr = np.asarray(list(pairs) if not isinstance(pairs, np.ndarray) else pairs, dtype=INDEX_DTYPE)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=INDEX_DTYPE)
    arr = arr.reshape(-1, 2)
    arr = np.sort(arr, axis=1)
    arr = arr[arr[:, 0] != arr[:, 1]]
    if arr.size == 0:
        return np.zeros((0, 2), dtype=INDEX_DTYPE)
    return np.unique(arr, axis=0).astype(INDEX_DTYPE)


def neighbors_from_edges(edges: np.ndarray, vertex_count: int) -> List[List[int]]:
    adj: List[Set[int]] = [set() for _ in range(vertex_count)]
    for a, b in edges:
        a = int(a); b = int(b)
        adj[a].add(b)
        adj[b].add(a)
    return [sorted(s) for s in adj]


def symmetrize(neighbors: Sequence[Iterable[int]]) -> Tuple[List[List[int]], int]:
    """
    Оставляет только взаимные смежности (b в списке a И a в списке b).
    Возвращает новые списки и число выброшенных односторонних записей.
    """
    sets = [set(int(v) for v in nbs) for nbs in neighbors]
    out: List[List[int]] = []
    dropped = 0
    for a, nbs in enumerate(sets):
        keep = [b for b in nbs if b != a and 0 <= b < len(sets) and a in sets[b]]
        dropped += len(nbs) - len(keep)
        out.append(sorted(keep))
    return out, dropped


def edges_from_neighbors(neighbors: Sequence[Sequence[int]]) -> np.ndarray:
    pairs = [(a, b) for a, nbs in enumerate(neighbors) for b in nbs if a < b]
    return normalize_edges(pairs)


def check_degree_range(
    neighbors: Sequence[Sequence[int]],
    diagnostics: List[Diagnostic],
    stage: str,
    lo: int,
    hi: int,
) -> List[int]:
    """Предупреждает о вершинах с валентностью вне [lo, hi]; конвейер не прерывает."""
    bad = [v for v, nbs in enumerate(neighbors) if len(nbs) < lo or len(nbs) > hi]
    if bad:
        report(
            diagnostics, stage, DIAG_DEGREE_OUT_OF_RANGE,
            f"{len(bad)} вершин с валентностью вне [{lo}, {hi}]",
            vertices=bad[:64],
            degrees=[len(neighbors[v]) for v in bad[:64]],
            total=len(bad),
        )
    return bad


def complete_graph(vertex_count: int) -> np.ndarray:
    pairs = [(a, b) for a in range(vertex_count) for b in range(a + 1, vertex_count)]
    return normalize_edges(pairs)
