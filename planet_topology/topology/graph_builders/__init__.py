# ==============================================================================
# Файл: planet_topology/topology/graph_builders/__init__.py
# Назначение: Реестр взаимозаменяемых построителей графа соседей.
# ==============================================================================
from __future__ import annotations
import logging
from typing import Any, Callable, Dict

from ...core.constants import BACKEND_DELAUNAY_PROJECTION, BACKEND_KNEAREST_TRIM
from ...core.errors import InvalidParameterError
from ...core.types import NeighborGraph, PointSet
from .base import GraphBuilder, edges_from_neighbors, neighbors_from_edges, normalize_edges, symmetrize
from .knearest_trim import KNearestTrimBuilder, trim_neighbors
from .stereo_delaunay import StereographicDelaunayBuilder, stereographic_project

logger = logging.getLogger(__name__)

BUILDERS: Dict[str, Callable[..., GraphBuilder]] = {
    BACKEND_KNEAREST_TRIM: KNearestTrimBuilder,
    BACKEND_DELAUNAY_PROJECTION: StereographicDelaunayBuilder,
}


def make_builder(backend: str, **params: Any) -> GraphBuilder:
    """Создаёт построитель по имени бэкенда; лишние параметры других бэкендов отбрасываются."""
    factory = BUILDERS.get(str(backend))
    if factory is None:
        raise InvalidParameterError(
            f"Unknown graph backend '{backend}', expected one of {sorted(BUILDERS)}"
        )
    if factory is KNearestTrimBuilder:
        allowed = ("search_k", "max_degree", "target_degree", "max_passes", "min_degree")
    else:
        allowed = ("pole_epsilon",)
    kwargs = {k: v for k, v in params.items() if k in allowed and v is not None}
    return factory(**kwargs)


def build_graph(points: PointSet, backend: str = BACKEND_DELAUNAY_PROJECTION, **params: Any) -> NeighborGraph:
    """Строит граф соседей выбранным бэкендом. Результат распаковывается в (edges, neighbors)."""
    builder = make_builder(backend, **params)
    return builder.build(points)


__all__ = [
    "BUILDERS",
    "GraphBuilder",
    "KNearestTrimBuilder",
    "StereographicDelaunayBuilder",
    "build_graph",
    "make_builder",
    "trim_neighbors",
    "stereographic_project",
    "normalize_edges",
    "neighbors_from_edges",
    "edges_from_neighbors",
    "symmetrize",
]
