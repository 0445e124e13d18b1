# ==============================================================================
# Файл: planet_topology/topology/graph_builders/stereo_delaunay.py
# Назначение: Точный бэкенд графа: сферическая триангуляция Делоне через
#             стереографическую проекцию на плоскость и плоский Делоне (Qhull).
# ==============================================================================
from __future__ import annotations
import logging
from typing import List, Tuple

import numpy as np
from scipy.spatial import Delaunay, QhullError

from ...core.constants import BACKEND_DELAUNAY_PROJECTION, INDEX_DTYPE, PLANE_AXES, POLE_AXIS, POLE_EPSILON
from ...core.diagnostics import DIAG_DEGENERATE_GEOMETRY, Diagnostic, report
from ...core.errors import InvalidParameterError
from ...core.types import NeighborGraph, PointSet
from .base import complete_graph, neighbors_from_edges, normalize_edges

logger = logging.getLogger(__name__)

STAGE = "graph.delaunay_projection"


def stereographic_project(
    unit_points: np.ndarray,
    eps: float = POLE_EPSILON,
    from_south: bool = False,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Проекция с северного полюса (+Y): (x/(1-y), z/(1-y)).
    С южного (from_south=True): (x/(1+y), z/(1+y)).
    Знаменатель меньше eps зажимается до eps (точка на полюсе не уходит в бесконечность).
    Возвращает (N,2) координаты и булеву маску зажатых точек.
    """
    p = np.asarray(unit_points, dtype=np.float64).reshape(-1, 3)
    y = p[:, POLE_AXIS]
    denom = (1.0 + y) if from_south else (1.0 - y)
    clamped = denom < eps
    denom = np.maximum(denom, eps)
    u = p[:, PLANE_AXES[0]] / denom
    v = p[:, PLANE_AXES[1]] / denom
    return np.stack([u, v], axis=1), clamped


def _planar_delaunay(xy: np.ndarray, diagnostics: List[Diagnostic], label: str) -> np.ndarray:
    try:
        return np.asarray(Delaunay(xy).simplices, dtype=INDEX_DTYPE)
    except QhullError as e:
        report(
            diagnostics, STAGE, DIAG_DEGENERATE_GEOMETRY,
            f"Qhull не построил триангуляцию ({label}), повтор с QJ",
            error=str(e).splitlines()[0] if str(e) else "",
        )
    try:
        # QJ = joggle для робастности на вырожденных входах
        return np.asarray(Delaunay(xy, qhull_options="QJ").simplices, dtype=INDEX_DTYPE)
    except QhullError as e:
        report(
            diagnostics, STAGE, DIAG_DEGENERATE_GEOMETRY,
            f"Qhull не построил триангуляцию ({label}) даже с QJ",
            error=str(e).splitlines()[0] if str(e) else "",
        )
        return np.zeros((0, 3), dtype=INDEX_DTYPE)


def _outward_normals(unit: np.ndarray, tris: np.ndarray) -> np.ndarray:
    a, b, c = unit[tris[:, 0]], unit[tris[:, 1]], unit[tris[:, 2]]
    n = np.cross(b - a, c - a)
    flip = np.einsum("ij,ij->i", n, a + b + c) < 0.0
    n[flip] *= -1.0
    return n


def caps_containing_pole(unit: np.ndarray, tris: np.ndarray, south: bool = False) -> np.ndarray:
    """
    Маска треугольников, чья пустая описанная «шапка» на сфере содержит полюс.
    Шапка = {x : n·x > n·a}, n: внешняя нормаль плоскости треугольника.
    """
    if len(tris) == 0:
        return np.zeros((0,), dtype=bool)
    n = _outward_normals(unit, tris)
    offset = np.einsum("ij,ij->i", n, unit[tris[:, 0]])
    pole_component = n[:, POLE_AXIS] * (-1.0 if south else 1.0)
    return pole_component > offset


def caps_containing_points(unit: np.ndarray, tris: np.ndarray, vertices: np.ndarray) -> np.ndarray:
    """
    Маска треугольников, в шапке которых строго лежит хотя бы одна из `vertices`
    (собственные вершины треугольника не учитываются). Такой треугольник не Делоне.
    """
    if len(tris) == 0 or len(vertices) == 0:
        return np.zeros((len(tris),), dtype=bool)
    n = _outward_normals(unit, tris)
    offset = np.einsum("ij,ij->i", n, unit[tris[:, 0]])
    tol = 1e-12 * np.linalg.norm(n, axis=1)
    side = n @ unit[vertices].T - offset[:, np.newaxis]
    own = (tris[:, :, np.newaxis] == vertices[np.newaxis, np.newaxis, :]).any(axis=1)
    return np.any((side > tol[:, np.newaxis]) & ~own, axis=1)


def incident_to(tris: np.ndarray, vertices: np.ndarray) -> np.ndarray:
    if len(tris) == 0 or len(vertices) == 0:
        return np.zeros((len(tris),), dtype=bool)
    return np.isin(tris, vertices).any(axis=1)


def triangles_to_edges(tris: np.ndarray) -> np.ndarray:
    if len(tris) == 0:
        return np.zeros((0, 2), dtype=INDEX_DTYPE)
    pairs = np.concatenate([tris[:, [0, 1]], tris[:, [1, 2]], tris[:, [2, 0]]], axis=0)
    return normalize_edges(pairs)


def _projected_delaunay(
    unit: np.ndarray,
    eps: float,
    from_south: bool,
    diagnostics: List[Diagnostic],
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Плоский Делоне одной проекции без зажатых точек (они ложатся в (0,0),
    куда проецируется противоположный полюс). Индексы глобальные.
    """
    label = "south" if from_south else "north"
    xy, clamped = stereographic_project(unit, eps, from_south=from_south)
    clamped_ids = np.flatnonzero(clamped).astype(INDEX_DTYPE)
    if len(clamped_ids):
        report(
            diagnostics, STAGE, DIAG_DEGENERATE_GEOMETRY,
            f"{len(clamped_ids)} точек у полюса проекции ({label}): знаменатель зажат до {eps:g}, "
            f"их треугольники берутся из противоположной проекции",
            vertices=clamped_ids.tolist(),
        )
    keep = np.flatnonzero(~clamped).astype(INDEX_DTYPE)
    if len(keep) < 3:
        return np.zeros((0, 3), dtype=INDEX_DTYPE), clamped_ids
    tris = _planar_delaunay(xy[keep], diagnostics, label)
    return keep[tris], clamped_ids


def spherical_delaunay_triangles(
    unit: np.ndarray,
    eps: float = POLE_EPSILON,
    diagnostics: List[Diagnostic] | None = None,
) -> np.ndarray:
    """
    Треугольники сферического Делоне (индексы, отсортированы внутри строки, уникальны).

    Плоский Делоне северной проекции даёт все треугольники, чья шапка не содержит
    северный полюс. Недостающую «крышку» вокруг полюса берём из южной проекции:
    там оставляем треугольники, шапка которых содержит северный полюс.

    Точки у полюса проекции (зажатые) в её триангуляцию не входят. Все их
    треугольники берутся из противоположной проекции, а треугольники, чья шапка
    накрывает выброшенную точку, отбрасываются как не-Делоне.
    """
    diags = diagnostics if diagnostics is not None else []

    north, clamped_n = _projected_delaunay(unit, eps, False, diags)
    north = north[~caps_containing_points(unit, north, clamped_n)]

    south, clamped_s = _projected_delaunay(unit, eps, True, diags)
    wanted = caps_containing_pole(unit, south) | incident_to(south, clamped_n)
    cap = south[wanted]
    cap = cap[~caps_containing_points(unit, cap, clamped_s)]

    tris = np.concatenate([north, cap], axis=0) if len(cap) else north
    if len(tris) == 0:
        return np.zeros((0, 3), dtype=INDEX_DTYPE)
    tris = np.unique(np.sort(tris, axis=1), axis=0)
    logger.debug("Делоне: %d треугольников (север %d, полярная крышка %d)", len(tris), len(north), len(cap))
    return tris.astype(INDEX_DTYPE)


class StereographicDelaunayBuilder:
    """
    Точная сферическая триангуляция Делоне. Планарна по построению, без обрезки;
    валентность получается из триангуляции сама.
    """

    name = BACKEND_DELAUNAY_PROJECTION

    def __init__(self, pole_epsilon: float = POLE_EPSILON):
        if not float(pole_epsilon) > 0.0:
            raise InvalidParameterError("pole_epsilon must be > 0")
        self.pole_epsilon = float(pole_epsilon)

    def build(self, points: PointSet) -> NeighborGraph:
        diagnostics: List[Diagnostic] = []
        n = len(points)

        if n <= 3:
            report(
                diagnostics, STAGE, DIAG_DEGENERATE_GEOMETRY,
                f"{n} точек недостаточно для триангуляции, используется полный граф",
                point_count=n,
            )
            edges = complete_graph(n)
            return NeighborGraph(
                edges=edges,
                neighbors=neighbors_from_edges(edges, n),
                backend=self.name,
                diagnostics=diagnostics,
                stats={"triangle_count": 0},
            )

        tris = spherical_delaunay_triangles(points.unit(), self.pole_epsilon, diagnostics)
        edges = triangles_to_edges(tris)
        neighbors = neighbors_from_edges(edges, n)

        isolated = [v for v, nbs in enumerate(neighbors) if not nbs]
        if isolated:
            # Qhull откладывает совпадающие точки в coplanar, они остаются без рёбер
            report(
                diagnostics, STAGE, DIAG_DEGENERATE_GEOMETRY,
                f"{len(isolated)} точек не вошли в триангуляцию (дубликаты?)",
                vertices=isolated[:64],
            )

        logger.info(
            "Делоне (стереографическая проекция): %d вершин, %d рёбер, %d треугольников",
            n, len(edges), len(tris),
        )
        return NeighborGraph(
            edges=edges,
            neighbors=neighbors,
            backend=self.name,
            diagnostics=diagnostics,
            stats={"triangle_count": int(len(tris))},
        )
