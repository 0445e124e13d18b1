# planet_topology/topology/crossings.py
# Диагностика планарности: пары рёбер, чьи геодезические дуги пересекаются.
# O(E^2): для офлайн-проверки построенного графа, не для интерактива.
from __future__ import annotations
import logging
from typing import List, Tuple, Union

import numpy as np
from numba import njit, prange

from ..core.types import PointSet

logger = logging.getLogger(__name__)


@njit(inline='always')
def _arcs_cross(P, a, b, c, d):
    ax = P[a, 0]; ay = P[a, 1]; az = P[a, 2]
    bx = P[b, 0]; by = P[b, 1]; bz = P[b, 2]
    cx = P[c, 0]; cy = P[c, 1]; cz = P[c, 2]
    dx = P[d, 0]; dy = P[d, 1]; dz = P[d, 2]

    # n_AB = A x B, n_CD = C x D
    nabx = ay * bz - az * by
    naby = az * bx - ax * bz
    nabz = ax * by - ay * bx
    ncdx = cy * dz - cz * dy
    ncdy = cz * dx - cx * dz
    ncdz = cx * dy - cy * dx

    sa = ncdx * ax + ncdy * ay + ncdz * az
    sb = ncdx * bx + ncdy * by + ncdz * bz
    if sa * sb >= 0.0:
        return False
    sc = nabx * cx + naby * cy + nabz * cz
    sd = nabx * dx + naby * dy + nabz * dz
    if sc * sd >= 0.0:
        return False

    # Большие круги пересекаются в ±P; дуги должны содержать одну и ту же точку
    px = naby * ncdz - nabz * ncdy
    py = nabz * ncdx - nabx * ncdz
    pz = nabx * ncdy - naby * ncdx
    s = px * (ax + bx) + py * (ay + by) + pz * (az + bz)
    t = px * (cx + dx) + py * (cy + dy) + pz * (cz + dz)
    return s * t > 0.0


@njit(cache=True, parallel=True)
def _count_crossings(P, E):
    m = E.shape[0]
    counts = np.zeros(m, dtype=np.int64)
    for i in prange(m):
        a = E[i, 0]
        b = E[i, 1]
        k = 0
        for j in range(i + 1, m):
            c = E[j, 0]
            d = E[j, 1]
            if a == c or a == d or b == c or b == d:
                continue
            if _arcs_cross(P, a, b, c, d):
                k += 1
        counts[i] = k
    return counts


@njit(cache=True, parallel=True)
def _fill_crossings(P, E, offsets, total):
    m = E.shape[0]
    out = np.empty((total, 2), dtype=np.int64)
    for i in prange(m):
        a = E[i, 0]
        b = E[i, 1]
        k = offsets[i]
        for j in range(i + 1, m):
            c = E[j, 0]
            d = E[j, 1]
            if a == c or a == d or b == c or b == d:
                continue
            if _arcs_cross(P, a, b, c, d):
                out[k, 0] = i
                out[k, 1] = j
                k += 1
    return out


def crossing_pairs(points: Union[PointSet, np.ndarray], edges: np.ndarray) -> np.ndarray:
    """(K,2) индексы рёбер i<j, чьи дуги пересекаются; рёбра с общей вершиной не сравниваются."""
    pos = points.unit() if isinstance(points, PointSet) else np.asarray(points, dtype=np.float64).reshape(-1, 3)
    P = np.ascontiguousarray(pos, dtype=np.float64)
    E = np.ascontiguousarray(np.asarray(edges, dtype=np.int64).reshape(-1, 2))
    if E.shape[0] < 2:
        return np.zeros((0, 2), dtype=np.int64)

    counts = _count_crossings(P, E)
    total = int(counts.sum())
    if total == 0:
        return np.zeros((0, 2), dtype=np.int64)
    offsets = np.zeros(E.shape[0], dtype=np.int64)
    offsets[1:] = np.cumsum(counts)[:-1]
    return _fill_crossings(P, E, offsets, total)


def detect_crossings(points: Union[PointSet, np.ndarray], edges: np.ndarray) -> List[Tuple[int, int]]:
    pairs = crossing_pairs(points, edges)
    if len(pairs):
        logger.warning("Найдено %d пересекающихся пар рёбер", len(pairs))
    else:
        logger.debug("Пересечений рёбер нет (%d рёбер)", len(edges))
    return [(int(i), int(j)) for i, j in pairs]
