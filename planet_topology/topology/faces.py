# ==============================================================================
# Файл: planet_topology/topology/faces.py
# Назначение: Поиск противолежащих вершин рёбер и построение «рёберных
#             треугольников» (a, b, apex) с согласованной внешней намоткой.
# ==============================================================================
from __future__ import annotations
import logging
import math
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.constants import (
    COLOR_DTYPE, COORD_DTYPE, COPLANARITY_TOLERANCE, DEFAULT_FILL_RATIO,
    DEGENERATE_AREA_EPS, INDEX_DTYPE, MAX_OPPOSING,
)
from ..core.diagnostics import DIAG_DEGENERATE_GEOMETRY, DIAG_TOPOLOGY_ANOMALY, Diagnostic, report
from ..core.errors import InvalidParameterError
from ..core.types import EdgeRecord, PointSet, TriangleBatch

logger = logging.getLogger(__name__)

STAGE = "faces"

PointsLike = Union[PointSet, np.ndarray]


def _positions(points: PointsLike) -> np.ndarray:
    if isinstance(points, PointSet):
        return points.positions
    return np.asarray(points, dtype=COORD_DTYPE).reshape(-1, 3)


def _check_fill_ratio(fill_ratio: float) -> float:
    try:
        f = float(fill_ratio)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"fill_ratio must be a number, got {fill_ratio!r}") from e
    if not math.isfinite(f) or f < 0.0 or f > 1.0:
        raise InvalidParameterError(f"fill_ratio must be in [0, 1], got {fill_ratio!r}")
    return f


def find_opposing_vertices(
    edges: np.ndarray,
    neighbors: Sequence[Sequence[int]],
    points: Optional[PointsLike] = None,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> List[EdgeRecord]:
    """
    Для каждого ребра (a,b) находим общих соседей a и b (вершины, замыкающие грани).
    Обычно 2 (внутреннее ребро) или 1 (граница). Если общих соседей больше двух
    (бывает у приближённого бэкенда), оставляем два ближайших к середине ребра.
    """
    diags = diagnostics if diagnostics is not None else []
    sets = [set(nbs) for nbs in neighbors]
    pos = _positions(points) if points is not None else None

    records: List[EdgeRecord] = []
    orphan: List[int] = []
    overloaded: List[int] = []
    for ei, (a, b) in enumerate(np.asarray(edges, dtype=INDEX_DTYPE).reshape(-1, 2)):
        a = int(a); b = int(b)
        common = sorted(sets[a] & sets[b])
        if not common:
            orphan.append(ei)
        elif len(common) > MAX_OPPOSING:
            overloaded.append(ei)
            if pos is not None:
                mid = 0.5 * (pos[a] + pos[b])
                common.sort(key=lambda c: (float(np.sum((pos[c] - mid) ** 2)), c))
            common = common[:MAX_OPPOSING]
        records.append(EdgeRecord(edge_index=ei, a=a, b=b, opposing=tuple(common)))

    if orphan:
        report(
            diags, STAGE, DIAG_TOPOLOGY_ANOMALY,
            f"{len(orphan)} рёбер без общей соседней вершины (грань не замыкается)",
            edges=orphan[:64], total=len(orphan),
        )
    if overloaded:
        report(
            diags, STAGE, DIAG_TOPOLOGY_ANOMALY,
            f"{len(overloaded)} рёбер с более чем {MAX_OPPOSING} общими соседями, лишние отброшены",
            edges=overloaded[:64], total=len(overloaded),
        )
    return records


def extract_face_triangles(
    points: PointsLike,
    edges: np.ndarray,
    neighbors: Sequence[Sequence[int]],
    fill_ratio: float = DEFAULT_FILL_RATIO,
    records: Optional[List[EdgeRecord]] = None,
) -> TriangleBatch:
    """
    Для каждого ребра (a,b) и противолежащей вершины c:
      mid  = (a + b) / 2
      apex = mid + fill_ratio * (c - mid)
      n    = normalize((b - a) x (c - a))
    Если n · centroid(a,b,c) <= 0, меняем a и b местами и разворачиваем n,
    чтобы треугольник смотрел наружу (CCW снаружи сферы).
    Вырожденные (коллинеарные a,b,c) пропускаются и учитываются в диагностике.
    """
    f = _check_fill_ratio(fill_ratio)
    pos = _positions(points)
    diagnostics: List[Diagnostic] = []
    if records is None:
        records = find_opposing_vertices(edges, neighbors, pos, diagnostics)

    rows = [(r.a, r.b, c, r.edge_index) for r in records for c in r.opposing]
    if not rows:
        batch = TriangleBatch.empty(f)
        batch.diagnostics = diagnostics
        return batch

    idx = np.asarray(rows, dtype=INDEX_DTYPE)
    ia, ib, ic, eid = idx[:, 0], idx[:, 1], idx[:, 2], idx[:, 3]
    A, B, C = pos[ia], pos[ib], pos[ic]

    normal = np.cross(B - A, C - A)
    length = np.linalg.norm(normal, axis=1)
    scale = np.linalg.norm(B - A, axis=1) * np.linalg.norm(C - A, axis=1)
    ok = length > DEGENERATE_AREA_EPS * scale
    if not np.all(ok):
        bad = np.flatnonzero(~ok)
        report(
            diagnostics, STAGE, DIAG_DEGENERATE_GEOMETRY,
            f"{len(bad)} вырожденных (коллинеарных) треугольников пропущено",
            edges=eid[bad][:64].tolist(), opposite=ic[bad][:64].tolist(), total=int(len(bad)),
        )
        ia, ib, ic, eid = ia[ok], ib[ok], ic[ok], eid[ok]
        A, B, C = A[ok], B[ok], C[ok]
        normal, length = normal[ok], length[ok]

    normal = normal / length[:, np.newaxis]
    centroid = (A + B + C) / 3.0
    inward = np.einsum("ij,ij->i", normal, centroid) <= 0.0
    normal[inward] *= -1.0
    first = np.where(inward, ib, ia)
    second = np.where(inward, ia, ib)

    mid = 0.5 * (A + B)
    apex = mid + f * (C - mid)
    vertices = np.stack([pos[first], pos[second], apex], axis=1).astype(COORD_DTYPE)

    batch = TriangleBatch(
        vertices=vertices,
        normals=normal.astype(COORD_DTYPE),
        endpoints=np.stack([first, second], axis=1).astype(INDEX_DTYPE),
        opposite=ic.astype(INDEX_DTYPE),
        edge_ids=eid.astype(INDEX_DTYPE),
        colors=np.zeros((len(vertices), 4), dtype=COLOR_DTYPE),
        fill_ratio=f,
        diagnostics=diagnostics,
    )
    logger.info("Грани: %d рёберных треугольников (fill_ratio=%.3f), развёрнуто %d", len(batch), f, int(inward.sum()))
    return batch


def coplanarity_residuals(points: PointsLike, batch: TriangleBatch) -> np.ndarray:
    """|(apex - a) · n| с пересчитанной вершиной apex; геометрию не меняет."""
    if len(batch) == 0:
        return np.zeros((0,), dtype=COORD_DTYPE)
    pos = _positions(points)
    a = pos[batch.endpoints[:, 0]]
    b = pos[batch.endpoints[:, 1]]
    c = pos[batch.opposite]
    mid = 0.5 * (a + b)
    apex = mid + batch.fill_ratio * (c - mid)
    return np.abs(np.einsum("ij,ij->i", apex - a, batch.normals))


def count_coplanarity_violations(
    points: PointsLike,
    batch: TriangleBatch,
    tolerance: float = COPLANARITY_TOLERANCE,
) -> int:
    return int(np.count_nonzero(coplanarity_residuals(points, batch) > float(tolerance)))


def face_triangles(records: Sequence[EdgeRecord]) -> List[Tuple[int, int, int]]:
    """Уникальные треугольные грани (a,b,c) по записям рёбер, индексы отсортированы."""
    seen = set()
    for r in records:
        for c in r.opposing:
            seen.add(tuple(sorted((r.a, r.b, c))))
    return sorted(seen)
