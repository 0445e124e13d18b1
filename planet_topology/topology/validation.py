"""
Проверки топологии готовой сетки (инструменты для тестов и валидации).

Во время обычной работы аномалии только собираются в список диагностик;
`assert_topology` поднимает исключение и предназначен для тестов/CLI.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import EXPECTED_PENTAGONS, SPHERE_CHARGE
from ..core.diagnostics import DIAG_TOPOLOGY_ANOMALY, Diagnostic, count_by_kind, report
from ..core.errors import TopologyAnomalyError
from ..core.types import Classification, MeshResult, NeighborGraph
from .faces import face_triangles

logger = logging.getLogger(__name__)

STAGE = "validation"


def euler_characteristic(vertex_count: int, edge_count: int, face_count: int) -> int:
    return int(vertex_count) - int(edge_count) + int(face_count)


def check_topology(
    graph: NeighborGraph,
    classification: Classification,
    crossings: Optional[Sequence[Tuple[int, int]]] = None,
    faces: Optional[Sequence[Tuple[int, int, int]]] = None,
    expected_pentagons: int = EXPECTED_PENTAGONS,
) -> List[Diagnostic]:
    anomalies: List[Diagnostic] = []

    if classification.pentagon_count != expected_pentagons:
        report(
            anomalies, STAGE, DIAG_TOPOLOGY_ANOMALY,
            f"пятиугольных вершин {classification.pentagon_count}, ожидалось {expected_pentagons}",
            pentagon_count=classification.pentagon_count,
            expected=expected_pentagons,
            degree_histogram=dict(classification.degree_histogram),
        )
    if classification.charge != SPHERE_CHARGE:
        report(
            anomalies, STAGE, DIAG_TOPOLOGY_ANOMALY,
            f"заряд Σ(6-deg) = {classification.charge}, для триангуляции сферы должно быть {SPHERE_CHARGE}",
            charge=classification.charge,
        )
    if crossings:
        report(
            anomalies, STAGE, DIAG_TOPOLOGY_ANOMALY,
            f"{len(crossings)} пар пересекающихся рёбер (граф не планарен)",
            pairs=[list(p) for p in list(crossings)[:64]],
            total=len(crossings),
        )
    if faces is not None:
        chi = euler_characteristic(graph.vertex_count, graph.edge_count, len(faces))
        if chi != 2:
            report(
                anomalies, STAGE, DIAG_TOPOLOGY_ANOMALY,
                f"эйлерова характеристика V-E+F = {chi}, ожидалось 2",
                vertices=graph.vertex_count, edges=graph.edge_count, faces=len(faces),
            )
    return anomalies


def assert_topology(
    graph: NeighborGraph,
    classification: Classification,
    crossings: Optional[Sequence[Tuple[int, int]]] = None,
    faces: Optional[Sequence[Tuple[int, int, int]]] = None,
    expected_pentagons: int = EXPECTED_PENTAGONS,
) -> None:
    anomalies = check_topology(graph, classification, crossings, faces, expected_pentagons)
    if anomalies:
        raise TopologyAnomalyError(anomalies)


def _edge_length_stats(positions: np.ndarray, edges: np.ndarray) -> Dict[str, Optional[float]]:
    if len(edges) == 0:
        return {"min": None, "max": None, "mean": None, "std": None}
    d = np.linalg.norm(positions[edges[:, 0]] - positions[edges[:, 1]], axis=1)
    return {"min": float(d.min()), "max": float(d.max()), "mean": float(d.mean()), "std": float(d.std())}


def mesh_report(result: MeshResult) -> Dict[str, Any]:
    """Сводка по сетке для лога/JSON: счётчики, валентности, длины рёбер, диагностики."""
    cls = result.classification
    graph = result.graph
    faces = face_triangles(result.edge_records)
    diagnostics = result.all_diagnostics()
    return {
        "params": dict(result.params),
        "backend": graph.backend,
        "mesh_overview": {
            "vertices": graph.vertex_count,
            "edges": graph.edge_count,
            "faces": len(faces),
            "euler_characteristic": euler_characteristic(graph.vertex_count, graph.edge_count, len(faces)),
            "edge_triangles": len(result.triangles),
        },
        "classification": {
            "pentagons": cls.pentagon_count,
            "hexagons": cls.hexagon_count,
            "charge": cls.charge,
            "degree_histogram": {str(k): v for k, v in cls.degree_histogram.items()},
            "pentagon_indices": list(cls.pentagon_indices),
        },
        "edge_length": _edge_length_stats(result.points.positions, graph.edges),
        "builder_stats": dict(graph.stats),
        "crossings": None if result.crossings is None else len(result.crossings),
        "diagnostics": {
            "counts": count_by_kind(diagnostics),
            "items": [d.to_dict() for d in diagnostics],
        },
    }
