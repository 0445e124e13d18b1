"""
planet_topology: топологическое ядро геодезической («футбольный мяч») сетки планеты.
Точки Фибоначчи -> граф соседей (K-nearest+trim или Делоне через стереопроекцию)
-> пятиугольные/шестиугольные вершины -> рёберные треугольники.
"""

__version__ = "0.1.0"

from planet_topology.core.constants import BACKEND_DELAUNAY_PROJECTION, BACKEND_KNEAREST_TRIM
from planet_topology.core.errors import InvalidParameterError, TopologyAnomalyError, TopologyError
from planet_topology.core.types import (
    Classification, EdgeRecord, MeshResult, NeighborGraph, PointSet, TriangleBatch,
)
from planet_topology.core.preset import TopologyPreset, load_preset
from planet_topology.topology import (
    build_graph, classify, detect_crossings, extract_face_triangles, generate,
)
from planet_topology.world import PlanetMesh, run_pipeline

__all__ = [
    "BACKEND_DELAUNAY_PROJECTION", "BACKEND_KNEAREST_TRIM",
    "InvalidParameterError", "TopologyAnomalyError", "TopologyError",
    "PointSet", "NeighborGraph", "Classification", "EdgeRecord", "TriangleBatch", "MeshResult",
    "TopologyPreset", "load_preset",
    "generate", "build_graph", "classify", "extract_face_triangles", "detect_crossings",
    "PlanetMesh", "run_pipeline", "__version__",
]
