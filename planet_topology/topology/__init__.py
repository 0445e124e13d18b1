"""
Топологическое ядро: сэмплер точек, построители графа соседей,
классификатор вершин, рёберные треугольники и диагностика пересечений.
"""

from .sampler import generate, fibonacci_sphere
from .graph_builders import (
    BUILDERS, KNearestTrimBuilder, StereographicDelaunayBuilder,
    build_graph, make_builder, stereographic_project, trim_neighbors,
)
from .classifier import classify
from .faces import (
    count_coplanarity_violations, coplanarity_residuals,
    extract_face_triangles, face_triangles, find_opposing_vertices,
)
from .coloring import apply_color_mode, centroid_colors, flat_edge_colors
from .crossings import crossing_pairs, detect_crossings
from .validation import assert_topology, check_topology, euler_characteristic, mesh_report

__all__ = [
    'generate', 'fibonacci_sphere',
    'BUILDERS', 'KNearestTrimBuilder', 'StereographicDelaunayBuilder',
    'build_graph', 'make_builder', 'stereographic_project', 'trim_neighbors',
    'classify',
    'find_opposing_vertices', 'extract_face_triangles', 'face_triangles',
    'coplanarity_residuals', 'count_coplanarity_violations',
    'flat_edge_colors', 'centroid_colors', 'apply_color_mode',
    'detect_crossings', 'crossing_pairs',
    'check_topology', 'assert_topology', 'euler_characteristic', 'mesh_report',
]
