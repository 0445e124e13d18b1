# ==============================================================================
# Файл: tests/test_crossings.py
# Назначение: Тесты детектора пересечений геодезических дуг (numba-ядро).
# ==============================================================================
import unittest

import numpy as np

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from planet_topology.core.constants import BACKEND_DELAUNAY_PROJECTION, BACKEND_KNEAREST_TRIM
from planet_topology.topology.crossings import crossing_pairs, detect_crossings
from planet_topology.topology.graph_builders import build_graph
from planet_topology.topology.sampler import generate


class TestCrossings(unittest.TestCase):

    def test_crossing_pair_detected(self):
        """Две короткие дуги накрест через точку (1,0,0)."""
        print("\n[TEST] Running test_crossing_pair_detected...")
        pts = np.array([
            [1.0, -0.5, 0.0],
            [1.0, 0.5, 0.0],
            [1.0, 0.0, -0.5],
            [1.0, 0.0, 0.5],
        ])
        edges = np.array([[0, 1], [2, 3]])
        self.assertEqual(detect_crossings(pts, edges), [(0, 1)])
        print("[SUCCESS] test_crossing_pair_detected passed.")

    def test_antipodal_arcs_not_reported(self):
        # большие круги те же, но вторая дуга на противоположной стороне сферы
        pts = np.array([
            [1.0, -0.5, 0.0],
            [1.0, 0.5, 0.0],
            [-1.0, 0.0, 0.5],
            [-1.0, 0.0, -0.5],
        ])
        edges = np.array([[0, 1], [2, 3]])
        self.assertEqual(detect_crossings(pts, edges), [])

    def test_disjoint_and_shared_endpoint(self):
        pts = np.array([
            [1.0, 0.0, 0.0],
            [0.9, 0.1, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, 0.9, 0.1],
        ])
        # 0-1 и 2-3 далеко друг от друга; 0-2 и 0-3 имеют общий конец
        edges = np.array([[0, 1], [2, 3], [0, 2], [0, 3]])
        self.assertEqual(detect_crossings(pts, edges), [])

    def test_delaunay_graph_is_planar(self):
        print("\n[TEST] Running test_delaunay_graph_is_planar...")
        pts = generate(600, 2.0)
        edges, _ = build_graph(pts, BACKEND_DELAUNAY_PROJECTION)
        self.assertEqual(crossing_pairs(pts, edges).shape, (0, 2))
        print("[SUCCESS] test_delaunay_graph_is_planar passed.")

    def test_pairs_are_ordered_and_valid(self):
        pts = generate(300, 1.0)
        graph = build_graph(pts, BACKEND_KNEAREST_TRIM, search_k=10, max_degree=9)
        pairs = crossing_pairs(pts, graph.edges)
        self.assertEqual(pairs.ndim, 2)
        for i, j in pairs.tolist():
            self.assertLess(i, j)
            self.assertTrue(set(graph.edges[i].tolist()).isdisjoint(graph.edges[j].tolist()))
        self.assertEqual(len(np.unique(pairs, axis=0)), len(pairs))

    def test_too_few_edges(self):
        pts = generate(3, 1.0)
        self.assertEqual(detect_crossings(pts, np.zeros((0, 2), dtype=np.int64)), [])
        self.assertEqual(detect_crossings(pts, np.array([[0, 1]])), [])


if __name__ == "__main__":
    unittest.main()
