# ==============================================================================
# Файл: tests/test_faces.py
# Назначение: Тесты противолежащих вершин и рёберных треугольников.
# ==============================================================================
import unittest

import numpy as np

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from planet_topology.core.constants import BACKEND_DELAUNAY_PROJECTION
from planet_topology.core.diagnostics import DIAG_DEGENERATE_GEOMETRY, DIAG_TOPOLOGY_ANOMALY, of_kind
from planet_topology.core.errors import InvalidParameterError
from planet_topology.topology.coloring import apply_color_mode, centroid_colors, flat_edge_colors
from planet_topology.topology.faces import (
    count_coplanarity_violations, coplanarity_residuals, extract_face_triangles,
    face_triangles, find_opposing_vertices,
)
from planet_topology.topology.graph_builders import build_graph
from planet_topology.topology.sampler import generate


class TestFaceTriangles(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.points = generate(400, 3.0)
        cls.graph = build_graph(cls.points, BACKEND_DELAUNAY_PROJECTION)

    def test_opposing_vertices(self):
        print("\n[TEST] Running test_opposing_vertices...")
        edges, neighbors = self.graph
        records = find_opposing_vertices(edges, neighbors, self.points)
        self.assertEqual(len(records), len(edges))
        for r in records:
            self.assertIn(len(r.opposing), (1, 2))
            for c in r.opposing:
                self.assertIn(c, neighbors[r.a])
                self.assertIn(c, neighbors[r.b])
        # замкнутая триангуляция: F = 2N - 4
        self.assertEqual(len(face_triangles(records)), 2 * len(self.points) - 4)
        print("[SUCCESS] test_opposing_vertices passed.")

    def test_outward_winding(self):
        print("\n[TEST] Running test_outward_winding...")
        edges, neighbors = self.graph
        batch = extract_face_triangles(self.points, edges, neighbors, 1.0 / 3.0)
        self.assertEqual(batch.vertices.shape, (len(batch), 3, 3))
        self.assertEqual(len(batch), 2 * len(edges))
        centroids = batch.centroids()
        self.assertTrue(np.all(np.einsum("ij,ij->i", batch.normals, centroids) > 0.0))
        np.testing.assert_allclose(np.linalg.norm(batch.normals, axis=1), 1.0, rtol=1e-12)
        # CCW снаружи: нормаль порядка эмиссии совпадает с сохранённой
        v = batch.vertices
        emitted = np.cross(v[:, 1] - v[:, 0], v[:, 2] - v[:, 0])
        self.assertTrue(np.all(np.einsum("ij,ij->i", emitted, batch.normals) > 0.0))
        # концы в порядке эмиссии совпадают с координатами
        np.testing.assert_array_equal(v[:, 0], self.points.positions[batch.endpoints[:, 0]])
        np.testing.assert_array_equal(v[:, 1], self.points.positions[batch.endpoints[:, 1]])
        self.assertEqual(batch.vertex_normals().shape, (len(batch), 3, 3))
        print("[SUCCESS] test_outward_winding passed.")

    def test_coplanarity(self):
        edges, neighbors = self.graph
        batch = extract_face_triangles(self.points, edges, neighbors, 0.25)
        self.assertEqual(count_coplanarity_violations(self.points, batch, 1e-4), 0)
        self.assertLess(float(coplanarity_residuals(self.points, batch).max()), 1e-9)

    def test_apex_position(self):
        edges, neighbors = self.graph
        pos = self.points.positions
        for f in (0.0, 0.5, 1.0):
            with self.subTest(fill_ratio=f):
                batch = extract_face_triangles(self.points, edges, neighbors, f)
                a = pos[batch.endpoints[:, 0]]
                b = pos[batch.endpoints[:, 1]]
                c = pos[batch.opposite]
                mid = 0.5 * (a + b)
                np.testing.assert_allclose(batch.vertices[:, 2], mid + f * (c - mid), atol=1e-12)
        # f = 0: apex совпадает с серединой ребра
        batch = extract_face_triangles(self.points, edges, neighbors, 0.0)
        mid = 0.5 * (pos[batch.endpoints[:, 0]] + pos[batch.endpoints[:, 1]])
        np.testing.assert_allclose(batch.vertices[:, 2], mid, atol=1e-12)

    def test_invalid_fill_ratio(self):
        edges, neighbors = self.graph
        for f in (-0.01, 1.5, float("nan"), "x"):
            with self.subTest(fill_ratio=f):
                with self.assertRaises(InvalidParameterError):
                    extract_face_triangles(self.points, edges, neighbors, f)

    def test_flat_colors_per_edge(self):
        edges, neighbors = self.graph
        batch = extract_face_triangles(self.points, edges, neighbors)
        flat_edge_colors(batch, seed=3)
        self.assertEqual(batch.colors.shape, (len(batch), 4))
        self.assertEqual(batch.colors.dtype, np.float32)
        self.assertTrue(np.all(batch.colors[:, 3] == 1.0))
        by_edge = {}
        for eid, color in zip(batch.edge_ids.tolist(), batch.colors):
            if eid in by_edge:
                np.testing.assert_array_equal(by_edge[eid], color)
            by_edge[eid] = color
        # тот же seed -> та же раскраска
        again = apply_color_mode(extract_face_triangles(self.points, edges, neighbors), "flat", 3)
        np.testing.assert_array_equal(again.colors, batch.colors)

    def test_centroid_colors(self):
        edges, neighbors = self.graph
        batch = extract_face_triangles(self.points, edges, neighbors)
        centroid_colors(batch, lambda c: np.full((len(c), 3), 2.0))
        self.assertTrue(np.all(batch.colors == 1.0))

    def test_unknown_color_mode(self):
        edges, neighbors = self.graph
        batch = extract_face_triangles(self.points, edges, neighbors)
        with self.assertRaises(ValueError):
            apply_color_mode(batch, "rainbow")


class TestOpposingEdgeCases(unittest.TestCase):

    def test_edge_without_face(self):
        pos = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
        edges = np.array([[0, 1]])
        neighbors = [[1], [0]]
        diags = []
        records = find_opposing_vertices(edges, neighbors, pos, diags)
        self.assertEqual(records[0].opposing, ())
        self.assertEqual(len(of_kind(diags, DIAG_TOPOLOGY_ANOMALY)), 1)
        batch = extract_face_triangles(pos, edges, neighbors)
        self.assertEqual(len(batch), 0)

    def test_more_than_two_common_neighbors(self):
        # ребро 0-1 и три общих соседа; дальний (4) отбрасывается
        pos = np.array([
            [-1.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, -1.5, 0.0],
            [0.0, 0.0, 3.0],
        ])
        edges = np.array([[0, 1], [0, 2], [0, 3], [0, 4], [1, 2], [1, 3], [1, 4]])
        neighbors = [[1, 2, 3, 4], [0, 2, 3, 4], [0, 1], [0, 1], [0, 1]]
        diags = []
        records = find_opposing_vertices(edges, neighbors, pos, diags)
        self.assertEqual(records[0].opposing, (2, 3))
        self.assertEqual(len(of_kind(diags, DIAG_TOPOLOGY_ANOMALY)), 1)

    def test_degenerate_triangle_skipped(self):
        # c лежит на прямой ab
        pos = np.array([[0.0, 0.0, 1.0], [2.0, 0.0, 1.0], [1.0, 0.0, 1.0]])
        edges = np.array([[0, 1], [0, 2], [1, 2]])
        neighbors = [[1, 2], [0, 2], [0, 1]]
        batch = extract_face_triangles(pos, edges, neighbors)
        self.assertEqual(len(batch), 0)
        diags = of_kind(batch.diagnostics, DIAG_DEGENERATE_GEOMETRY)
        self.assertEqual(len(diags), 1)
        self.assertEqual(diags[0].data["total"], 3)


if __name__ == "__main__":
    unittest.main()
