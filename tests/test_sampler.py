# ==============================================================================
# Файл: tests/test_sampler.py
# Назначение: Юнит-тесты генератора точек решётки Фибоначчи.
# ==============================================================================
import math
import unittest

import numpy as np

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from planet_topology.core.errors import InvalidParameterError
from planet_topology.topology.sampler import fibonacci_sphere, generate


class TestFibonacciSampler(unittest.TestCase):

    def test_points_lie_on_sphere(self):
        """Все точки на расстоянии r от центра."""
        print("\n[TEST] Running test_points_lie_on_sphere...")
        pts = generate(1000, 5.0)
        self.assertEqual(len(pts), 1000)
        self.assertEqual(pts.positions.shape, (1000, 3))
        np.testing.assert_allclose(np.linalg.norm(pts.positions, axis=1), 5.0, rtol=1e-12)
        print("[SUCCESS] test_points_lie_on_sphere passed.")

    def test_pole_is_plus_y(self):
        """Индекс 0 у северного полюса (+Y), последний у южного."""
        n = 100
        pts = fibonacci_sphere(n, 1.0)
        self.assertAlmostEqual(pts[0, 1], 1.0 - 1.0 / n, places=12)
        self.assertAlmostEqual(pts[-1, 1], -(1.0 - 1.0 / n), places=12)
        # y монотонно убывает с индексом
        self.assertTrue(np.all(np.diff(pts[:, 1]) < 0))

    def test_golden_angle_step(self):
        pts = fibonacci_sphere(50, 1.0)
        golden = (1.0 + math.sqrt(5.0)) / 2.0
        for i in (0, 1, 7, 31):
            theta = i * 2.0 * math.pi / (golden * golden)
            r_xz = math.hypot(pts[i, 0], pts[i, 2])
            self.assertAlmostEqual(pts[i, 0], r_xz * math.cos(theta), places=12)
            self.assertAlmostEqual(pts[i, 2], r_xz * math.sin(theta), places=12)

    def test_deterministic(self):
        a = generate(257, 2.0)
        b = generate(257, 2.0)
        np.testing.assert_array_equal(a.positions, b.positions)

    def test_single_point(self):
        pts = generate(1, 1.0)
        self.assertEqual(pts.positions.shape, (1, 3))
        # phi = arccos(0) -> на экваторе
        self.assertAlmostEqual(pts.positions[0, 1], 0.0, places=12)

    def test_positions_read_only(self):
        pts = generate(10, 1.0)
        with self.assertRaises(ValueError):
            pts.positions[0, 0] = 3.0

    def test_invalid_parameters(self):
        """Некорректные N и r отклоняются до любых вычислений."""
        print("\n[TEST] Running test_invalid_parameters...")
        for n in (0, -5, 2.5, True, "10", None):
            with self.subTest(point_count=n):
                with self.assertRaises(InvalidParameterError):
                    generate(n, 1.0)
        for r in (0.0, -1.0, float("nan"), float("inf"), "abc", None):
            with self.subTest(radius=r):
                with self.assertRaises(InvalidParameterError):
                    generate(10, r)
        # ValueError-совместимость
        with self.assertRaises(ValueError):
            generate(0, 1.0)
        print("[SUCCESS] test_invalid_parameters passed.")


if __name__ == "__main__":
    unittest.main()
