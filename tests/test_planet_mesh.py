# ==============================================================================
# Файл: tests/test_planet_mesh.py
# Назначение: Тесты цикла regenerate и хуков освобождения геометрии.
# ==============================================================================
import unittest

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from planet_topology.core.constants import BACKEND_KNEAREST_TRIM
from planet_topology.core.errors import InvalidParameterError
from planet_topology.world import PlanetMesh, flat_params, params_to_overrides


class RecordingConsumer:
    """Фиксирует порядок вызовов хуков."""

    def __init__(self):
        self.events = []

    def on_geometry(self, result):
        self.events.append(("geometry", len(result.points)))

    def on_release(self):
        self.events.append(("release", None))


class TestPlanetMesh(unittest.TestCase):

    def test_release_before_new_geometry(self):
        print("\n[TEST] Running test_release_before_new_geometry...")
        consumer = RecordingConsumer()
        mesh = PlanetMesh(None, consumers=[consumer])
        mesh.regenerate(point_count=100)
        mesh.regenerate(point_count=150, backend=BACKEND_KNEAREST_TRIM)
        self.assertEqual(
            consumer.events,
            [("geometry", 100), ("release", None), ("geometry", 150)],
        )
        self.assertEqual(mesh.generation, 2)
        self.assertEqual(mesh.result.graph.backend, BACKEND_KNEAREST_TRIM)
        self.assertEqual(mesh.preset.point_count, 150)
        print("[SUCCESS] test_release_before_new_geometry passed.")

    def test_invalid_params_keep_geometry(self):
        consumer = RecordingConsumer()
        mesh = PlanetMesh(None, consumers=[consumer])
        first = mesh.regenerate(point_count=80)
        for params in ({"fill_ratio": 2.0}, {"point_count": 0}, {"radius": -1.0}, {"warp": 3}):
            with self.subTest(params=params):
                with self.assertRaises(InvalidParameterError):
                    mesh.regenerate(**params)
                self.assertIs(mesh.result, first)
        self.assertEqual(consumer.events, [("geometry", 80)])
        self.assertEqual(mesh.generation, 1)

    def test_release_is_idempotent(self):
        consumer = RecordingConsumer()
        with PlanetMesh(None, consumers=[consumer]) as mesh:
            mesh.regenerate(point_count=50)
            mesh.release()
            mesh.release()
            self.assertIsNone(mesh.result)
        self.assertEqual(consumer.events, [("geometry", 50), ("release", None)])

    def test_late_consumer_gets_current_geometry(self):
        mesh = PlanetMesh(None)
        mesh.regenerate(point_count=40)
        consumer = RecordingConsumer()
        mesh.add_consumer(consumer)
        self.assertEqual(consumer.events, [("geometry", 40)])
        mesh.close()
        self.assertEqual(consumer.events[-1], ("release", None))

    def test_param_mapping(self):
        overrides = params_to_overrides({"point_count": 10, "color_seed": 5, "check_crossings": True})
        self.assertEqual(overrides, {
            "sampler": {"point_count": 10},
            "coloring": {"seed": 5},
            "validation": {"check_crossings": True},
        })
        mesh = PlanetMesh("sphere/planet_r5")
        params = flat_params(mesh.preset)
        self.assertEqual(params["radius"], 5.0)
        self.assertEqual(params["color_seed"], 42)


if __name__ == "__main__":
    unittest.main()
