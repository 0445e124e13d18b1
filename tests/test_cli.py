# ==============================================================================
# Файл: tests/test_cli.py
# Назначение: Тесты точки входа командной строки run_topology.py.
# ==============================================================================
import json
import os
import tempfile
import unittest

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

import run_topology
from planet_topology.core.export import read_mesh_cache


class TestCli(unittest.TestCase):

    def test_build_with_cache_and_report(self):
        print("\n[TEST] Running test_build_with_cache_and_report...")
        with tempfile.TemporaryDirectory() as tmpdir:
            prefix = os.path.join(tmpdir, "out", "planet")
            report_path = os.path.join(tmpdir, "report.json")
            code = run_topology.main([
                "--points", "60", "--radius", "3", "--check-crossings",
                "--out", prefix, "--report", report_path,
            ])
            self.assertEqual(code, 0)
            cache = read_mesh_cache(prefix)
            self.assertIsNotNone(cache)
            self.assertEqual(cache["meta"]["counts"]["points"], 60)
            with open(report_path, "r", encoding="utf-8") as f:
                report = json.load(f)
            self.assertEqual(report["mesh_overview"]["edges"], 3 * 60 - 6)
            self.assertEqual(report["crossings"], 0)
        print("[SUCCESS] test_build_with_cache_and_report passed.")

    def test_preset_dir_option(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            group = os.path.join(tmpdir, "cli_group")
            os.makedirs(group)
            with open(os.path.join(group, "small.json"), "w", encoding="utf-8") as f:
                json.dump({"id": "cli_group/small", "sampler": {"point_count": 40, "radius": 2.0}}, f)
            prefix = os.path.join(tmpdir, "small")
            code = run_topology.main(["--preset-dir", tmpdir, "--preset", "cli_group/small", "--out", prefix])
            self.assertEqual(code, 0)
            cache = read_mesh_cache(prefix)
            self.assertEqual(cache["meta"]["counts"]["points"], 40)
            self.assertEqual(cache["meta"]["radius"], 2.0)

    def test_invalid_parameters_exit_code(self):
        self.assertEqual(run_topology.main(["--points", "0"]), 2)
        self.assertEqual(run_topology.main(["--fill-ratio", "1.5"]), 2)
        self.assertEqual(run_topology.main(["--preset", "sphere/missing"]), 2)


if __name__ == "__main__":
    unittest.main()
