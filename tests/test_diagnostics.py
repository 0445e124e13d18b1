# ==============================================================================
# Файл: tests/test_diagnostics.py
# Назначение: Тесты записи диагностик конвейера.
# ==============================================================================
import unittest

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from planet_topology.core.diagnostics import (
    DIAG_DEGENERATE_GEOMETRY, DIAG_INVALID_PARAMETER, DIAGNOSTIC_KINDS,
    count_by_kind, of_kind, report,
)


class TestDiagnostics(unittest.TestCase):

    def test_known_kinds_are_recorded(self):
        diags = []
        for kind in DIAGNOSTIC_KINDS:
            report(diags, "stage", kind, f"{kind} happened", value=1)
        self.assertEqual(len(diags), len(DIAGNOSTIC_KINDS))
        self.assertEqual(count_by_kind(diags), {kind: 1 for kind in DIAGNOSTIC_KINDS})
        self.assertEqual(diags[0].to_dict()["data"], {"value": 1})

    def test_unknown_kind_rejected(self):
        diags = []
        with self.assertRaises(ValueError):
            report(diags, "stage", "oops", "not a diagnostic kind")
        self.assertEqual(diags, [])

    def test_of_kind(self):
        diags = []
        report(diags, "a", DIAG_INVALID_PARAMETER, "x")
        report(diags, "b", DIAG_DEGENERATE_GEOMETRY, "y")
        self.assertEqual([d.stage for d in of_kind(diags, DIAG_INVALID_PARAMETER)], ["a"])


if __name__ == "__main__":
    unittest.main()
