# ========================
# file: planet_topology/core/preset/defaults.py
# ========================
from __future__ import annotations
from typing import Any, Dict

from .. import constants as const

CURRENT_PRESET_VERSION = 1

# Полный набор ключей; пресеты из JSON накладываются поверх через deep_merge.
DEFAULT_PRESET: Dict[str, Any] = {
    "id": "sphere/default",
    "version": CURRENT_PRESET_VERSION,
    "sampler": {
        "point_count": 1000,
        "radius": 1.0,
    },
    "graph": {
        "backend": const.BACKEND_DELAUNAY_PROJECTION,
        "search_k": const.SEARCH_K,
        "max_degree": const.MAX_DEGREE,
        "target_degree": const.TARGET_DEGREE,
        "min_degree": const.MIN_SANE_DEGREE,
        "max_trim_passes": const.MAX_TRIM_PASSES,
        "pole_epsilon": const.POLE_EPSILON,
    },
    "faces": {
        "fill_ratio": const.DEFAULT_FILL_RATIO,
        "coplanarity_tolerance": const.COPLANARITY_TOLERANCE,
    },
    "coloring": {
        "mode": "flat",
        "seed": 0,
    },
    "validation": {
        "check_crossings": False,
        "expected_pentagons": const.EXPECTED_PENTAGONS,
    },
}
