# planet_topology/topology/coloring.py
from __future__ import annotations
import logging
from typing import Callable, Optional

import numpy as np

from ..core.constants import COLOR_DTYPE
from ..core.types import TriangleBatch

logger = logging.getLogger(__name__)

COLOR_MODE_NONE = "none"
COLOR_MODE_FLAT = "flat"
COLOR_MODES = (COLOR_MODE_NONE, COLOR_MODE_FLAT)

# (T,3) центроиды -> (T,3) или (T,4) цвета в [0..1]
CentroidColorFn = Callable[[np.ndarray], np.ndarray]


def _as_rgba(colors: np.ndarray, count: int) -> np.ndarray:
    c = np.asarray(colors, dtype=COLOR_DTYPE)
    if c.ndim != 2 or c.shape[0] != count or c.shape[1] not in (3, 4):
        raise ValueError(f"color array must be ({count},3) or ({count},4), got {c.shape}")
    if c.shape[1] == 3:
        c = np.concatenate([c, np.ones((count, 1), dtype=COLOR_DTYPE)], axis=1)
    return np.clip(c, 0.0, 1.0)


def flat_edge_colors(batch: TriangleBatch, seed: Optional[int] = None) -> TriangleBatch:
    """
    Один случайный цвет на ребро: оба треугольника ребра окрашены одинаково.
    Генератор сидируется: одинаковый seed даёт одинаковую раскраску.
    """
    if len(batch) == 0:
        return batch
    rng = np.random.default_rng(seed)
    edge_count = int(batch.edge_ids.max()) + 1
    palette = rng.random((edge_count, 3)).astype(COLOR_DTYPE)
    batch.colors = _as_rgba(palette[batch.edge_ids], len(batch))
    return batch


def centroid_colors(batch: TriangleBatch, color_fn: CentroidColorFn) -> TriangleBatch:
    """Цвет по центроиду треугольника, вычисленный внешней функцией (например, рельефом)."""
    if len(batch) == 0:
        return batch
    batch.colors = _as_rgba(color_fn(batch.centroids()), len(batch))
    return batch


def apply_color_mode(batch: TriangleBatch, mode: str, seed: Optional[int] = None) -> TriangleBatch:
    if mode == COLOR_MODE_FLAT:
        return flat_edge_colors(batch, seed)
    if mode == COLOR_MODE_NONE:
        return batch
    raise ValueError(f"Unknown color mode '{mode}', expected one of {COLOR_MODES}")
