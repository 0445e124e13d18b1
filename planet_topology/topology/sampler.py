# planet_topology/topology/sampler.py
from __future__ import annotations
import logging
import math
import numbers

import numpy as np

from ..core.constants import COORD_DTYPE, GOLDEN_ANGLE
from ..core.errors import InvalidParameterError
from ..core.types import PointSet

logger = logging.getLogger(__name__)


def _validate(point_count, radius) -> tuple[int, float]:
    if isinstance(point_count, bool):
        raise InvalidParameterError(f"point_count must be an integer, got {point_count!r}")
    if not isinstance(point_count, numbers.Integral):
        if not (isinstance(point_count, numbers.Real) and float(point_count).is_integer()):
            raise InvalidParameterError(f"point_count must be an integer, got {point_count!r}")
    n = int(point_count)
    if n < 1:
        raise InvalidParameterError(f"point_count must be >= 1, got {n}")
    try:
        r = float(radius)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"radius must be a number, got {radius!r}") from e
    if not math.isfinite(r) or r <= 0.0:
        raise InvalidParameterError(f"radius must be a finite number > 0, got {radius!r}")
    return n, r


def fibonacci_sphere(point_count: int, radius: float = 1.0) -> np.ndarray:
    """
    Золотая спираль (решётка Фибоначчи) на сфере радиуса `radius`, полюс по +Y.
      phi   = arccos(1 - 2(i + 0.5)/N)
      theta = i * golden_angle
    Чистая функция от (i, N, r): никакой случайности.
    """
    n, r = _validate(point_count, radius)
    i = np.arange(n, dtype=COORD_DTYPE)
    phi = np.arccos(np.clip(1.0 - 2.0 * (i + 0.5) / n, -1.0, 1.0))
    theta = i * GOLDEN_ANGLE
    sin_phi = np.sin(phi)
    pts = np.stack([sin_phi * np.cos(theta), np.cos(phi), sin_phi * np.sin(theta)], axis=1)
    return (pts * r).astype(COORD_DTYPE)


def generate(point_count: int, radius: float = 1.0) -> PointSet:
    """Генерирует N квазиравномерных точек; индексы 0..N-1 в порядке генерации."""
    positions = fibonacci_sphere(point_count, radius)
    logger.debug("Сэмплер: %d точек, радиус %.4f", positions.shape[0], float(radius))
    return PointSet(positions=positions, radius=float(radius))
