# ==============================================================================
# Файл: planet_topology/core/constants.py
# Назначение: Глобальные константы топологического ядра (валентности, допуски,
#             имена бэкендов графа, метки вершин).
# ==============================================================================
from __future__ import annotations
from typing import Dict, Tuple

import numpy as np

# =======================================================================
# СЭМПЛЕР
# =======================================================================
GOLDEN_RATIO = (1.0 + np.sqrt(5.0)) / 2.0
GOLDEN_ANGLE = 2.0 * np.pi / (GOLDEN_RATIO * GOLDEN_RATIO)

# Ось полюса: +Y. Индексы осей, ортогональных полюсу, для проекции.
POLE_AXIS = 1
PLANE_AXES: Tuple[int, int] = (0, 2)

# =======================================================================
# ГРАФ СОСЕДЕЙ
# =======================================================================
BACKEND_KNEAREST_TRIM = "knearest_trim"
BACKEND_DELAUNAY_PROJECTION = "delaunay_projection"
GRAPH_BACKENDS: Tuple[str, ...] = (BACKEND_KNEAREST_TRIM, BACKEND_DELAUNAY_PROJECTION)

# --- K-nearest + trim ---
SEARCH_K = 8            # кандидатов на точку
MAX_DEGREE = 7          # жёсткий потолок валентности
TARGET_DEGREE = 6       # гексагональная цель
MAX_TRIM_PASSES = 100   # бюджет полных проходов обрезки
MIN_SANE_DEGREE = 3     # ниже: предупреждение

# --- Стереографическая проекция ---
POLE_EPSILON = 1e-6     # нижняя граница знаменателя (1 - y)

# =======================================================================
# КЛАССИФИКАЦИЯ
# =======================================================================
KIND_PENTAGONAL = "pentagonal"
KIND_HEXAGONAL = "hexagonal"
PENTAGON_MAX_DEGREE = 5
EXPECTED_PENTAGONS = 12
# Σ(6 - deg) для любой триангуляции сферы (формула Эйлера)
SPHERE_CHARGE = 12

# =======================================================================
# ГРАНИ
# =======================================================================
DEFAULT_FILL_RATIO = 1.0 / 3.0
COPLANARITY_TOLERANCE = 1e-4
DEGENERATE_AREA_EPS = 1e-12
MAX_OPPOSING = 2

# =======================================================================
# ТИПЫ МАССИВОВ
# =======================================================================
COORD_DTYPE = np.float64
INDEX_DTYPE = np.int64
COLOR_DTYPE = np.float32

# Человекочитаемые подписи бэкендов (для CLI и отчётов)
BACKEND_TITLES: Dict[str, str] = {
    BACKEND_KNEAREST_TRIM: "K-nearest union + trim (approximate)",
    BACKEND_DELAUNAY_PROJECTION: "Stereographic Delaunay (exact)",
}
