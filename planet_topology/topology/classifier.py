# planet_topology/topology/classifier.py
from __future__ import annotations
from typing import Dict, Sequence

import numpy as np

from ..core.constants import INDEX_DTYPE, KIND_HEXAGONAL, KIND_PENTAGONAL, PENTAGON_MAX_DEGREE
from ..core.types import Classification


def classify(neighbors: Sequence[Sequence[int]]) -> Classification:
    """
    Метка по итоговой валентности: deg <= 5 -> pentagonal, иначе hexagonal.
    Заряд Σ(6 - deg) для любой триангуляции сферы равен 12, даже когда
    «пятиугольников» больше 12 (пары 5-7 дислокаций).
    """
    degrees = np.array([len(nbs) for nbs in neighbors], dtype=INDEX_DTYPE)
    pent_mask = degrees <= PENTAGON_MAX_DEGREE
    labels = tuple(KIND_PENTAGONAL if p else KIND_HEXAGONAL for p in pent_mask)
    pent_ids = tuple(int(i) for i in np.flatnonzero(pent_mask))

    hist: Dict[int, int] = {}
    if degrees.size:
        values, counts = np.unique(degrees, return_counts=True)
        hist = {int(v): int(c) for v, c in zip(values, counts)}

    return Classification(
        labels=labels,
        degrees=degrees,
        pentagon_indices=pent_ids,
        pentagon_count=len(pent_ids),
        hexagon_count=int(degrees.size - len(pent_ids)),
        charge=int(np.sum(6 - degrees)) if degrees.size else 0,
        degree_histogram=hist,
    )


def pentagon_indices(neighbors: Sequence[Sequence[int]]) -> list[int]:
    return list(classify(neighbors).pentagon_indices)


def pentagon_count(neighbors: Sequence[Sequence[int]]) -> int:
    return sum(1 for nbs in neighbors if len(nbs) <= PENTAGON_MAX_DEGREE)
