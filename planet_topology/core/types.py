# ==============================================================================
# Файл: planet_topology/core/types.py
# Назначение: Структуры данных конвейера (точки, граф, классификация, грани).
# ==============================================================================
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple

import numpy as np

from .constants import COLOR_DTYPE, COORD_DTYPE, INDEX_DTYPE
from .diagnostics import Diagnostic


@dataclass(frozen=True)
class PointSet:
    """
    Точки на сфере радиуса `radius`. Индекс строки = индекс генерации,
    не меняется никогда. Массив `positions` только для чтения.
    """

    positions: np.ndarray
    radius: float

    def __post_init__(self):
        arr = np.array(self.positions, dtype=COORD_DTYPE, copy=True).reshape(-1, 3)
        arr.setflags(write=False)
        object.__setattr__(self, "positions", arr)

    def __len__(self) -> int:
        return int(self.positions.shape[0])

    def unit(self) -> np.ndarray:
        """Нормированные копии точек (на единичной сфере)."""
        norms = np.linalg.norm(self.positions, axis=1, keepdims=True)
        return self.positions / np.maximum(norms, 1e-300)


@dataclass
class NeighborGraph:
    """
    Результат построителя графа: рёбра (E,2) с a<b и симметричные списки соседей.
    Распаковывается как `edges, neighbors = graph`.
    """

    edges: np.ndarray
    neighbors: List[List[int]]
    backend: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Any]:
        yield self.edges
        yield self.neighbors

    @property
    def vertex_count(self) -> int:
        return len(self.neighbors)

    @property
    def edge_count(self) -> int:
        return int(self.edges.shape[0])

    def degrees(self) -> np.ndarray:
        return np.array([len(nbs) for nbs in self.neighbors], dtype=INDEX_DTYPE)


@dataclass(frozen=True)
class Classification:
    labels: Tuple[str, ...]
    degrees: np.ndarray
    pentagon_indices: Tuple[int, ...]
    pentagon_count: int
    hexagon_count: int
    charge: int
    degree_histogram: Dict[int, int]

    def is_pentagonal(self, vertex: int) -> bool:
        return vertex in set(self.pentagon_indices)


@dataclass(frozen=True)
class EdgeRecord:
    """Ребро и вершины, замыкающие смежные с ним треугольные грани (не более двух)."""

    edge_index: int
    a: int
    b: int
    opposing: Tuple[int, ...] = ()


@dataclass
class TriangleBatch:
    """
    Плоская последовательность «рёберных треугольников».
      vertices : (T,3,3) координаты в порядке эмиссии (a, b, apex) или (b, a, apex)
      normals  : (T,3) нормаль грани, наружу
      endpoints: (T,2) индексы концов ребра в порядке эмиссии
      opposite : (T,) индекс противолежащей вершины c
      edge_ids : (T,) индекс ребра в массиве рёбер
      colors   : (T,4) слот цвета, заполняется вызывающей стороной
    """

    vertices: np.ndarray
    normals: np.ndarray
    endpoints: np.ndarray
    opposite: np.ndarray
    edge_ids: np.ndarray
    colors: np.ndarray
    fill_ratio: float
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @classmethod
    def empty(cls, fill_ratio: float) -> "TriangleBatch":
        return cls(
            vertices=np.zeros((0, 3, 3), dtype=COORD_DTYPE),
            normals=np.zeros((0, 3), dtype=COORD_DTYPE),
            endpoints=np.zeros((0, 2), dtype=INDEX_DTYPE),
            opposite=np.zeros((0,), dtype=INDEX_DTYPE),
            edge_ids=np.zeros((0,), dtype=INDEX_DTYPE),
            colors=np.zeros((0, 4), dtype=COLOR_DTYPE),
            fill_ratio=float(fill_ratio),
        )

    def __len__(self) -> int:
        return int(self.vertices.shape[0])

    def vertex_normals(self) -> np.ndarray:
        """(T,3,3): нормаль грани, повторённая для каждой вершины."""
        return np.repeat(self.normals[:, np.newaxis, :], 3, axis=1)

    def centroids(self) -> np.ndarray:
        return self.vertices.mean(axis=1)


@dataclass
class MeshResult:
    """Полный набор геометрии одного цикла regenerate."""

    params: Dict[str, Any]
    points: PointSet
    graph: NeighborGraph
    classification: Classification
    edge_records: List[EdgeRecord]
    triangles: TriangleBatch
    crossings: Optional[List[Tuple[int, int]]] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def all_diagnostics(self) -> List[Diagnostic]:
        return list(self.graph.diagnostics) + list(self.triangles.diagnostics) + list(self.diagnostics)


class GeometryConsumer(Protocol):
    """Хуки презентационного слоя: получает свежую геометрию и освобождает старую."""

    def on_geometry(self, result: MeshResult) -> None: ...
    def on_release(self) -> None: ...
