# ==============================================================================
# Файл: planet_topology/world/planet_mesh.py
# Назначение: Цикл regenerate: полный пересчёт сетки планеты из параметров,
#             с освобождением предыдущей геометрии перед построением новой.
# ==============================================================================
from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..core.diagnostics import DIAG_DEGENERATE_GEOMETRY, Diagnostic, report
from ..core.errors import InvalidParameterError
from ..core.preset import TopologyPreset, ValidationError, load_preset
from ..core.types import GeometryConsumer, MeshResult
from ..topology.classifier import classify
from ..topology.coloring import apply_color_mode
from ..topology.crossings import detect_crossings
from ..topology.faces import count_coplanarity_violations, extract_face_triangles, face_triangles, find_opposing_vertices
from ..topology.graph_builders import build_graph
from ..topology.sampler import generate
from ..topology.validation import check_topology

logger = logging.getLogger(__name__)

STAGE = "planet_mesh"

# Плоские имена параметров UI -> путь в пресете
PARAM_PATHS: Dict[str, Tuple[str, str]] = {
    "point_count": ("sampler", "point_count"),
    "radius": ("sampler", "radius"),
    "backend": ("graph", "backend"),
    "search_k": ("graph", "search_k"),
    "max_degree": ("graph", "max_degree"),
    "target_degree": ("graph", "target_degree"),
    "min_degree": ("graph", "min_degree"),
    "max_trim_passes": ("graph", "max_trim_passes"),
    "pole_epsilon": ("graph", "pole_epsilon"),
    "fill_ratio": ("faces", "fill_ratio"),
    "coplanarity_tolerance": ("faces", "coplanarity_tolerance"),
    "color_mode": ("coloring", "mode"),
    "color_seed": ("coloring", "seed"),
    "check_crossings": ("validation", "check_crossings"),
    "expected_pentagons": ("validation", "expected_pentagons"),
}


def params_to_overrides(params: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    overrides: Dict[str, Dict[str, Any]] = {}
    for key, value in params.items():
        path = PARAM_PATHS.get(key)
        if path is None:
            raise InvalidParameterError(f"Unknown parameter '{key}', expected one of {sorted(PARAM_PATHS)}")
        section, name = path
        overrides.setdefault(section, {})[name] = value
    return overrides


def flat_params(preset: TopologyPreset) -> Dict[str, Any]:
    sections = preset.to_dict()
    return {key: sections[section][name] for key, (section, name) in PARAM_PATHS.items()}


def run_pipeline(preset: TopologyPreset) -> MeshResult:
    """
    Один синхронный проход: точки -> граф -> классификация -> грани (+ цвета)
    -> опционально пересечения -> проверки топологии.
    """
    g = preset.graph
    points = generate(preset.point_count, preset.radius)
    graph = build_graph(
        points,
        preset.backend,
        search_k=g["search_k"],
        max_degree=g["max_degree"],
        target_degree=g["target_degree"],
        min_degree=g["min_degree"],
        max_passes=g["max_trim_passes"],
        pole_epsilon=g["pole_epsilon"],
    )
    classification = classify(graph.neighbors)

    face_diags: List[Diagnostic] = []
    records = find_opposing_vertices(graph.edges, graph.neighbors, points, face_diags)
    triangles = extract_face_triangles(
        points, graph.edges, graph.neighbors, preset.fill_ratio, records=records
    )
    triangles.diagnostics = face_diags + triangles.diagnostics
    apply_color_mode(triangles, preset.coloring["mode"], preset.coloring.get("seed"))

    diagnostics: List[Diagnostic] = []
    tolerance = float(preset.faces["coplanarity_tolerance"])
    violations = count_coplanarity_violations(points, triangles, tolerance)
    if violations:
        report(
            diagnostics, STAGE, DIAG_DEGENERATE_GEOMETRY,
            f"{violations} треугольников вне плоскости (a,b,c) сверх допуска {tolerance:g}",
            violations=violations,
        )

    crossings: Optional[List[Tuple[int, int]]] = None
    if preset.validation["check_crossings"]:
        crossings = detect_crossings(points, graph.edges)

    diagnostics.extend(
        check_topology(
            graph, classification, crossings, face_triangles(records),
            expected_pentagons=int(preset.validation["expected_pentagons"]),
        )
    )

    logger.info(
        "Сетка готова: %d точек, %d рёбер, %d пятиугольных / %d шестиугольных, %d треугольников",
        len(points), graph.edge_count, classification.pentagon_count,
        classification.hexagon_count, len(triangles),
    )
    return MeshResult(
        params=flat_params(preset),
        points=points,
        graph=graph,
        classification=classification,
        edge_records=records,
        triangles=triangles,
        crossings=crossings,
        diagnostics=diagnostics,
    )


class PlanetMesh:
    """
    Владелец текущей геометрии планеты. Каждый regenerate сначала освобождает
    предыдущий набор (хуки on_release), затем строит новый с нуля и отдаёт его
    потребителям (on_geometry). Инкрементальных обновлений нет.
    """

    def __init__(
        self,
        preset: Union[TopologyPreset, str, Dict[str, Any], None] = None,
        consumers: Iterable[GeometryConsumer] = (),
    ):
        self.preset = preset if isinstance(preset, TopologyPreset) else load_preset(preset)
        self._consumers: List[GeometryConsumer] = list(consumers)
        self._result: Optional[MeshResult] = None
        self.generation = 0

    @property
    def result(self) -> Optional[MeshResult]:
        return self._result

    def add_consumer(self, consumer: GeometryConsumer) -> None:
        self._consumers.append(consumer)
        if self._result is not None:
            consumer.on_geometry(self._result)

    def _resolve(self, params: Mapping[str, Any]) -> TopologyPreset:
        if not params:
            return self.preset
        overrides = params_to_overrides(params)
        try:
            return load_preset(self.preset.to_dict(), overrides)
        except ValidationError as e:
            raise InvalidParameterError(str(e)) from e

    def regenerate(self, **params: Any) -> MeshResult:
        # Сначала проверяем параметры: при ошибке текущая геометрия остаётся на месте
        preset = self._resolve(params)
        self.release()
        self.preset = preset

        logger.info("Regenerate #%d: %s", self.generation + 1, flat_params(preset))
        result = run_pipeline(preset)
        self._result = result
        self.generation += 1
        for consumer in self._consumers:
            consumer.on_geometry(result)
        return result

    def release(self) -> None:
        if self._result is None:
            return
        for consumer in self._consumers:
            consumer.on_release()
        self._result = None
        logger.debug("Геометрия поколения %d освобождена", self.generation)

    def close(self) -> None:
        self.release()

    def __enter__(self) -> "PlanetMesh":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
