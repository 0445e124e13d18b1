"""
Построение топологии сетки планеты из командной строки.
Запуск: python run_topology.py --preset sphere/planet_r5 --out out/planet
"""
from __future__ import annotations
import argparse
import json
import logging
import pathlib
import sys

# Убедимся, что корень проекта в sys.path (для импорта planet_topology/*)
ROOT = pathlib.Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planet_topology.core.constants import BACKEND_TITLES, GRAPH_BACKENDS
from planet_topology.core.errors import InvalidParameterError
from planet_topology.core.export import write_mesh_cache
from planet_topology.core.preset import PresetError, add_search_folder, list_presets
from planet_topology.setup_logging import setup_logging
from planet_topology.topology.validation import mesh_report
from planet_topology.world import PlanetMesh

logger = logging.getLogger("planet_topology.cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Geodesic planet mesh topology builder")
    p.add_argument("--preset", default="sphere/default", help="preset id or path to JSON")
    p.add_argument("--preset-dir", action="append", default=[], help="extra folder with <group>/<name>.json presets (repeatable)")
    p.add_argument("--points", type=int, default=None, help="point count")
    p.add_argument("--radius", type=float, default=None, help="sphere radius")
    p.add_argument("--backend", choices=GRAPH_BACKENDS, default=None, help="neighbor graph backend")
    p.add_argument("--fill-ratio", type=float, default=None, help="apex fraction toward the opposite vertex")
    p.add_argument("--seed", type=int, default=None, help="color seed for flat edge coloring")
    p.add_argument("--check-crossings", action="store_true", help="run the O(E^2) crossing detector")
    p.add_argument("--out", default=None, help="cache path prefix (<prefix>.npz + <prefix>.meta.json)")
    p.add_argument("--report", default=None, help="write a JSON mesh report to this file")
    p.add_argument("--list-presets", action="store_true", help="print available preset ids and exit")
    p.add_argument("--log-file", default=None, help="also log to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    for folder in args.preset_dir:
        add_search_folder(folder)

    if args.list_presets:
        for preset_id in list_presets():
            print(preset_id)
        return 0

    params = {
        "point_count": args.points,
        "radius": args.radius,
        "backend": args.backend,
        "fill_ratio": args.fill_ratio,
        "color_seed": args.seed,
    }
    params = {k: v for k, v in params.items() if v is not None}
    if args.check_crossings:
        params["check_crossings"] = True

    try:
        with PlanetMesh(args.preset) as mesh:
            result = mesh.regenerate(**params)
            logger.info("Бэкенд: %s", BACKEND_TITLES.get(result.graph.backend, result.graph.backend))
            report = mesh_report(result)
            overview = report["mesh_overview"]
            cls = report["classification"]
            logger.info(
                "V=%d E=%d F=%d (V-E+F=%d) | пятиугольных %d, шестиугольных %d, заряд %d",
                overview["vertices"], overview["edges"], overview["faces"], overview["euler_characteristic"],
                cls["pentagons"], cls["hexagons"], cls["charge"],
            )
            for kind, count in report["diagnostics"]["counts"].items():
                logger.info("Диагностика %s: %d", kind, count)
            if args.out:
                write_mesh_cache(args.out, result)
            if args.report:
                path = pathlib.Path(args.report)
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")
                logger.info("Отчёт сохранён: %s", path)
    except (InvalidParameterError, PresetError) as e:
        logger.error("Неверные параметры: %s", e)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
