# ==============================================================================
# Файл: planet_topology/core/export.py
# Назначение: Кэш сгенерированной сетки на диске (NPZ + meta.json),
#             атомарная запись через временный файл.
# ==============================================================================
from __future__ import annotations
import dataclasses
import json
import logging
import os
import zipfile
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from .types import MeshResult

logger = logging.getLogger(__name__)

CACHE_FORMAT_VERSION = 1
CACHE_ARRAYS = (
    "points", "edges", "tri_vertices", "tri_normals",
    "tri_endpoints", "tri_opposite", "tri_edge_ids", "tri_colors", "degrees",
)


def _ensure_path_exists(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def _serializer(o: Any):
    if dataclasses.is_dataclass(o):
        return dataclasses.asdict(o)
    if isinstance(o, np.integer):
        return int(o)
    if isinstance(o, np.floating):
        return float(o)
    if isinstance(o, np.ndarray):
        return o.tolist()
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def _atomic_write_json(path: str, data: Any) -> None:
    _ensure_path_exists(path)
    tmp_path = path + ".tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=_serializer)
    os.replace(tmp_path, path)


def write_mesh_cache(path_prefix: str, result: MeshResult) -> Dict[str, str]:
    """Сохраняет <prefix>.npz (массивы) и <prefix>.meta.json (параметры, счётчики, диагностики)."""
    path_prefix = str(path_prefix)
    meta_path = path_prefix + ".meta.json"
    npz_path = path_prefix + ".npz"

    tri = result.triangles
    cls = result.classification
    meta = {
        "format_version": CACHE_FORMAT_VERSION,
        "params": dict(result.params),
        "backend": result.graph.backend,
        "radius": result.points.radius,
        "counts": {
            "points": len(result.points),
            "edges": result.graph.edge_count,
            "edge_triangles": len(tri),
            "pentagons": cls.pentagon_count,
            "hexagons": cls.hexagon_count,
            "charge": cls.charge,
        },
        "fill_ratio": tri.fill_ratio,
        "crossings": None if result.crossings is None else [list(p) for p in result.crossings],
        "diagnostics": [d.to_dict() for d in result.all_diagnostics()],
    }

    _ensure_path_exists(npz_path)
    tmp_path = npz_path + ".tmp"
    with open(tmp_path, "wb") as f:
        np.savez_compressed(
            f,
            points=np.asarray(result.points.positions),
            edges=result.graph.edges,
            tri_vertices=tri.vertices,
            tri_normals=tri.normals,
            tri_endpoints=tri.endpoints,
            tri_opposite=tri.opposite,
            tri_edge_ids=tri.edge_ids,
            tri_colors=tri.colors,
            degrees=cls.degrees,
        )
    os.replace(tmp_path, npz_path)
    _atomic_write_json(meta_path, meta)
    logger.info("Кэш сетки сохранён: %s (+ .meta.json)", npz_path)
    return {"npz": npz_path, "meta": meta_path}


def read_mesh_cache(path_prefix: str) -> Optional[Dict[str, Any]]:
    """Читает кэш; None если файлов нет или они повреждены."""
    path_prefix = str(path_prefix)
    meta_path = path_prefix + ".meta.json"
    npz_path = path_prefix + ".npz"
    if not os.path.exists(meta_path) or not os.path.exists(npz_path):
        return None

    try:
        with open(meta_path, "r", encoding="utf-8") as f:
            meta = json.load(f)
        with np.load(npz_path) as data:
            arrays = {name: data[name] for name in CACHE_ARRAYS}
    except (OSError, ValueError, KeyError, zipfile.BadZipFile) as e:
        logger.error("Ошибка чтения кэша сетки %s: %s", path_prefix, e)
        return None

    if meta.get("format_version") != CACHE_FORMAT_VERSION:
        logger.warning("Кэш %s: неизвестная версия формата %r", path_prefix, meta.get("format_version"))
        return None
    return {"meta": meta, **arrays}
