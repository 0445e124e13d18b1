# ========================
# file: planet_topology/core/preset/validators.py
# ========================
from __future__ import annotations
import math
from typing import Any, Dict
from .errors import ValidationError
from ..constants import GRAPH_BACKENDS


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ValidationError(msg)


def _number(value: Any, msg: str) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValidationError(msg) from None
    _require(math.isfinite(v), msg)
    return v


def _integer(value: Any, msg: str) -> int:
    _require(not isinstance(value, bool), msg)
    v = _number(value, msg)
    _require(float(v).is_integer(), msg)
    return int(v)


def validate_dict(cfg: Dict[str, Any]) -> None:
    """Conservative validation for preset dicts.

    Raises ValidationError on the first failing check.
    """
    _require(
        isinstance(cfg.get("id"), str) and cfg["id"],
        "Preset.id must be non-empty string",
    )

    # Sampler
    smp = dict(cfg.get("sampler", {}))
    _require(
        _integer(smp.get("point_count"), "sampler.point_count must be an integer") >= 1,
        "sampler.point_count must be >= 1",
    )
    _require(
        _number(smp.get("radius"), "sampler.radius must be a number") > 0.0,
        "sampler.radius must be > 0",
    )

    # Graph
    g = dict(cfg.get("graph", {}))
    _require(
        g.get("backend") in GRAPH_BACKENDS,
        f"graph.backend must be one of {GRAPH_BACKENDS}",
    )
    for key in ("search_k", "max_degree", "max_trim_passes"):
        _require(
            _integer(g.get(key), f"graph.{key} must be an integer") >= 1,
            f"graph.{key} must be >= 1",
        )
    for key in ("target_degree", "min_degree"):
        _require(
            _integer(g.get(key), f"graph.{key} must be an integer") >= 0,
            f"graph.{key} must be >= 0",
        )
    _require(
        int(g["min_degree"]) <= int(g["target_degree"]) <= int(g["max_degree"]),
        "graph degrees must satisfy min_degree <= target_degree <= max_degree",
    )
    _require(
        _number(g.get("pole_epsilon"), "graph.pole_epsilon must be a number") > 0.0,
        "graph.pole_epsilon must be > 0",
    )

    # Faces
    fc = dict(cfg.get("faces", {}))
    fr = _number(fc.get("fill_ratio"), "faces.fill_ratio must be a number")
    _require(0.0 <= fr <= 1.0, "faces.fill_ratio must be in [0,1]")
    _require(
        _number(fc.get("coplanarity_tolerance"), "faces.coplanarity_tolerance must be a number") > 0.0,
        "faces.coplanarity_tolerance must be > 0",
    )

    # Coloring
    col = dict(cfg.get("coloring", {}))
    _require(
        col.get("mode") in ("none", "flat"),
        "coloring.mode must be 'none' or 'flat'",
    )
    seed = col.get("seed")
    if seed is not None:
        _require(
            _integer(seed, "coloring.seed must be an integer or null") >= 0,
            "coloring.seed must be >= 0",
        )

    # Validation
    val = dict(cfg.get("validation", {}))
    _require(
        isinstance(val.get("check_crossings"), bool),
        "validation.check_crossings must be boolean",
    )
    _require(
        _integer(val.get("expected_pentagons"), "validation.expected_pentagons must be an integer") >= 0,
        "validation.expected_pentagons must be >= 0",
    )
