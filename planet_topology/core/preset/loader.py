# ========================
# file: planet_topology/core/preset/loader.py
# ========================
from __future__ import annotations
import os
import json
import copy
import logging
from typing import Any, Dict, Union, Mapping

from .defaults import CURRENT_PRESET_VERSION, DEFAULT_PRESET
from .errors import ValidationError
from .model import TopologyPreset
from .registry import resolve_preset_path
from .validators import validate_dict

logger = logging.getLogger(__name__)


def deep_merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursive dict merge. Lists/tuples are replaced, not merged element-wise."""
    out = copy.deepcopy(base)
    for k, v in overrides.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def _load_json_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Preset file '{path}' is not valid JSON: {e}") from e


def load_preset(
    source: Union[str, Dict[str, Any], None] = None, overrides: Mapping[str, Any] | None = None
) -> TopologyPreset:
    """Load a preset from id/path/dict, merge with defaults and apply overrides.

    Args:
        source: preset id (e.g., 'sphere/default'), or file path to JSON, or raw dict;
            None means plain defaults
        overrides: mapping of ad-hoc overrides (last layer)
    Returns:
        TopologyPreset (immutable dataclass) ready for use
    """
    if source is None:
        data: Dict[str, Any] = {}
    elif isinstance(source, str):
        if os.path.isfile(source):
            data = _load_json_file(source)
        else:
            # treat as id
            path = resolve_preset_path(source)
            data = _load_json_file(path)
    elif isinstance(source, dict):
        data = source
    else:
        raise TypeError("source must be str path/id, dict or None")

    if not isinstance(data, dict):
        raise ValidationError("Preset root must be a JSON object")

    merged = deep_merge(DEFAULT_PRESET, data)
    if overrides:
        merged = deep_merge(merged, overrides)
    merged["version"] = CURRENT_PRESET_VERSION

    validate_dict(merged)
    logger.debug("Пресет '%s' загружен", merged["id"])

    return TopologyPreset(
        id=merged["id"],
        version=int(merged["version"]),
        sampler=dict(merged["sampler"]),
        graph=dict(merged["graph"]),
        faces=dict(merged["faces"]),
        coloring=dict(merged["coloring"]),
        validation=dict(merged["validation"]),
        raw=data,
    )
