# ========================
# file: planet_topology/core/preset/__init__.py
# ========================
from .defaults import CURRENT_PRESET_VERSION, DEFAULT_PRESET
from .errors import NotFoundError, PresetError, ValidationError
from .model import TopologyPreset
from .loader import load_preset, deep_merge
from .registry import add_search_folder, list_presets, resolve_preset_path

__all__ = [
    "CURRENT_PRESET_VERSION",
    "DEFAULT_PRESET",
    "TopologyPreset",
    "load_preset",
    "deep_merge",
    "PresetError",
    "ValidationError",
    "NotFoundError",
    "add_search_folder",
    "list_presets",
    "resolve_preset_path",
]
