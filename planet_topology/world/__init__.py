from .planet_mesh import PARAM_PATHS, PlanetMesh, flat_params, params_to_overrides, run_pipeline

__all__ = ["PlanetMesh", "run_pipeline", "flat_params", "params_to_overrides", "PARAM_PATHS"]
