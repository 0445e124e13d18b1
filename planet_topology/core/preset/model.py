from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class TopologyPreset:
    id: str
    version: int
    sampler: Dict[str, Any]
    graph: Dict[str, Any]
    faces: Dict[str, Any]
    coloring: Dict[str, Any]
    validation: Dict[str, Any]
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def point_count(self) -> int:
        return int(self.sampler["point_count"])

    @property
    def radius(self) -> float:
        return float(self.sampler["radius"])

    @property
    def backend(self) -> str:
        return str(self.graph["backend"])

    @property
    def fill_ratio(self) -> float:
        return float(self.faces["fill_ratio"])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "version": self.version,
            "sampler": dict(self.sampler),
            "graph": dict(self.graph),
            "faces": dict(self.faces),
            "coloring": dict(self.coloring),
            "validation": dict(self.validation),
        }
