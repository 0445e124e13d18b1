# planet_topology/core/diagnostics.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)

# Виды диагностик (не исключения: стадия возвращает результат + список)
DIAG_INVALID_PARAMETER = "invalid_parameter"
DIAG_DEGENERATE_GEOMETRY = "degenerate_geometry"
DIAG_NON_CONVERGENCE = "non_convergence"
DIAG_DEGREE_OUT_OF_RANGE = "degree_out_of_range"
DIAG_TOPOLOGY_ANOMALY = "topology_anomaly"

DIAGNOSTIC_KINDS = (
    DIAG_INVALID_PARAMETER,
    DIAG_DEGENERATE_GEOMETRY,
    DIAG_NON_CONVERGENCE,
    DIAG_DEGREE_OUT_OF_RANGE,
    DIAG_TOPOLOGY_ANOMALY,
)


@dataclass
class Diagnostic:
    """Одна запись о нештатной ситуации, обнаруженной стадией конвейера."""

    stage: str
    kind: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "kind": self.kind,
            "message": self.message,
            "data": dict(self.data),
        }


def report(diagnostics: List[Diagnostic], stage: str, kind: str, message: str, **data: Any) -> Diagnostic:
    """Добавляет диагностику в список и дублирует её в лог предупреждением."""
    if kind not in DIAGNOSTIC_KINDS:
        raise ValueError(f"Unknown diagnostic kind '{kind}', expected one of {DIAGNOSTIC_KINDS}")
    diag = Diagnostic(stage=stage, kind=kind, message=message, data=data)
    diagnostics.append(diag)
    logger.warning("[%s] %s: %s", stage, kind, message)
    return diag


def count_by_kind(diagnostics: Iterable[Diagnostic]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for d in diagnostics:
        counts[d.kind] = counts.get(d.kind, 0) + 1
    return counts


def of_kind(diagnostics: Iterable[Diagnostic], kind: str) -> List[Diagnostic]:
    return [d for d in diagnostics if d.kind == kind]
