"""
Evaluation Result Domain Model

Output of a single engine tick: per-dimension scores, aggregate metrics and
per-component maps keyed by component id.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .state import EngineState


@dataclass(frozen=True)
class Score:
    """One scored dimension with commentary."""
    dimension: str      # e.g. "Success Rate", "Reliability", "Cost"
    value: float        # 0-100
    comment: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": self.dimension,
            "value": round(self.value, 2),
            "comment": self.comment,
        }


def _rounded(values: Dict[str, float], digits: int = 4) -> Dict[str, float]:
    return {k: round(v, digits) for k, v in sorted(values.items())}


@dataclass
class EvaluationResult:
    design_id: str
    scenario_id: str
    total_score: float
    scores: List[Score] = field(default_factory=list)
    passed: bool = False

    avg_latency_ms: float = 0.0
    error_rate: float = 0.0
    success_rate: float = 0.0
    total_qps: float = 0.0          # offered legitimate demand
    fulfilled_qps: float = 0.0
    malicious_qps: float = 0.0
    operational_cost: float = 0.0
    security_score: float = 100.0
    consistency_score: float = 100.0

    elapsed_seconds: float = 0.0
    created_at: float = 0.0

    active_component_ids: List[str] = field(default_factory=list)
    crashed_component_ids: List[str] = field(default_factory=list)

    component_loads: Dict[str, float] = field(default_factory=dict)
    potential_loads: Dict[str, float] = field(default_factory=dict)
    effective_capacities: Dict[str, float] = field(default_factory=dict)
    replica_counts: Dict[str, int] = field(default_factory=dict)
    backlogs: Dict[str, float] = field(default_factory=dict)
    cpu_usage: Dict[str, float] = field(default_factory=dict)
    ram_usage: Dict[str, float] = field(default_factory=dict)
    malicious_loads: Dict[str, float] = field(default_factory=dict)
    crash_reasons: Dict[str, str] = field(default_factory=dict)

    next_state: Optional[EngineState] = None

    def score_for(self, dimension: str) -> Optional[Score]:
        for score in self.scores:
            if score.dimension == dimension:
                return score
        return None

    def to_dict(self) -> Dict[str, Any]:
        capacities = {
            k: (round(v, 4) if v != float("inf") else None)
            for k, v in sorted(self.effective_capacities.items())
        }
        return {
            "design_id": self.design_id,
            "scenario_id": self.scenario_id,
            "total_score": round(self.total_score, 2),
            "passed": self.passed,
            "scores": [s.to_dict() for s in self.scores],
            "metrics": {
                "avg_latency_ms": round(self.avg_latency_ms, 4),
                "error_rate": round(self.error_rate, 4),
                "success_rate": round(self.success_rate, 4),
                "total_qps": round(self.total_qps, 4),
                "fulfilled_qps": round(self.fulfilled_qps, 4),
                "malicious_qps": round(self.malicious_qps, 4),
                "operational_cost": round(self.operational_cost, 4),
                "security_score": round(self.security_score, 2),
                "consistency_score": round(self.consistency_score, 2),
            },
            "elapsed_seconds": self.elapsed_seconds,
            "created_at": self.created_at,
            "active_component_ids": list(self.active_component_ids),
            "crashed_component_ids": list(self.crashed_component_ids),
            "component_loads": _rounded(self.component_loads),
            "potential_loads": _rounded(self.potential_loads),
            "effective_capacities": capacities,
            "replica_counts": dict(sorted(self.replica_counts.items())),
            "backlogs": _rounded(self.backlogs),
            "cpu_usage": _rounded(self.cpu_usage),
            "ram_usage": _rounded(self.ram_usage),
            "malicious_loads": _rounded(self.malicious_loads),
            "crash_reasons": dict(sorted(self.crash_reasons.items())),
            "next_state": self.next_state.to_dict() if self.next_state else None,
        }
