"""
Engine Configuration

Named constants for the evaluation engine. Every magic number the demand,
resource, flow and scoring models use lives here so that a caller can tune
one knob without touching the algorithms.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

from sdgame.domain.models.component import ComponentType


@dataclass(frozen=True)
class DemandSettings:
    """Traffic modifiers applied on top of the scripted phase rate."""
    burst_multiplier: float = 5.0
    burst_cycle_seconds: float = 10.0
    burst_window_seconds: float = 3.0

    fluctuation_amplitude: float = 0.1
    fluctuation_period_seconds: float = 30.0

    drop_cycle_seconds: float = 120.0
    drop_probability: float = 0.05
    drop_window_seconds: float = 10.0
    drop_multiplier: float = 0.3

    attack_warmup_seconds: float = 30.0
    attack_cycle_seconds: float = 60.0
    attack_window_seconds: float = 15.0
    attack_amplitude: float = 3000.0
    attack_pulse_period_seconds: float = 5.0


def _default_crash_multipliers() -> Mapping[ComponentType, float]:
    return {
        ComponentType.MESSAGE_QUEUE: 50.0,
        ComponentType.OBJECT_STORAGE: 50.0,
        ComponentType.LOAD_BALANCER: 5.0,
        ComponentType.CDN: 5.0,
        ComponentType.WAF: 5.0,
        ComponentType.AUTO_SCALING_GROUP: 3.0,
    }


@dataclass(frozen=True)
class CapacitySettings:
    """Crash thresholds, pass-through ratios and replica timing."""
    default_crash_multiplier: float = 1.5
    crash_multipliers: Mapping[ComponentType, float] = field(default_factory=_default_crash_multipliers)
    restart_grace_seconds: float = 5.0
    replica_warmup_seconds: float = 10.0

    cache_pass_through: float = 0.2         # share of reads a cache/CDN forwards
    waf_malicious_pass_through: float = 0.1
    waf_false_positive_rate: float = 0.01

    def crash_multiplier(self, comp_type: ComponentType) -> float:
        return self.crash_multipliers.get(comp_type, self.default_crash_multiplier)


@dataclass(frozen=True)
class ResourceSettings:
    """Synthetic CPU / RAM model."""
    cpu_idle: float = 5.0
    cpu_scale: float = 80.0
    write_cost: float = 3.0

    ram_cache_base: float = 20.0
    ram_cache_scale: float = 50.0
    ram_queue_base: float = 10.0
    ram_queue_backlog_divisor: float = 1000.0
    ram_store_base: float = 30.0
    ram_store_scale: float = 40.0
    ram_default_base: float = 15.0
    ram_default_scale: float = 30.0


@dataclass(frozen=True)
class ScoringWeights:
    """
    Composite score weights.

    Weights are normalized by their sum, so ``ScoringWeights(success=1)``
    scores on success rate alone.
    """
    success: float = 0.6
    reliability: float = 0.2
    security: float = 0.2
    cost: float = 0.0
    consistency: float = 0.0
    latency: float = 0.0

    @property
    def total(self) -> float:
        return (self.success + self.reliability + self.security
                + self.cost + self.consistency + self.latency)


@dataclass(frozen=True)
class ScoringSettings:
    """Per-dimension penalties and the pass bar."""
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    pass_threshold: float = 80.0

    crash_penalty: float = 10.0
    replication_bonus: float = 10.0
    security_incident_divisor: float = 100.0
    security_penalty_per_incident: float = 0.5
    gateway_mitigation: float = 0.5

    queue_consistency_penalty: float = 10.0
    cache_consistency_penalty: float = 5.0
    nosql_consistency_penalty: float = 10.0
    slave_write_consistency_penalty: float = 15.0

    budget_penalty_per_unit: float = 5.0

    congestion_cpu_threshold: float = 90.0
    congestion_util_threshold: float = 0.95
    congestion_util_slope: float = 10.0
    latency_ceiling_ms: float = 5000.0
    latency_penalty_divisor: float = 5.0


@dataclass(frozen=True)
class EngineConfig:
    """Top-level engine configuration."""
    demand: DemandSettings = field(default_factory=DemandSettings)
    capacity: CapacitySettings = field(default_factory=CapacitySettings)
    resources: ResourceSettings = field(default_factory=ResourceSettings)
    scoring: ScoringSettings = field(default_factory=ScoringSettings)

    def with_pass_threshold(self, threshold: Optional[float]) -> EngineConfig:
        if threshold is None:
            return self
        return replace(self, scoring=replace(self.scoring, pass_threshold=threshold))

    def with_weights(self, weights: ScoringWeights) -> EngineConfig:
        return replace(self, scoring=replace(self.scoring, weights=weights))
