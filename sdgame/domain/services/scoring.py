"""
Scoring & Latency

Turns per-node evaluations and pass-2 accumulators into scored dimensions
and a composite score.

Dimensions (0-100):
    Success Rate   fulfilled / offered legitimate demand
    Reliability    crash penalty, replication bonus
    Security       incident weight from malicious traffic at data stores
    Consistency    penalties for asynchronous or eventually-consistent paths
    Cost           operational cost against the scenario budget
    Latency        congested path latency against the scenario goal

The composite is the weight-normalized sum configured in ScoringWeights.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sdgame.domain.config.engine_config import ScoringSettings
from sdgame.domain.models.component import CACHING_TYPES, ComponentType
from sdgame.domain.models.evaluation import Score
from sdgame.domain.models.scenario import Scenario
from .flow import FlowResult
from .resources import NodeEvaluation
from .topology import TopologyGraph

logger = logging.getLogger(__name__)


@dataclass
class ScoreCard:
    success_rate: float = 0.0
    reliability: float = 100.0
    security: float = 100.0
    consistency: float = 100.0
    operational_cost: float = 0.0
    cost_score: float = 100.0
    congestion: float = 1.0
    latency_ms: float = 0.0
    latency_score: float = 100.0
    total: float = 0.0
    passed: bool = False
    scores: List[Score] = field(default_factory=list)


class ScoringModel:
    """Scores one evaluated tick."""

    def __init__(self, settings: Optional[ScoringSettings] = None):
        self.settings = settings or ScoringSettings()

    def score(
        self,
        topology: TopologyGraph,
        evaluations: List[NodeEvaluation],
        flow: FlowResult,
        offered: float,
        queue_delays: Dict[int, float],
        scenario: Scenario,
    ) -> ScoreCard:
        card = ScoreCard()
        active = sorted(i for i in flow.reached if not evaluations[i].crashed)

        card.success_rate = self.success_rate(flow.fulfilled, offered)
        card.reliability = self.reliability(topology, evaluations)
        card.security = self.security(flow.security_incidents)
        card.consistency = self.consistency(topology, active, flow)
        card.operational_cost = self.operational_cost(topology, evaluations)
        card.cost_score = self.cost_score(card.operational_cost, scenario.budget)
        card.congestion = self.congestion(evaluations, active)
        card.latency_ms = self.latency(topology, active, queue_delays, card.congestion)
        card.latency_score = self.latency_score(card.latency_ms, scenario.goal.max_latency_ms)

        crashed = sum(1 for ev in evaluations if ev.crashed)
        budget = scenario.budget
        card.scores = [
            Score("Success Rate", card.success_rate * 100,
                  f"Fulfilled {flow.fulfilled:.0f} of {offered:.0f} QPS"),
            Score("Reliability", card.reliability, f"{crashed} crashed component(s)"),
            Score("Security", card.security, f"Incident weight {flow.security_incidents:.1f}"),
            Score("Consistency", card.consistency,
                  f"{len(flow.slave_writes)} replica(s) receiving writes"),
            Score("Cost", card.cost_score,
                  f"${card.operational_cost:.2f}/s" + (f" (budget ${budget:.2f}/s)" if budget is not None else "")),
            Score("Latency", card.latency_score,
                  f"{card.latency_ms:.1f} ms (congestion x{card.congestion:.2f})"),
        ]

        card.total = self.composite(card)
        card.passed = card.total >= self.settings.pass_threshold
        return card

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    @staticmethod
    def success_rate(fulfilled: float, offered: float) -> float:
        if offered <= 0:
            return 0.0
        return min(1.0, max(0.0, fulfilled / offered))

    def reliability(self, topology: TopologyGraph, evaluations: List[NodeEvaluation]) -> float:
        s = self.settings
        crashed = sum(1 for ev in evaluations if ev.crashed)
        value = 100.0 - s.crash_penalty * crashed
        replicated = any(
            cfg.type == ComponentType.DATABASE and cfg.is_master_slave and cfg.slave_count >= 1
            for cfg in topology.configs
        )
        if replicated:
            value += s.replication_bonus
        return min(100.0, max(0.0, value))

    def security(self, incidents: float) -> float:
        return max(0.0, 100.0 - self.settings.security_penalty_per_incident * incidents)

    def consistency(self, topology: TopologyGraph, active: List[int], flow: FlowResult) -> float:
        s = self.settings
        penalty = 0.0
        for idx in active:
            comp_type = topology.configs[idx].type
            if comp_type == ComponentType.MESSAGE_QUEUE:
                penalty += s.queue_consistency_penalty
            elif comp_type in CACHING_TYPES:
                penalty += s.cache_consistency_penalty
            elif comp_type == ComponentType.NOSQL:
                penalty += s.nosql_consistency_penalty
        penalty += s.slave_write_consistency_penalty * len(flow.slave_writes)
        return max(0.0, 100.0 - penalty)

    @staticmethod
    def operational_cost(topology: TopologyGraph, evaluations: List[NodeEvaluation]) -> float:
        base = sum(cfg.operational_cost for cfg in topology.configs)
        return base + sum(ev.extra_replica_cost for ev in evaluations)

    def cost_score(self, cost: float, budget: Optional[float]) -> float:
        if budget is None or cost <= budget:
            return 100.0
        return max(0.0, 100.0 - self.settings.budget_penalty_per_unit * (cost - budget))

    def congestion(self, evaluations: List[NodeEvaluation], active: List[int]) -> float:
        s = self.settings
        factor = 1.0
        for idx in active:
            ev = evaluations[idx]
            if ev.cpu > s.congestion_cpu_threshold:
                factor = max(factor, 1 + ((ev.cpu - s.congestion_cpu_threshold) / 10) ** 3)
            if ev.utilization > s.congestion_util_threshold:
                factor = max(factor, 1 + (ev.utilization - s.congestion_util_threshold) * s.congestion_util_slope)
        return factor

    def latency(
        self,
        topology: TopologyGraph,
        active: List[int],
        queue_delays: Dict[int, float],
        congestion: float,
    ) -> float:
        base = sum(topology.configs[i].base_latency_ms for i in active)
        delay = sum(queue_delays.get(i, 0.0) for i in active)
        return min(self.settings.latency_ceiling_ms, (base + delay) * congestion)

    def latency_score(self, latency_ms: float, goal_ms: float) -> float:
        if goal_ms <= 0 or latency_ms <= goal_ms:
            return 100.0
        return max(0.0, 100.0 - (latency_ms - goal_ms) / self.settings.latency_penalty_divisor)

    def composite(self, card: ScoreCard) -> float:
        w = self.settings.weights
        if w.total <= 0:
            logger.warning("Scoring weights sum to zero; composite score is 0")
            return 0.0
        weighted = (
            w.success * card.success_rate * 100
            + w.reliability * card.reliability
            + w.security * card.security
            + w.cost * card.cost_score
            + w.consistency * card.consistency
            + w.latency * card.latency_score
        )
        return weighted / w.total
