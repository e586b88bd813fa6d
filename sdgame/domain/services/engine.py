"""
Evaluation Engine

Entry point that scores one design against one scenario at one instant of
simulated time.

Pipeline:
    1. Validate the design and build the topology arena
    2. Sample demand per traffic source
    3. Pass 1: potential load
    4. Node evaluation: capacity, scaling, crashes, CPU/RAM, queues
    5. Pass 2: actual flow
    6. Settle queue backlogs, score, assemble the result and next state

The engine holds no state between calls. Given the same design, scenario,
elapsed offset and EngineState it returns the same result; ``created_at``
comes from the injectable ``clock``.

Usage:
    engine = EvaluationEngine()
    result = engine.evaluate(design, scenario, elapsed_seconds=12)
    later = engine.evaluate(design, scenario, 13, state=result.next_state)
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from sdgame.domain.config.engine_config import EngineConfig
from sdgame.domain.errors import InvalidInputError
from sdgame.domain.models.design import Design
from sdgame.domain.models.evaluation import EvaluationResult
from sdgame.domain.models.scenario import Scenario
from sdgame.domain.models.state import EngineState
from .demand import DemandModel, DemandSample
from .flow import FlowPropagator, FlowResult
from .resources import CRASH_MANUAL, NodeEvaluation, ResourceModel
from .scoring import ScoringModel
from .topology import TopologyGraph

logger = logging.getLogger(__name__)


class EvaluationEngine:
    """Pure, per-tick design evaluator."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or EngineConfig()
        self.clock = clock
        self.resources = ResourceModel(self.config.capacity, self.config.resources)
        self.flow = FlowPropagator(self.config.capacity, self.config.scoring)
        self.scoring = ScoringModel(self.config.scoring)

    def evaluate(
        self,
        design: Design,
        scenario: Scenario,
        elapsed_seconds: float = 0,
        state: Optional[EngineState] = None,
    ) -> EvaluationResult:
        """
        Evaluate ``design`` against ``scenario`` at ``elapsed_seconds``.

        Args:
            design: Topology to evaluate (not modified)
            scenario: Traffic phases, goal and constraints
            elapsed_seconds: Offset into the scenario, may exceed its duration
            state: Tick state; lifted from component properties when None

        Returns:
            EvaluationResult including ``next_state`` for the following tick

        Raises:
            InvalidInputError: if the design is malformed
            SimulationInvariantViolation: if traversal leaves the node arena
        """
        if elapsed_seconds < 0:
            raise InvalidInputError(
                f"elapsed_seconds must be >= 0, got {elapsed_seconds}",
                details={"design_id": design.id},
            )
        design.validate()
        elapsed = float(elapsed_seconds)
        if state is None:
            state = EngineState.from_design(design)

        topology = TopologyGraph(design)

        demand_model = DemandModel(scenario, self.config.demand)
        retention = design.retention_rate
        demands: List[DemandSample] = [
            demand_model.sample(topology.config(root), elapsed, retention)
            for root in topology.roots
        ]
        offered = DemandSample()
        for sample in demands:
            offered = offered + sample

        potential = self.flow.potential(topology, demands, self.resources, state)
        evaluations = self.resources.evaluate(topology, potential, state, elapsed)
        for ev in evaluations:
            if ev.crashed and ev.crash_reason != CRASH_MANUAL:
                logger.info(
                    "Component %s crashed (%s): potential %.1f vs capacity %.1f",
                    topology.ids[ev.index], ev.crash_reason, ev.potential, ev.effective_capacity,
                )

        flow = self.flow.actual(topology, demands, evaluations, self.resources)
        settled = self.resources.settle_queues(
            topology, evaluations, flow.queue_inflow, flow.queue_released,
            self.config.scoring.latency_ceiling_ms,
        )
        queue_delays = {idx: delay for idx, (_, delay) in settled.items()}

        card = self.scoring.score(topology, evaluations, flow, offered.total, queue_delays, scenario)

        result = EvaluationResult(
            design_id=design.id,
            scenario_id=scenario.id,
            total_score=card.total,
            scores=card.scores,
            passed=card.passed,
            avg_latency_ms=card.latency_ms,
            error_rate=1.0 - card.success_rate,
            success_rate=card.success_rate,
            total_qps=offered.total,
            fulfilled_qps=flow.fulfilled,
            malicious_qps=offered.malicious,
            operational_cost=card.operational_cost,
            security_score=card.security,
            consistency_score=card.consistency,
            elapsed_seconds=elapsed,
            created_at=self.clock(),
        )
        self._fill_component_maps(result, topology, evaluations, flow, settled)
        result.next_state = self._next_state(state, topology, evaluations, settled)

        logger.info(
            "Evaluated design %s at t=%.1fs: score %.1f (%s), success %.3f, latency %.1f ms",
            design.id, elapsed, card.total, "PASS" if card.passed else "FAIL",
            card.success_rate, card.latency_ms,
        )
        return result

    @staticmethod
    def _fill_component_maps(
        result: EvaluationResult,
        topology: TopologyGraph,
        evaluations: List[NodeEvaluation],
        flow: FlowResult,
        settled: Dict[int, Tuple[float, float]],
    ) -> None:
        for ev in evaluations:
            cid = topology.ids[ev.index]
            result.potential_loads[cid] = ev.potential
            result.component_loads[cid] = flow.loads[ev.index]
            result.malicious_loads[cid] = flow.malicious[ev.index]
            result.effective_capacities[cid] = ev.effective_capacity
            result.replica_counts[cid] = ev.replica_target
            result.cpu_usage[cid] = ev.cpu
            result.ram_usage[cid] = ev.ram
            if ev.index in settled:
                result.backlogs[cid] = settled[ev.index][0]
            if ev.crashed:
                result.crashed_component_ids.append(cid)
                result.crash_reasons[cid] = ev.crash_reason
            elif ev.index in flow.reached:
                result.active_component_ids.append(cid)

    @staticmethod
    def _next_state(
        state: EngineState,
        topology: TopologyGraph,
        evaluations: List[NodeEvaluation],
        settled: Dict[int, Tuple[float, float]],
    ) -> EngineState:
        crashed = set(state.crashed)
        replicas = dict(state.replica_start_times)
        for ev in evaluations:
            cid = topology.ids[ev.index]
            if ev.crashed:
                crashed.add(cid)
            if ev.replica_starts:
                replicas[cid] = ev.replica_starts
        backlogs = {topology.ids[idx]: backlog for idx, (backlog, _) in settled.items()}
        return EngineState(
            crashed=frozenset(crashed),
            restart_times=state.restart_times,
            backlogs=backlogs,
            replica_start_times=replicas,
        )
