"""
Resource Model

Evaluates every node exactly once from its pass-1 potential load, so that
crash, auto-scaling and throttle decisions do not depend on traversal order.

Per node:
    1. Manual crash (state.crashed)
    2. Base capacity, with master-slave read scaling for databases
    3. Auto-scaling target, replica warm-up and effective capacity
    4. Overload crash against capacity x type multiplier (outside grace)
    5. Synthetic CPU / RAM, RAM > 100% is an out-of-memory crash
    6. Proportional throttle ratio
    7. Message-queue processing rate and projected backlog

Message queues are resolved after every other node because their processing
rate depends on which consumers survived.
"""

from __future__ import annotations

import math
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, AbstractSet, Dict, List, Optional, Tuple

from sdgame.domain.config.engine_config import CapacitySettings, ResourceSettings
from sdgame.domain.models.component import (
    CACHING_TYPES,
    SCALABLE_TYPES,
    STORE_TYPES,
    ComponentConfig,
    ComponentType,
)
from sdgame.domain.models.state import EngineState
from .topology import TopologyGraph

if TYPE_CHECKING:
    from .flow import PotentialLoad

logger = logging.getLogger(__name__)

INF = float("inf")

CRASH_MANUAL = "manual"
CRASH_OVERLOAD = "overload"
CRASH_OOM = "oom"


@dataclass
class NodeEvaluation:
    """Per-node decisions shared by pass 2, scoring and the result maps."""
    index: int
    potential: float = 0.0
    base_capacity: float = INF
    effective_capacity: float = INF
    replica_target: int = 1
    active_replicas: int = 1
    replica_starts: Tuple[float, ...] = ()
    extra_replica_cost: float = 0.0
    in_grace: bool = False
    crashed: bool = False
    crash_reason: Optional[str] = None
    utilization: float = 0.0
    cpu: float = 0.0
    ram: float = 0.0
    throttle: float = 1.0

    # Message queues only
    processing_rate: float = 0.0
    prior_backlog: float = 0.0
    expected_inflow: float = 0.0

    def crash(self, reason: str) -> None:
        self.crashed = True
        self.crash_reason = reason
        self.throttle = 0.0


class ResourceModel:
    """Capacity, failure and resource decisions for one tick."""

    def __init__(
        self,
        capacity: Optional[CapacitySettings] = None,
        resources: Optional[ResourceSettings] = None,
    ):
        self.capacity = capacity or CapacitySettings()
        self.resources = resources or ResourceSettings()

    def evaluate(
        self,
        topology: TopologyGraph,
        potential: "PotentialLoad",
        state: EngineState,
        elapsed: float,
    ) -> List[NodeEvaluation]:
        evaluations = [
            self._evaluate_node(idx, topology.config(idx), potential, state, elapsed)
            for idx in range(len(topology))
        ]
        for idx in topology.indices_of_type(ComponentType.MESSAGE_QUEUE):
            self._resolve_queue(evaluations[idx], topology, evaluations, potential)
        return evaluations

    # ------------------------------------------------------------------
    # Per-node steps
    # ------------------------------------------------------------------

    def _evaluate_node(
        self,
        idx: int,
        cfg: ComponentConfig,
        potential: "PotentialLoad",
        state: EngineState,
        elapsed: float,
    ) -> NodeEvaluation:
        read, write, malicious = potential.read[idx], potential.write[idx], potential.malicious[idx]
        ev = NodeEvaluation(index=idx, potential=read + write + malicious)
        ev.prior_backlog = state.backlogs.get(cfg.id, 0.0)

        if cfg.id in state.crashed:
            ev.crash(CRASH_MANUAL)
            ev.effective_capacity = ev.base_capacity = self._base_capacity(cfg, read, write)
            return ev

        ev.base_capacity = self._base_capacity(cfg, read, write)
        self._apply_scaling(ev, cfg, state, elapsed)

        restart_at = state.restart_times.get(cfg.id)
        ev.in_grace = restart_at is not None and elapsed - restart_at < self.capacity.restart_grace_seconds

        if not ev.in_grace and ev.potential > ev.effective_capacity * self.capacity.crash_multiplier(cfg.type):
            ev.crash(CRASH_OVERLOAD)
            return ev

        if ev.effective_capacity == INF:
            ev.utilization = 0.0
            weighted = 0.0
        else:
            ev.utilization = ev.potential / ev.effective_capacity
            weighted = (read + self.resources.write_cost * write + malicious) / ev.effective_capacity
        ev.cpu = min(100.0, self.resources.cpu_idle + self.resources.cpu_scale * weighted)

        if ev.potential > ev.effective_capacity:
            ev.throttle = ev.effective_capacity / ev.potential

        if cfg.type == ComponentType.MESSAGE_QUEUE:
            # RAM depends on the processing rate; checked in _resolve_queue
            return ev

        ev.ram = self._ram(cfg.type, ev.utilization)
        if ev.ram > 100.0 and not ev.in_grace:
            ev.crash(CRASH_OOM)
        return ev

    @staticmethod
    def _base_capacity(cfg: ComponentConfig, read: float, write: float) -> float:
        if cfg.is_unlimited:
            return INF
        if cfg.type == ComponentType.DATABASE and cfg.is_master_slave:
            legit = read + write
            read_share = read / legit if legit > 0 else 1.0
            return cfg.max_qps * (read_share * (1 + cfg.slave_count) + (1 - read_share))
        return cfg.max_qps

    def _apply_scaling(
        self,
        ev: NodeEvaluation,
        cfg: ComponentConfig,
        state: EngineState,
        elapsed: float,
    ) -> None:
        ev.effective_capacity = ev.base_capacity
        if cfg.type not in SCALABLE_TYPES or not cfg.auto_scaling:
            return

        if ev.base_capacity == INF:
            target = 1
        else:
            target = math.ceil(ev.potential / (ev.base_capacity * cfg.scale_up_threshold))
            target = min(cfg.max_replicas, max(1, target))

        prior = state.replica_start_times.get(cfg.id, ())
        starts = tuple(prior[i] if i < len(prior) else float(elapsed) for i in range(target))

        active = 1
        for start in starts[1:]:
            if elapsed - start >= self.capacity.replica_warmup_seconds:
                active += 1

        ev.replica_target = target
        ev.active_replicas = active
        ev.replica_starts = starts
        ev.extra_replica_cost = (target - 1) * cfg.operational_cost
        ev.effective_capacity = ev.base_capacity * active

    def _ram(self, comp_type: ComponentType, utilization: float) -> float:
        r = self.resources
        if comp_type in CACHING_TYPES:
            return r.ram_cache_base + r.ram_cache_scale * utilization
        if comp_type in STORE_TYPES:
            return r.ram_store_base + r.ram_store_scale * utilization
        return r.ram_default_base + r.ram_default_scale * utilization

    def _resolve_queue(
        self,
        ev: NodeEvaluation,
        topology: TopologyGraph,
        evaluations: List[NodeEvaluation],
        potential: "PotentialLoad",
    ) -> None:
        cfg = topology.config(ev.index)
        if ev.crashed:
            return

        downstream = sum(
            evaluations[c].base_capacity
            for c in topology.successors_of(ev.index)
            if not evaluations[c].crashed
        )
        own = INF if cfg.is_unlimited else cfg.max_qps
        ev.processing_rate = min(own, downstream)

        ev.expected_inflow = (potential.read[ev.index] + potential.write[ev.index]) * ev.throttle
        projected = max(0.0, ev.prior_backlog + ev.expected_inflow - ev.processing_rate)
        ev.ram = self.resources.ram_queue_base + projected / self.resources.ram_queue_backlog_divisor
        if ev.ram > 100.0 and not ev.in_grace:
            logger.info("Queue %s out of memory (projected backlog %.0f)", cfg.id, projected)
            ev.crash(CRASH_OOM)

    # ------------------------------------------------------------------
    # Queue rates
    # ------------------------------------------------------------------

    @staticmethod
    def planned_queue_rates(topology: TopologyGraph, state: EngineState) -> Dict[int, float]:
        """
        Processing rate of every queue not already crashed, from the nominal
        capacity of its consumers. Used by pass 1, before any node has been
        evaluated; the evaluated rates are never higher.
        """
        rates: Dict[int, float] = {}
        for idx in topology.indices_of_type(ComponentType.MESSAGE_QUEUE):
            cfg = topology.config(idx)
            if cfg.id in state.crashed:
                continue
            downstream = sum(
                topology.config(c).nominal_capacity
                for c in topology.successors_of(idx)
                if topology.config(c).id not in state.crashed
            )
            own = INF if cfg.is_unlimited else cfg.max_qps
            rates[idx] = min(own, downstream)
        return rates

    @staticmethod
    def queue_rates(topology: TopologyGraph, evaluations: List[NodeEvaluation]) -> Dict[int, float]:
        return {
            idx: evaluations[idx].processing_rate
            for idx in topology.indices_of_type(ComponentType.MESSAGE_QUEUE)
            if not evaluations[idx].crashed
        }

    def settle_queues(
        self,
        topology: TopologyGraph,
        evaluations: List[NodeEvaluation],
        inflow: Dict[int, float],
        released: Dict[int, float],
        delay_ceiling_ms: float,
    ) -> Dict[int, Tuple[float, float]]:
        """
        Close out every queue after pass 2.

        Whatever a queue received or carried over and did not release stays
        queued: new backlog = prior backlog + inflow - released.

        Returns:
            index -> (new backlog, queueing delay in ms). A crashed queue keeps
            its prior backlog and adds no delay.
        """
        settled: Dict[int, Tuple[float, float]] = {}
        for idx in topology.indices_of_type(ComponentType.MESSAGE_QUEUE):
            ev = evaluations[idx]
            if ev.crashed:
                settled[idx] = (ev.prior_backlog, 0.0)
                continue

            backlog = max(0.0, ev.prior_backlog + inflow.get(idx, 0.0) - released.get(idx, 0.0))
            if backlog <= 0:
                delay = 0.0
            elif ev.processing_rate <= 0:
                delay = delay_ceiling_ms
            else:
                delay = min(delay_ceiling_ms, backlog / ev.processing_rate * 1000.0)
            settled[idx] = (backlog, delay)
        return settled

    @staticmethod
    def pull_shares(
        topology: TopologyGraph,
        queue_idx: int,
        output: float,
        skip: AbstractSet[int] = frozenset(),
    ) -> List[float]:
        """
        Per-consumer fraction of a pull queue's output.

        Consumers pull equal amounts up to their own capacity ceiling; what a
        full consumer cannot take is split again among the rest. Consumers in
        ``skip`` (crashed) pull nothing.
        """
        consumers = topology.successors_of(queue_idx)
        shares = [0.0] * len(consumers)
        if output <= 0:
            return shares

        pulling = [i for i, c in enumerate(consumers) if c not in skip]
        remaining = output
        while pulling and remaining > 0:
            even = remaining / len(pulling)
            still_pulling = []
            for i in pulling:
                take = min(even, topology.config(consumers[i]).max_potential_capacity - shares[i])
                shares[i] += take
                remaining -= take
                if take >= even:
                    still_pulling.append(i)
            if len(still_pulling) == len(pulling):
                break
            pulling = still_pulling
        return [s / output for s in shares]
